from exam_portal.extraction.answers import (
    extract_answers,
    extract_answers_with_strategy,
    extract_block_answers,
    extract_labeled_answers,
    extract_numbered_answers,
    extract_paragraph_answers,
)


def test_question_blocks_are_split_on_each_header() -> None:
    result = extract_answers_with_strategy("Question 1: A\nQuestion 2: B", 2)
    assert result.answers == {1: "A", 2: "B"}
    assert result.strategy == "block"


def test_block_header_is_case_insensitive_and_accepts_period() -> None:
    text = "QUESTION 1. Encapsulation hides state.\nquestion 2. Use a loop from the end."
    assert extract_answers(text, 2) == {1: "Encapsulation hides state.", 2: "Use a loop from the end."}


def test_block_answer_keeps_inner_newlines_and_trims_edges() -> None:
    text = "Question 1:\n  line one\n  line two  \n\nQuestion 2: done"
    assert extract_answers(text, 2) == {1: "line one\n  line two", 2: "done"}


def test_text_before_first_header_is_ignored() -> None:
    text = "Student: Jane Doe\nQuestion 1: Heap is dynamic"
    assert extract_answers(text, 1) == {1: "Heap is dynamic"}


def test_leading_zeros_are_normalized() -> None:
    assert extract_answers("Question 07: X", 10) == {7: "X"}


def test_out_of_range_numbers_are_dropped() -> None:
    assert extract_block_answers("Question 5: X", 3) == {}
    assert extract_answers("Question 5: X", 3) == {}
    assert extract_answers("Question 0: zero\nQuestion 1: one", 3) == {1: "one"}


def test_out_of_range_question_blocks_fall_through_to_labeled_prefixes() -> None:
    result = extract_answers_with_strategy("Question 5: X\nAnswer 1: Y", 3)
    assert result.strategy == "labeled"
    assert result.answers == {1: "Y"}


def test_out_of_range_question_blocks_fall_through_to_numbered_lines() -> None:
    result = extract_answers_with_strategy("Question 9: intro\n1. first\n2. second", 2)
    assert result.strategy == "numbered"
    assert result.answers == {1: "first", 2: "second"}


def test_very_long_block_number_is_out_of_range_but_still_a_boundary() -> None:
    result = extract_answers_with_strategy("Question " + "1" * 5000 + ": X\nQuestion 1: A", 3)
    assert result.strategy == "block"
    assert result.answers == {1: "A"}


def test_very_long_run_of_leading_zeros_is_normalized() -> None:
    assert extract_answers("Question " + "0" * 5000 + "7: X", 10) == {7: "X"}


def test_very_long_line_number_starts_a_discarded_question() -> None:
    result = extract_answers_with_strategy("1. a\n" + "9" * 5000 + ". b", 3)
    assert result.strategy == "numbered"
    assert result.answers == {1: "a"}
    assert extract_numbered_answers("1. a\n" + "9" * 5000 + ". b\ntail", 3) == {1: "a"}


def test_empty_block_does_not_count_as_a_match() -> None:
    result = extract_answers_with_strategy("Question 1:   ", 1)
    assert result.answers == {}
    assert result.strategy == "none"


def test_empty_block_is_skipped_but_later_blocks_are_kept() -> None:
    result = extract_answers_with_strategy("Question 1: Question 2: B", 2)
    assert result.strategy == "block"
    assert result.answers == {2: "B"}


def test_answer_prefix_used_when_no_question_headers() -> None:
    result = extract_answers_with_strategy("Answer 1: X", 1)
    assert result.answers == {1: "X"}
    assert result.strategy == "labeled"


def test_short_q_and_a_prefixes() -> None:
    text = "Q1: Paris\nQ. 2 Berlin\nA3. Rome\na. 4 Madrid"
    assert extract_labeled_answers(text, 4) == {1: "Paris", 2: "Berlin", 3: "Rome", 4: "Madrid"}


def test_markers_match_anywhere_in_the_text() -> None:
    assert extract_answers("Subquestion 1: foo", 1) == {1: "foo"}

    result = extract_answers_with_strategy("Answer 1: the data 2 rows", 2)
    assert result.strategy == "labeled"
    assert result.answers == {1: "the dat", 2: "rows"}


def test_numbered_lines_with_mixed_separators() -> None:
    result = extract_answers_with_strategy("1. foo\n2) bar\n3: baz", 3)
    assert result.answers == {1: "foo", 2: "bar", 3: "baz"}
    assert result.strategy == "numbered"


def test_numbered_line_continuation_joins_with_single_space() -> None:
    text = "1. Start of answer\ncontinued line\n2. Next answer"
    assert extract_answers(text, 2) == {1: "Start of answer continued line", 2: "Next answer"}


def test_numbered_lines_skip_preamble_and_blank_lines() -> None:
    text = "Name: Sam\n\n1.\n   first on its own line  \n\n2 second\n"
    assert extract_numbered_answers(text, 2) == {1: "first on its own line", 2: "second"}


def test_numbered_line_without_text_is_not_committed() -> None:
    assert extract_numbered_answers("1.\n2. two", 2) == {2: "two"}


def test_numbered_line_out_of_range_is_discarded() -> None:
    assert extract_numbered_answers("1. one\n9. nine", 3) == {1: "one"}


def test_digits_glued_to_text_are_not_numbered_lines() -> None:
    assert extract_numbered_answers("2024was a year", 3000) == {}


def test_strategies_are_never_combined() -> None:
    text = "Question 1: Alpha\n2. Beta"
    result = extract_answers_with_strategy(text, 2)
    assert result.strategy == "block"
    assert result.answers == {1: "Alpha\n2. Beta"}


def test_paragraph_fallback_only_when_enabled() -> None:
    text = "Some intro words about nothing\n\nMy first answer is long enough\n\n\nshort\n\nSecond answer text goes here"
    assert extract_answers(text, 2) == {}

    result = extract_answers_with_strategy(text, 2, paragraph_fallback=True)
    assert result.strategy == "paragraph"
    assert result.answers == {1: "Some intro words about nothing", 2: "My first answer is long enough"}


def test_paragraph_fallback_does_not_run_after_a_match() -> None:
    text = "1. short\n\nA much longer paragraph that would otherwise be picked"
    result = extract_answers_with_strategy(text, 2, paragraph_fallback=True)
    assert result.strategy == "numbered"
    assert result.answers == {1: "short A much longer paragraph that would otherwise be picked"}


def test_paragraph_answers_drop_short_paragraphs() -> None:
    assert extract_paragraph_answers("tiny\n\nexactly10c\n\nlong enough text", 5) == {1: "long enough text"}
    assert extract_paragraph_answers("long enough text", 0) == {}


def test_empty_and_zero_count_inputs_return_empty() -> None:
    assert extract_answers("", 3) == {}
    assert extract_answers("Question 1: A", 0) == {}
    assert extract_answers("Question 1: A", -1) == {}


def test_extraction_is_deterministic() -> None:
    text = "Q1: first\nQ2: second"
    assert extract_answers(text, 2) == extract_answers(text, 2)
