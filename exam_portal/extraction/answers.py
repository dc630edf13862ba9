from __future__ import annotations

import re
from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Literal

from exam_portal.extraction.markers import (
    BLOCK_MARKERS,
    DIGITS,
    LABELED_MARKERS,
    parse_question_number,
    split_marked_blocks,
)

Strategy = Literal["block", "labeled", "numbered", "paragraph", "none"]

_LINE_SEPARATORS = frozenset(".):")
_BLANK_LINES_RE = re.compile(r"\n\s*\n")
_MIN_PARAGRAPH_CHARS = 10


@dataclass(frozen=True)
class ExtractionResult:
    answers: dict[int, str] = field(default_factory=dict)
    strategy: Strategy = "none"


def _from_marked_blocks(text: str, question_count: int, tokens: Sequence[str]) -> dict[int, str]:
    answers: dict[int, str] = {}
    for block in split_marked_blocks(text, tokens):
        number = parse_question_number(block.digits, question_count)
        if not block.text or number is None:
            continue
        answers[number] = block.text
    return answers


def extract_block_answers(text: str, question_count: int) -> dict[int, str]:
    """`Question 3: ...` blocks, each running until the next `Question N` header."""
    return _from_marked_blocks(text, question_count, BLOCK_MARKERS)


def extract_labeled_answers(text: str, question_count: int) -> dict[int, str]:
    """Like the block pass, but also accepts `Answer N`, `Q N`, `Q. N`, `A N` and `A. N`."""
    return _from_marked_blocks(text, question_count, LABELED_MARKERS)


def _parse_numbered_line(line: str) -> tuple[str, str] | None:
    """Split `12) rest` into ("12", "rest"); None when the line is not numbered."""
    n = len(line)
    j = 0
    while j < n and line[j] in DIGITS:
        j += 1
    if j == 0:
        return None

    k = j
    while k < n and (line[k] in _LINE_SEPARATORS or line[k].isspace()):
        k += 1
    if k == j:
        return None
    return line[:j], line[k:]


def extract_numbered_answers(text: str, question_count: int) -> dict[int, str]:
    """
    Line-oriented pass for `1. foo` / `2) bar` / `3: baz` style documents.

    Unnumbered lines are folded into the answer that precedes them, joined
    with a single space. Lines before the first numbered line are ignored.
    An out-of-range number still starts a question; its text is dropped.
    """
    answers: dict[int, str] = {}
    current: str | None = None
    buffer = ""

    def commit() -> None:
        if current is None or not buffer:
            return
        number = parse_question_number(current, question_count)
        if number is not None:
            answers[number] = buffer.strip()

    for raw_line in text.split("\n"):
        line = raw_line.strip()
        parsed = _parse_numbered_line(line)
        if parsed is not None:
            commit()
            current, buffer = parsed
        elif current is not None and line:
            buffer = f"{buffer} {line}" if buffer else line

    commit()
    return answers


def extract_paragraph_answers(text: str, question_count: int) -> dict[int, str]:
    """Positional fallback: the first `question_count` substantial paragraphs, in order."""
    if question_count <= 0:
        return {}

    paragraphs = [p.strip() for p in _BLANK_LINES_RE.split(text)]
    kept = [p for p in paragraphs if len(p) > _MIN_PARAGRAPH_CHARS]
    return {index: paragraph for index, paragraph in enumerate(kept[:question_count], start=1)}


def extract_answers_with_strategy(
    text: str,
    question_count: int,
    *,
    paragraph_fallback: bool = False,
) -> ExtractionResult:
    """
    Map question numbers (1-based, positional) to answer text.

    Strategies run in fixed priority order and the first one that keeps at
    least one entry wins; results from different strategies are never merged.
    The paragraph pass only runs when `paragraph_fallback` is set and every
    marker/numbered pass came back empty.
    """
    if not text or question_count <= 0:
        return ExtractionResult()

    answers = extract_block_answers(text, question_count)
    if answers:
        return ExtractionResult(answers=answers, strategy="block")

    answers = extract_labeled_answers(text, question_count)
    if answers:
        return ExtractionResult(answers=answers, strategy="labeled")

    answers = extract_numbered_answers(text, question_count)
    if answers:
        return ExtractionResult(answers=answers, strategy="numbered")

    if paragraph_fallback:
        answers = extract_paragraph_answers(text, question_count)
        if answers:
            return ExtractionResult(answers=answers, strategy="paragraph")

    return ExtractionResult()


def extract_answers(text: str, question_count: int, *, paragraph_fallback: bool = False) -> dict[int, str]:
    return extract_answers_with_strategy(text, question_count, paragraph_fallback=paragraph_fallback).answers
