from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from threading import Lock
from time import perf_counter

from exam_portal.config import get_settings
from exam_portal.extraction.answers import ExtractionResult, extract_answers_with_strategy
from exam_portal.models.schemas import AnswerSheet, Exam, SubmitResponse
from exam_portal.observability.metrics import get_metrics

logger = logging.getLogger(__name__)


class QuestionNotFoundError(ValueError):
    pass


class SheetLockedError(ValueError):
    """The sheet was already submitted and no longer accepts edits."""


def count_words(text: str) -> int:
    return len(text.split())


@dataclass
class _SheetState:
    answers: dict[int, str] = field(default_factory=dict)
    submitted_at: datetime | None = None


@dataclass(frozen=True)
class ImportOutcome:
    sheet: AnswerSheet
    extraction: ExtractionResult
    bound_question_ids: list[int]


class AnswerSheetStore:
    """Process-local answer sheets keyed by exam id; answers inside are keyed by question id."""

    def __init__(self) -> None:
        self._lock = Lock()
        self._sheets: dict[int, _SheetState] = {}

    def _state(self, exam_id: int) -> _SheetState:
        return self._sheets.setdefault(exam_id, _SheetState())

    def _to_sheet(self, exam: Exam, state: _SheetState) -> AnswerSheet:
        answers = {q.id: state.answers.get(q.id, "") for q in exam.questions}
        return AnswerSheet(
            exam_id=exam.id,
            answers=answers,
            word_counts={qid: count_words(text) for qid, text in answers.items()},
            submitted_at=state.submitted_at,
        )

    def get_sheet(self, exam: Exam) -> AnswerSheet:
        with self._lock:
            return self._to_sheet(exam, self._state(exam.id))

    def set_answer(self, exam: Exam, question_id: int, text: str) -> AnswerSheet:
        if question_id not in {q.id for q in exam.questions}:
            raise QuestionNotFoundError("Question not found")

        with self._lock:
            state = self._state(exam.id)
            if state.submitted_at is not None:
                raise SheetLockedError("Exam already submitted")
            state.answers[question_id] = text
            return self._to_sheet(exam, state)

    def apply_answer_map(self, exam: Exam, answer_map: dict[int, str]) -> tuple[AnswerSheet, list[int]]:
        """
        Bind extracted answers by position: number N fills the Nth question.

        The whole map is written under one lock acquisition; questions the map
        does not mention keep whatever text they already had.
        """
        bound: dict[int, str] = {}
        for number in sorted(answer_map):
            if 1 <= number <= len(exam.questions):
                bound[exam.questions[number - 1].id] = answer_map[number]

        with self._lock:
            state = self._state(exam.id)
            if state.submitted_at is not None:
                raise SheetLockedError("Exam already submitted")
            state.answers = {**state.answers, **bound}
            return self._to_sheet(exam, state), list(bound)

    def submit(self, exam: Exam) -> SubmitResponse:
        now = datetime.now(timezone.utc)
        with self._lock:
            state = self._state(exam.id)
            if state.submitted_at is not None:
                raise SheetLockedError("Exam already submitted")
            state.submitted_at = now
            answered = sum(1 for q in exam.questions if state.answers.get(q.id, "").strip())

        logger.info(
            "answers.submitted",
            extra={"exam_id": exam.id, "answered_count": answered, "question_count": len(exam.questions)},
        )
        return SubmitResponse(
            exam_id=exam.id,
            answered_count=answered,
            question_count=len(exam.questions),
            submitted_at=now,
        )

    def reset(self) -> None:
        with self._lock:
            self._sheets = {}


_STORE: AnswerSheetStore | None = None


def get_answer_store() -> AnswerSheetStore:
    global _STORE
    if _STORE is None:
        _STORE = AnswerSheetStore()
    return _STORE


def run_extraction(text: str, question_count: int, paragraph_fallback: bool) -> ExtractionResult:
    """Run the extractor and record timing/strategy metrics around it."""
    start = perf_counter()
    result = extract_answers_with_strategy(text, question_count, paragraph_fallback=paragraph_fallback)
    elapsed_ms = (perf_counter() - start) * 1000.0
    get_metrics().observe_extraction(elapsed_ms=elapsed_ms, strategy=result.strategy, answer_count=len(result.answers))
    return result


def import_answers(exam: Exam, text: str, store: AnswerSheetStore | None = None) -> ImportOutcome:
    store = store or get_answer_store()
    settings = get_settings()

    extraction = run_extraction(text, len(exam.questions), settings.enable_paragraph_fallback)
    sheet, bound_ids = store.apply_answer_map(exam, extraction.answers)

    logger.info(
        "answers.import",
        extra={
            "exam_id": exam.id,
            "strategy": extraction.strategy,
            "extracted_count": len(extraction.answers),
            "question_count": len(exam.questions),
            "text_chars": len(text),
        },
    )
    return ImportOutcome(sheet=sheet, extraction=extraction, bound_question_ids=bound_ids)
