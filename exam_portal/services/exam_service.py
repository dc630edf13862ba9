from __future__ import annotations

import json
import logging
from functools import lru_cache
from pathlib import Path

from pydantic import TypeAdapter, ValidationError

from exam_portal.config import get_settings
from exam_portal.models.schemas import Exam, ExamSummary, Question

logger = logging.getLogger(__name__)

_SAMPLE_EXAMS: list[Exam] = [
    Exam(
        id=1,
        title="Midterm Exam",
        questions=[
            Question(
                id=1,
                text="Explain the concept of Object-Oriented Programming and its main principles.",
                rubric="Points: 10. Should cover encapsulation, inheritance, polymorphism, and abstraction.",
            ),
            Question(
                id=2,
                text="Write a function that reverses a string without using built-in reverse methods.",
                rubric="Points: 15. Code should be clean, efficient, and handle edge cases.",
            ),
            Question(
                id=3,
                text="What are the differences between stack and heap memory allocation?",
                rubric="Points: 10. Should explain key differences, use cases, and implications.",
            ),
        ],
    )
]

_EXAM_LIST = TypeAdapter(list[Exam])


class ExamNotFoundError(ValueError):
    pass


def load_exams(path: Path) -> list[Exam]:
    try:
        payload = json.loads(path.read_text(encoding="utf-8"))
        exams = _EXAM_LIST.validate_python(payload)
    except (OSError, json.JSONDecodeError, ValidationError) as exc:
        raise ValueError(f"Could not load exams from {path}: {exc}") from exc

    seen: set[int] = set()
    for exam in exams:
        if exam.id in seen:
            raise ValueError(f"Duplicate exam id {exam.id} in {path}")
        seen.add(exam.id)
        question_ids = [q.id for q in exam.questions]
        if len(set(question_ids)) != len(question_ids):
            raise ValueError(f"Exam {exam.id} has duplicate question ids")
    return exams


@lru_cache(maxsize=1)
def get_catalog() -> dict[int, Exam]:
    path = get_settings().exams_path
    exams = load_exams(path) if path is not None else _SAMPLE_EXAMS
    logger.info("exams.loaded", extra={"exam_count": len(exams), "source": str(path) if path else "sample"})
    return {exam.id: exam for exam in exams}


def list_exams() -> list[ExamSummary]:
    return [
        ExamSummary(id=exam.id, title=exam.title, question_count=len(exam.questions))
        for exam in get_catalog().values()
    ]


def get_exam(exam_id: int) -> Exam:
    exam = get_catalog().get(exam_id)
    if exam is None:
        raise ExamNotFoundError("Exam not found")
    return exam
