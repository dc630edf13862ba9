from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field

from exam_portal.extraction.answers import Strategy


class Question(BaseModel):
    id: int
    text: str
    rubric: str = ""


class Exam(BaseModel):
    id: int
    title: str
    questions: list[Question] = Field(default_factory=list)


class ExamSummary(BaseModel):
    id: int
    title: str
    question_count: int


class ExamsResponse(BaseModel):
    exams: list[ExamSummary]


class AnswerSheet(BaseModel):
    exam_id: int
    answers: dict[int, str]
    word_counts: dict[int, int]
    submitted_at: datetime | None = None


class AnswerUpdate(BaseModel):
    text: str


class ImportResponse(BaseModel):
    sheet: AnswerSheet
    extracted: dict[int, str]
    extracted_count: int
    bound_question_ids: list[int]
    strategy: Strategy
    message: str | None = None


class SubmitResponse(BaseModel):
    exam_id: int
    answered_count: int
    question_count: int
    submitted_at: datetime


class ExtractRequest(BaseModel):
    text: str
    question_count: int = Field(ge=0)
    paragraph_fallback: bool = False


class ExtractResponse(BaseModel):
    answers: dict[int, str]
    strategy: Strategy
