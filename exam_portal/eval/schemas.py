from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field

from exam_portal.models.schemas import Strategy


class EvalCase(BaseModel):
    case_id: str
    text: str
    question_count: int = Field(ge=0)
    paragraph_fallback: bool = False
    expected_answers: dict[int, str] = Field(default_factory=dict)
    expected_strategy: Strategy | None = None


class EvalCaseMetrics(BaseModel):
    exact_match: bool
    strategy_match: bool
    missing_numbers: list[int]
    unexpected_numbers: list[int]

    passed: bool


class EvalCaseResult(BaseModel):
    case_id: str
    question_count: int
    expected_answers: dict[int, str]
    expected_strategy: Strategy | None

    answers: dict[int, str]
    strategy: Strategy

    metrics: EvalCaseMetrics
    latency_ms: float


class EvalRunSummary(BaseModel):
    dataset_path: str
    started_at: datetime
    finished_at: datetime
    total_cases: int
    passed_cases: int
    pass_rate: float
    strategy_counts: dict[str, int]


class EvalRunReport(BaseModel):
    summary: EvalRunSummary
    results: list[EvalCaseResult]
