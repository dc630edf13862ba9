from __future__ import annotations

import json
import logging
from collections import Counter
from datetime import datetime, timezone
from pathlib import Path
from time import perf_counter

from exam_portal.eval.schemas import (
    EvalCase,
    EvalCaseMetrics,
    EvalCaseResult,
    EvalRunReport,
    EvalRunSummary,
)
from exam_portal.extraction.answers import extract_answers_with_strategy

logger = logging.getLogger(__name__)


def load_cases(dataset_path: str) -> list[EvalCase]:
    path = Path(dataset_path)
    lines = path.read_text(encoding="utf-8").splitlines()
    cases: list[EvalCase] = []
    for line in lines:
        if not line.strip():
            continue
        payload = json.loads(line)
        cases.append(EvalCase.model_validate(payload))
    return cases


def score_case(case: EvalCase, answers: dict[int, str], strategy: str) -> EvalCaseMetrics:
    expected = case.expected_answers
    exact_match = answers == expected
    strategy_match = case.expected_strategy is None or case.expected_strategy == strategy
    return EvalCaseMetrics(
        exact_match=exact_match,
        strategy_match=strategy_match,
        missing_numbers=sorted(set(expected) - set(answers)),
        unexpected_numbers=sorted(set(answers) - set(expected)),
        passed=exact_match and strategy_match,
    )


def run_eval(
    dataset_path: str,
    out_path: str,
    *,
    max_cases: int | None = None,
) -> EvalRunReport:
    started_at = datetime.now(timezone.utc)

    cases = load_cases(dataset_path)
    if max_cases is not None:
        cases = cases[: max_cases]

    results: list[EvalCaseResult] = []
    for case in cases:
        t0 = perf_counter()
        extraction = extract_answers_with_strategy(
            case.text,
            case.question_count,
            paragraph_fallback=case.paragraph_fallback,
        )
        latency_ms = (perf_counter() - t0) * 1000.0

        metrics = score_case(case, extraction.answers, extraction.strategy)
        if not metrics.passed:
            logger.info(
                "eval.case_failed",
                extra={"case_id": case.case_id, "strategy": extraction.strategy, "missing": metrics.missing_numbers},
            )

        results.append(
            EvalCaseResult(
                case_id=case.case_id,
                question_count=case.question_count,
                expected_answers=case.expected_answers,
                expected_strategy=case.expected_strategy,
                answers=extraction.answers,
                strategy=extraction.strategy,
                metrics=metrics,
                latency_ms=latency_ms,
            )
        )

    finished_at = datetime.now(timezone.utc)
    passed_cases = sum(1 for r in results if r.metrics.passed)
    total_cases = len(results)
    pass_rate = (passed_cases / total_cases) if total_cases else 0.0

    report = EvalRunReport(
        summary=EvalRunSummary(
            dataset_path=dataset_path,
            started_at=started_at,
            finished_at=finished_at,
            total_cases=total_cases,
            passed_cases=passed_cases,
            pass_rate=pass_rate,
            strategy_counts=dict(Counter(r.strategy for r in results)),
        ),
        results=results,
    )

    out = Path(out_path)
    out.parent.mkdir(parents=True, exist_ok=True)
    out.write_text(report.model_dump_json(indent=2), encoding="utf-8")

    return report
