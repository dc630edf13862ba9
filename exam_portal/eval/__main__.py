from __future__ import annotations

import argparse

from exam_portal.eval.runner import run_eval
from exam_portal.observability.logging import configure_logging


def main() -> None:
    parser = argparse.ArgumentParser(description="Answer extraction offline evaluation harness")
    parser.add_argument("--dataset", default="eval/golden.jsonl", help="Path to JSONL dataset")
    parser.add_argument("--out", default="eval/results/latest.json", help="Path to write JSON report")
    parser.add_argument("--max-cases", type=int, default=None, help="Limit number of cases to run")
    parser.add_argument("--log-level", default="WARNING", help="Log level for per-case diagnostics")
    args = parser.parse_args()

    configure_logging(args.log_level)
    report = run_eval(
        dataset_path=args.dataset,
        out_path=args.out,
        max_cases=args.max_cases,
    )
    summary = report.summary
    print(f"{summary.passed_cases}/{summary.total_cases} cases passed ({summary.pass_rate:.0%}) -> {args.out}")


if __name__ == "__main__":
    main()
