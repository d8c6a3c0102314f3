"""
Exam scoring command line.

Usage:
    # Grade an attempt and store the result
    python -m exam_scoring grade --questions bank.jsonl --responses attempt.json \\
        --exam exam.json --attempt-id a-1 --output-dir results --report

    # Assemble a question set for an exam
    python -m exam_scoring select --questions bank.jsonl --exam exam.json --seed 7
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import List, Optional

from exam_scoring import __version__
from exam_scoring.core.schemas import ValidationError
from exam_scoring.core.utils import load_exam_json, load_questions_jsonl, load_responses_json
from exam_scoring.grading import (
    InvalidResponseShape,
    MisconfiguredPolicy,
    MisconfiguredQuestion,
    ScoringConfig,
    grade_attempt,
)
from exam_scoring.output import JsonResultStore, StoreError, render_result_sheet
from exam_scoring.selection import (
    InsufficientQuestions,
    SelectionConfig,
    SelectionConfigError,
    check_supply,
    select_questions,
)

logger = logging.getLogger("exam_scoring")


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="exam-scoring",
        description="Score exam attempts and assemble question sets",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    sub = parser.add_subparsers(dest="command", required=True)

    grade = sub.add_parser("grade", help="Grade a completed attempt")
    grade.add_argument("--questions", type=Path, required=True, help="Question set (JSONL)")
    grade.add_argument("--responses", type=Path, required=True, help="Submitted responses (JSON)")
    grade.add_argument("--exam", type=Path, required=True, help="Exam record (JSON)")
    grade.add_argument("--attempt-id", required=True)
    grade.add_argument("--output-dir", type=Path, required=True)
    grade.add_argument("--report", action="store_true", help="Also render a PDF result sheet")
    grade.add_argument("--strict", action="store_true", help="Reject stray responses and use full schema checks")
    grade.add_argument(
        "--fail-on-misconfigured",
        action="store_true",
        help="Abort instead of scoring misconfigured questions as 0",
    )
    grade.add_argument("--workers", type=int, default=1, help="Threads per attempt")

    select = sub.add_parser("select", help="Assemble a question set for an exam")
    select.add_argument("--questions", type=Path, required=True, help="Question bank (JSONL)")
    select.add_argument("--exam", type=Path, required=True, help="Exam record (JSON)")
    select.add_argument("--seed", type=int, default=None)
    return parser


def _grade(args: argparse.Namespace) -> int:
    exam = load_exam_json(args.exam, strict=args.strict)
    questions = load_questions_jsonl(args.questions, strict=args.strict)
    responses = load_responses_json(args.responses, strict=args.strict)

    policy = MisconfiguredPolicy.FAIL if args.fail_on_misconfigured else MisconfiguredPolicy.SKIP
    config = ScoringConfig(misconfigured_policy=policy, max_workers=args.workers)

    graded = grade_attempt(args.attempt_id, exam, questions, responses, config, strict=args.strict)
    JsonResultStore(args.output_dir).save(graded)

    output = {
        "attempt_id": graded.attempt_id,
        "summary": graded.summary.to_dict(),
        "warnings": list(graded.warnings),
    }
    if args.report:
        report_path = args.output_dir / f"{graded.attempt_id}.pdf"
        render_result_sheet(graded, exam, report_path)
        output["report"] = str(report_path)

    print(json.dumps(output, indent=2))
    return 0


def _select(args: argparse.Namespace) -> int:
    exam = load_exam_json(args.exam)
    pool = load_questions_jsonl(args.questions)
    config = SelectionConfig.from_exam(exam, seed=args.seed)

    report = check_supply(pool, config)
    selected = select_questions(pool, config)
    print(json.dumps({
        "exam_id": exam.id,
        "question_ids": [q.id for q in selected],
        "warnings": list(report.warnings),
    }, indent=2))
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
    )

    try:
        if args.command == "grade":
            return _grade(args)
        return _select(args)
    except InsufficientQuestions as e:
        logger.error(f"{e}. Add active {e.question_type.value} questions or lower the count.")
        return 2
    except SelectionConfigError as e:
        logger.error(f"Invalid exam configuration: {e}")
        return 2
    except MisconfiguredQuestion as e:
        logger.error(f"{e}. Fix the answer key and re-grade.")
        return 2
    except (ValidationError, InvalidResponseShape, ValueError) as e:
        logger.error(f"Invalid input: {e}")
        return 1
    except (OSError, StoreError) as e:
        logger.error(str(e))
        return 1


if __name__ == "__main__":
    sys.exit(main())
