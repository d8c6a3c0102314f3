"""
Module: output.report

Purpose:
    Render a graded attempt as a PDF result sheet: summary, difficulty
    breakdown, timing analytics and one line per question with feedback.

Key Functions:
    - render_result_sheet(): Create the result sheet PDF

Dependencies:
    - reportlab: PDF generation
"""

from __future__ import annotations

import logging
import textwrap
from pathlib import Path

from reportlab.lib.pagesizes import A4
from reportlab.pdfgen import canvas

from exam_scoring.core.models import Exam
from exam_scoring.grading.controller import GradedAttempt

logger = logging.getLogger(__name__)

# Constants
A4_WIDTH, A4_HEIGHT = A4
MARGIN = 50
LINE_HEIGHT = 16
FEEDBACK_WRAP = 95


class _Sheet:
    """Top-down line writer that starts a new page when the current one fills."""

    def __init__(self, c: canvas.Canvas):
        self.c = c
        self.y = A4_HEIGHT - MARGIN
        self.pages = 1

    def line(self, text: str, font: str = "Helvetica", size: int = 10, indent: int = 0) -> None:
        if self.y < MARGIN:
            self.c.showPage()
            self.pages += 1
            self.y = A4_HEIGHT - MARGIN
        self.c.setFont(font, size)
        self.c.drawString(MARGIN + indent, self.y, text)
        self.y -= LINE_HEIGHT

    def gap(self) -> None:
        self.y -= LINE_HEIGHT / 2


def render_result_sheet(graded: GradedAttempt, exam: Exam, output_path: Path) -> int:
    """
    Write the result sheet for a graded attempt.

    Args:
        graded: Result of grade_attempt()
        exam: Exam the attempt belongs to
        output_path: Path to write the PDF

    Returns:
        Number of pages written

    Example:
        >>> render_result_sheet(graded, exam, Path("output/a-1.pdf"))
        1
    """
    output_path.parent.mkdir(parents=True, exist_ok=True)
    summary = graded.summary

    c = canvas.Canvas(str(output_path), pagesize=A4)
    c.setTitle(f"{exam.title} - attempt {graded.attempt_id}")
    sheet = _Sheet(c)

    sheet.line(exam.title or exam.id, font="Helvetica-Bold", size=16)
    sheet.line(f"Attempt {graded.attempt_id}", size=10)
    sheet.gap()

    verdict = "PASSED" if summary.is_passed else "NOT PASSED"
    sheet.line(
        f"{summary.obtained_marks} / {summary.total_marks} marks  "
        f"({summary.percentage:.2f}%)  Grade {summary.grade}  {verdict}",
        font="Helvetica-Bold",
        size=12,
    )
    sheet.line(
        f"Correct {summary.correct_count}   Wrong {summary.wrong_count}   "
        f"Unanswered {summary.unanswered_count}   Pass mark {exam.passing_marks}"
    )
    sheet.line(
        f"Accuracy {summary.accuracy:.2f}%   Consistency {summary.consistency_score:.2f}   "
        f"Difficulty score {summary.difficulty_score:.2f}"
    )
    sheet.gap()

    sheet.line("By difficulty", font="Helvetica-Bold", size=11)
    for tier, tally in summary.per_difficulty.items():
        sheet.line(f"{tier.value.title()}: {tally.correct} / {tally.total}", indent=12)
    sheet.gap()

    timing = summary.timing
    sheet.line("Timing", font="Helvetica-Bold", size=11)
    sheet.line(
        f"Time spent {timing.total_time_spent:.0f}s of {timing.allotted_seconds}s   "
        f"Average {timing.average_time_per_question:.1f}s per question",
        indent=12,
    )
    sheet.line(
        f"Efficiency {timing.time_efficiency:.2f}   Speed {timing.speed_score:.2f} per minute",
        indent=12,
    )
    sheet.gap()

    sheet.line("Questions", font="Helvetica-Bold", size=11)
    for number, score in enumerate(graded.scores, start=1):
        sheet.line(
            f"{number}. {score.question_id}  [{score.question_type.value}]  "
            f"{score.marks_awarded} / {score.max_marks}  {score.outcome}",
            indent=12,
        )
        if score.feedback:
            for chunk in textwrap.wrap(score.feedback, FEEDBACK_WRAP):
                sheet.line(chunk, font="Helvetica-Oblique", size=9, indent=28)

    if graded.warnings:
        sheet.gap()
        sheet.line("Grading notes", font="Helvetica-Bold", size=11)
        for warning in graded.warnings:
            for chunk in textwrap.wrap(warning, FEEDBACK_WRAP):
                sheet.line(chunk, size=9, indent=12)

    c.showPage()
    c.save()
    logger.info(f"Rendered {sheet.pages}-page result sheet to {output_path}")
    return sheet.pages
