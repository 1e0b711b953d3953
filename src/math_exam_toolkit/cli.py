"""
Module: cli

Purpose:
    Command line entry point (``math-exam``).

Commands:
    - import FILE.docx [-o exam.json] [--time-limit N] [--no-images]
      [--diagnostics report.json]
    - score EXAM.json ANSWERS.json [--json]

Exit status is 1 when the document cannot be read, a file is missing or
invalid, or the import found no questions.
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import List, Optional

from . import __version__
from .core.schemas.validator import ValidationError
from .core.utils.serialization import load_answers_json, load_exam_json, save_exam_json
from .extractor.archive import ArchiveError
from .extractor.config import ExtractionConfig
from .extractor.pipeline import import_exam
from .scoring.calculator import calculate_score
from .scoring.grades import format_score, get_grade, total_correct_count, total_wrong_count

logger = logging.getLogger("math_exam_toolkit")


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="math-exam",
        description="Import Vietnamese math exams from Word documents and score submissions",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    sub = parser.add_subparsers(dest="command", required=True)

    imp = sub.add_parser("import", help="Import a .docx exam to JSON")
    imp.add_argument("document", type=Path, help="Path to the .docx file")
    imp.add_argument("-o", "--output", type=Path, help="Output JSON path (default: <document>.json)")
    imp.add_argument("--title", help="Exam title (default: file name)")
    imp.add_argument("--time-limit", type=int, default=ExtractionConfig.time_limit,
                     help="Time limit in minutes (default: %(default)s)")
    imp.add_argument("--no-images", action="store_true", help="Skip embedded images")
    imp.add_argument("--diagnostics", type=Path, help="Write the import diagnostics report here")

    score = sub.add_parser("score", help="Score a submission against an exam JSON")
    score.add_argument("exam", type=Path, help="Exam JSON written by 'import'")
    score.add_argument("answers", type=Path, help="JSON object of question number -> answer")
    score.add_argument("--json", action="store_true", help="Print the full breakdown as JSON")

    return parser


def _cmd_import(args: argparse.Namespace) -> int:
    config = ExtractionConfig(
        time_limit=args.time_limit,
        extract_images=not args.no_images,
    )
    result = import_exam(args.document, title=args.title, config=config)

    for warning in result.validation.warnings:
        logger.warning(warning)
    if result.diagnostics is not None and args.diagnostics:
        result.diagnostics.save(args.diagnostics)

    if not result.valid:
        for error in result.validation.errors:
            logger.error(error)
        return 1

    output = args.output or args.document.with_suffix(".json")
    save_exam_json(result.exam, output)

    counts = result.validation.section_counts
    logger.info(
        f"Saved {output}: {result.exam.question_count} questions "
        f"(PHẦN 1={counts[1]}, PHẦN 2={counts[2]}, PHẦN 3={counts[3]}), "
        f"{result.validation.with_answer} with answer key"
    )
    return 0


def _cmd_score(args: argparse.Namespace) -> int:
    exam = load_exam_json(args.exam)
    answers = load_answers_json(args.answers)
    breakdown = calculate_score(answers, exam)

    if args.json:
        print(json.dumps(breakdown.to_dict(), indent=2, ensure_ascii=False))
        return 0

    grade = get_grade(breakdown.total_score)
    print(f"Score: {format_score(breakdown.total_score)} / {format_score(breakdown.max_score)} "
          f"({breakdown.percentage}%) {grade}")
    print(f"  Multiple choice: {breakdown.multiple_choice.correct}/{breakdown.multiple_choice.total} "
          f"-> {format_score(breakdown.multiple_choice.points)}")
    print(f"  True/false:      {breakdown.true_false.correct} full, {breakdown.true_false.partial} partial "
          f"of {breakdown.true_false.total} -> {format_score(breakdown.true_false.points)}")
    print(f"  Short answer:    {breakdown.short_answer.correct}/{breakdown.short_answer.total} "
          f"-> {format_score(breakdown.short_answer.points)}")
    print(f"  Correct: {total_correct_count(breakdown)}, "
          f"wrong: {total_wrong_count(breakdown, exam.question_count)}")
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    args = _build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(message)s",
    )

    handlers = {"import": _cmd_import, "score": _cmd_score}
    try:
        return handlers[args.command](args)
    except (ArchiveError, FileNotFoundError) as e:
        logger.error(f"Error: {e}")
        return 1
    except ValidationError as e:
        logger.error(f"Invalid file: {e}")
        for detail in e.errors:
            logger.error(f"  {detail}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
