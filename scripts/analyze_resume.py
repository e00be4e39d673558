"""Analyse a plain-text resume and print the report, JSON, or editable resume.

Usage
-----

    python scripts/analyze_resume.py \
        --resume data/resume.txt \
        --job data/job_description.txt \
        --format report

Without ``--response`` the resume is sent to Gemini (``GEMINI_API_KEY`` must be
set). Pass ``--response saved_answer.txt`` to re-parse a stored AI answer
offline.
"""

from __future__ import annotations

import argparse
import json
import logging
from pathlib import Path
import sys
from typing import List, Optional

ROOT = Path(__file__).resolve().parents[1]
root_str = str(ROOT)
if root_str not in sys.path:
    sys.path.insert(0, root_str)

from data_loader import load_resume  # noqa: E402
from nlp import extractor, sectionizer  # noqa: E402
from services.analysis import analyze_resume, assemble_analysis  # noqa: E402
from services.editable_resume import project_editable_resume  # noqa: E402
from services.errors import ResumeAnalysisError  # noqa: E402
from services.models import AnalysisResult  # noqa: E402
from services.report import render_report  # noqa: E402

logger = logging.getLogger(__name__)


def _read_optional(path: Optional[str]) -> Optional[str]:
    if not path:
        return None
    return Path(path).read_text(encoding="utf-8", errors="ignore")


def _render(result: AnalysisResult, fmt: str) -> str:
    if fmt == "json":
        return json.dumps(result.to_dict(), indent=2, ensure_ascii=False)
    if fmt == "editable":
        return json.dumps(project_editable_resume(result).to_dict(), indent=2, ensure_ascii=False)
    return render_report(result)


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Analyse a plain-text resume")
    parser.add_argument("--resume", required=True, help="Path to the resume (.txt)")
    parser.add_argument("--job", default=None, help="Optional job description text file")
    parser.add_argument("--response", default=None, help="Saved AI response to parse instead of calling Gemini")
    parser.add_argument("--format", choices=["report", "json", "editable"], default="report")
    parser.add_argument("--output", default=None, help="Write to this file instead of stdout")
    parser.add_argument("--debug", action="store_true", help="Print parser step traces")
    args = parser.parse_args(argv)

    extractor.set_debug(args.debug)
    sectionizer.set_debug(args.debug)
    try:
        resume_text = load_resume(args.resume)
        job_description = _read_optional(args.job)
        saved_response = _read_optional(args.response)
        if saved_response is not None:
            result = assemble_analysis(resume_text, saved_response, job_description)
        else:
            result = analyze_resume(resume_text, job_description)
    except (FileNotFoundError, ValueError, ResumeAnalysisError) as err:
        print(f"Error: {err}", file=sys.stderr)
        return 1
    finally:
        extractor.set_debug(False)
        sectionizer.set_debug(False)

    rendered = _render(result, args.format)
    if args.output:
        output_path = Path(args.output)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        output_path.write_text(rendered, encoding="utf-8")
        logger.info("Wrote %s output to %s", args.format, output_path)
    else:
        print(rendered)
    return 0


if __name__ == "__main__":
    sys.exit(main())
