#!/usr/bin/env python3
"""
LRID — Score a single case from the command line.

Usage examples
--------------
  # Print the scoring report for a stored submission
  python scripts/score_case.py data/responses_LRID-20250101-0042.json

  # Build the full review draft against a specific instrument
  python scripts/score_case.py responses.json --instrument schemas/instrument.v1.json --draft

  # Write the result to a file instead of stdout
  python scripts/score_case.py responses.json --draft --out data/draft_LRID-20250101-0042.json
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

# Ensure the project root is importable
sys.path.insert(0, ".")

from lrid.config import get_settings
from lrid.logging_config import configure_logging
from lrid.services.draft_service import DraftService
from lrid.services.instrument_service import InstrumentIntegrityError, load_instrument
from lrid.services.scoring_service import ScoringService
from lrid.services.submission_service import SubmissionRejected, load_submission


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Score one LRID submission.")
    parser.add_argument("responses", type=Path, help="Submission JSON file")
    parser.add_argument(
        "--instrument",
        type=Path,
        default=None,
        help="Compiled instrument JSON (default: LRID_INSTRUMENT_PATH)",
    )
    parser.add_argument(
        "--draft",
        action="store_true",
        help="Emit the review draft (validation + bands) instead of the bare scoring report",
    )
    parser.add_argument("--out", type=Path, default=None, help="Write JSON here instead of stdout")
    parser.add_argument("--verbose", action="store_true", help="Log at DEBUG level")
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging(level="DEBUG" if args.verbose else None)

    instrument_path = args.instrument or Path(get_settings().INSTRUMENT_PATH)
    try:
        instrument = load_instrument(instrument_path)
    except InstrumentIntegrityError as exc:
        print(f"Instrument rejected: {exc}", file=sys.stderr)
        return 1

    try:
        submission = load_submission(args.responses)
    except SubmissionRejected as exc:
        print(f"Submission rejected: {exc}", file=sys.stderr)
        return 2

    if args.draft:
        result = DraftService(instrument).build_draft(submission)
    else:
        result = ScoringService(instrument).run(submission)

    output = result.model_dump_json(indent=2)
    if args.out is None:
        print(output)
    else:
        args.out.parent.mkdir(parents=True, exist_ok=True)
        args.out.write_text(output, encoding="utf-8")
        print(f"  Saved: {args.out}", file=sys.stderr)
    return 0


if __name__ == "__main__":
    sys.exit(main())
