"""
Command line entry point.

    python -m symptomlens extract --notes notes.csv --vocabulary symptoms.xlsx --report
    python -m symptomlens compare --notes notes.csv --vocabulary symptoms.xlsx
    python -m symptomlens versions
"""

import argparse
import json
import logging
import sys

from . import SymptomLens
from .processors.symptoms import JSONLinesSink, load_notes, load_vocabulary


def _add_input_args(parser):
    parser.add_argument("--notes", required=True, help="Clinical notes file (.csv, .xlsx, .json)")
    parser.add_argument("--vocabulary", required=True, help="Symptom vocabulary file (.csv, .xlsx, .json)")


def build_parser():
    parser = argparse.ArgumentParser(
        prog="symptomlens", description="Extract symptom mentions from clinical notes"
    )
    parser.add_argument(
        "--log-level",
        default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging verbosity",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    extract = sub.add_parser("extract", help="Run an extraction batch")
    _add_input_args(extract)
    extract.add_argument("--version", default="v3.2", help="Matcher version (default: v3.2)")
    extract.add_argument("--debug", action="store_true", help="Build the organized index")
    extract.add_argument("--no-negation", action="store_true", help="Disable negation detection")
    extract.add_argument(
        "--no-word-boundaries", action="store_true", help="Use plain substring matching"
    )
    extract.add_argument("--workers", type=int, default=1, help="Note-level worker threads")
    extract.add_argument("--output", help="Write match rows to this JSON Lines file")
    extract.add_argument("--report", action="store_true", help="Print the extraction report")

    compare = sub.add_parser("compare", help="Compare matcher versions on the same batch")
    _add_input_args(compare)
    compare.add_argument(
        "--versions", nargs="+", default=["v3.0", "v3.2"], help="Versions to compare"
    )

    sub.add_parser("versions", help="List available matcher versions")
    return parser


def main(argv=None):
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(asctime)s %(name)s %(levelname)s %(message)s",
    )

    if args.command == "versions":
        print(json.dumps(SymptomLens().versions(), indent=2))
        return 0

    if args.command == "compare":
        comparison = SymptomLens().compare(
            load_notes(args.notes), load_vocabulary(args.vocabulary), versions=args.versions
        )
        print(json.dumps(comparison, indent=2))
        return 0

    lens = SymptomLens(
        config={"extraction": {"version": args.version, "parallel": {"max_workers": args.workers}}}
    )
    result = lens.extract_from_files(
        args.notes,
        args.vocabulary,
        debug=args.debug or args.report,
        consider_negation=not args.no_negation,
        use_word_boundaries=not args.no_word_boundaries,
    )

    if args.output:
        status = lens.save(result, JSONLinesSink(args.output))
        if not status["success"]:
            print(f"Failed to save results: {status['error']}", file=sys.stderr)
            return 1

    if args.report:
        print(lens.report(result))
    else:
        print(f"Extracted {result.total_extracted} symptoms ({result.version})")
    for failure in result.failures:
        print(
            f"Failed note {failure.note_id} (patient {failure.patient_id}): {failure.error}",
            file=sys.stderr,
        )
    return 0


if __name__ == "__main__":
    sys.exit(main())
