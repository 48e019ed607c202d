#!/usr/bin/env python3
"""
CLI for exporting disclosure submissions.

Usage:
    python -m reporting.cli sample [--format csv|md|pdf|all]
    python -m reporting.cli export <submission_json> [--format ...] [--output-dir DIR]
    python -m reporting.cli progress <submission_json>
    python -m reporting.cli print <submission_json>

Examples:
    # Export the example data in every format
    python -m reporting.cli sample --format all

    # Export a saved submission as Markdown
    python -m reporting.cli export submissions/alex.json --format md
"""

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any, Optional, Union

from core.disclosure import calculate_section_progress, create_sample_catalog, create_sample_submission
from utils.config import Config

from .artifact import ExportError, ExportFormat
from .delivery import FileDeliverySink, PrintSink
from .engine import ExportEngine


FORMAT_CHOICES = ["csv", "md", "markdown", "pdf", "all"]


def load_submission(path: Path) -> dict[str, Any]:
    """
    Load a submission from a JSON file.

    Accepts either a flat {field_key: value} object or an object with the
    values under a "submission" key.
    """
    with open(path, "r", encoding="utf-8") as f:
        data = json.load(f)

    if isinstance(data, dict) and isinstance(data.get("submission"), dict):
        data = data["submission"]
    if not isinstance(data, dict):
        raise ValueError("submission must be a JSON object of field keys to values")
    return data


def _read_submission(path_arg: str) -> Optional[dict[str, Any]]:
    input_path = Path(path_arg)

    if not input_path.exists():
        print(f"Error: File not found: {input_path}", file=sys.stderr)
        return None

    try:
        return load_submission(input_path)
    except json.JSONDecodeError as e:
        print(f"Error: Invalid JSON: {e}", file=sys.stderr)
    except ValueError as e:
        print(f"Error: Invalid submission: {e}", file=sys.stderr)
    return None


def _export(engine: ExportEngine, submission: dict[str, Any], format_name: str, output_dir: Union[str, Path]) -> int:
    sink = FileDeliverySink(output_dir)
    formats = list(ExportFormat) if format_name == "all" else [ExportFormat.parse(format_name)]

    try:
        for fmt in formats:
            artifact = engine.export(fmt, submission)
            path = sink.deliver(artifact)
            print(f"Export saved: {path}")
    except (ExportError, OSError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    return 0


def cmd_sample(args, config: Config):
    """Export the example submission."""
    print("Exporting example submission...")
    engine = ExportEngine(create_sample_catalog(), config)
    return _export(engine, create_sample_submission(), args.format, args.output_dir or config.output_path)


def cmd_export(args, config: Config):
    """Export a submission from a JSON file."""
    submission = _read_submission(args.submission_file)
    if submission is None:
        return 1

    print(f"Loaded submission from: {args.submission_file}")
    engine = ExportEngine(create_sample_catalog(), config)
    return _export(engine, submission, args.format, args.output_dir or config.output_path)


def cmd_progress(args, config: Config):
    """Print required-field progress per section."""
    submission = _read_submission(args.submission_file)
    if submission is None:
        return 1

    for progress in calculate_section_progress(create_sample_catalog(), submission):
        status = "complete" if progress.complete else "incomplete"
        print(f"{progress.title}: {progress.filled}/{progress.total} ({status})")
    return 0


def cmd_print(args, config: Config):
    """Render a submission as PDF and send it to the print command."""
    submission = _read_submission(args.submission_file)
    if submission is None:
        return 1

    engine = ExportEngine(create_sample_catalog(), config)
    try:
        artifact = engine.export(ExportFormat.PDF, submission)
        PrintSink.from_config(config).deliver(artifact)
    except ExportError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    print(f"Sent to printer: {artifact.filename}")
    return 0


def main(argv=None):
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        description="Info Collection - submission exporter",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
    python -m reporting.cli sample --format all
    python -m reporting.cli export submissions/alex.json --format pdf

Output:
    Exports are saved as: <output-dir>/info_collection_<YYYY-MM-DD>.<csv|md|pdf>
        """,
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")

    subparsers = parser.add_subparsers(dest="command", required=True)

    # Sample command
    sample_parser = subparsers.add_parser(
        "sample",
        help="Export the example submission",
    )
    sample_parser.add_argument("--format", choices=FORMAT_CHOICES, default="all")
    sample_parser.add_argument("--output-dir", help="Directory for exported files")
    sample_parser.set_defaults(func=cmd_sample)

    # Export command
    export_parser = subparsers.add_parser(
        "export",
        help="Export a submission from a JSON file",
    )
    export_parser.add_argument("submission_file", help="Path to JSON submission file")
    export_parser.add_argument("--format", choices=FORMAT_CHOICES, default="pdf")
    export_parser.add_argument("--output-dir", help="Directory for exported files")
    export_parser.set_defaults(func=cmd_export)

    # Progress command
    progress_parser = subparsers.add_parser(
        "progress",
        help="Show required-field progress per section",
    )
    progress_parser.add_argument("submission_file", help="Path to JSON submission file")
    progress_parser.set_defaults(func=cmd_progress)

    # Print command
    print_parser = subparsers.add_parser(
        "print",
        help="Print a submission via the system print command",
    )
    print_parser.add_argument("submission_file", help="Path to JSON submission file")
    print_parser.set_defaults(func=cmd_print)

    args = parser.parse_args(argv)

    config = Config.load()
    logging.basicConfig(
        level=logging.DEBUG if args.verbose or config.debug else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    return args.func(args, config)


if __name__ == "__main__":
    sys.exit(main())
