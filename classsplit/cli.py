"""CLI entrypoints for classsplit commands."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from .config import ConfigError, load_config
from .logging import configure_logging
from .models import SplitRequest
from .orchestrator import SplitError, SplitOrchestrator
from .report import SummaryReporter, write_summary_json


def _positive_int(value: str) -> int:
    try:
        number = int(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError("Number of splits must be a positive integer.") from exc
    if number < 1:
        raise argparse.ArgumentTypeError("Number of splits must be a positive integer.")
    return number


def _add_common_options(
    parser: argparse.ArgumentParser, *, suppress_default: bool = False
) -> None:
    default = argparse.SUPPRESS if suppress_default else False
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        default=default,
        help="Log every declaration site and boundary decision.",
    )
    parser.add_argument(
        "-q",
        "--quiet",
        action="store_true",
        default=default,
        help="Only log warnings and errors.",
    )


def _add_config_option(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--config",
        default=None,
        help="Path to a .classsplit.yml file or the directory holding it (defaults to cwd).",
    )


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="classsplit",
        description="Split the types in a C# source file into partial-type files.",
    )
    _add_common_options(parser)
    parser.add_argument(
        "--log-file",
        default=None,
        help="Also write a full debug log to this file.",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    split_parser = subparsers.add_parser(
        "split",
        help="Write one partial file per member group for each type.",
    )
    _add_common_options(split_parser, suppress_default=True)
    _add_config_option(split_parser)
    split_parser.add_argument("source", help="Path to the source file to split.")
    split_parser.add_argument(
        "-o",
        "--output",
        default=None,
        help="Target output folder (defaults to output.directory from the config).",
    )
    split_parser.add_argument(
        "-n",
        "--splits",
        type=_positive_int,
        default=None,
        help="Distribute members round-robin across this many files "
        "(omit for a public / non-public split).",
    )
    split_parser.add_argument(
        "-t",
        "--type",
        dest="type_name",
        default=None,
        help="Only split the type with this name (case-insensitive).",
    )
    split_parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Render everything and report the files without writing them.",
    )
    split_parser.add_argument(
        "--summary-json",
        default=None,
        help="Also write the run summary as JSON to this path.",
    )

    inspect_parser = subparsers.add_parser(
        "inspect",
        help="List the types and members found in a source file.",
    )
    _add_common_options(inspect_parser, suppress_default=True)
    _add_config_option(inspect_parser)
    inspect_parser.add_argument("source", help="Path to the source file to inspect.")

    return parser


def main(argv: list[str] | None = None) -> None:
    """CLI entrypoint for classsplit commands."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    log_file = Path(args.log_file) if args.log_file else None
    configure_logging(verbose=bool(args.verbose), quiet=bool(args.quiet), log_file=log_file)

    try:
        config = load_config(Path(args.config) if args.config else Path.cwd())
    except ConfigError as exc:
        parser.exit(1, f"Error: {exc}\n")

    orchestrator = SplitOrchestrator(config)
    reporter = SummaryReporter()

    if args.command == "split":
        output_dir = Path(args.output) if args.output else config.output.directory
        try:
            request = SplitRequest(
                source_path=Path(args.source.strip().strip('"')),
                output_dir=output_dir,
                split_count=args.splits,
                type_name=args.type_name.strip() if args.type_name else None,
                dry_run=bool(args.dry_run),
            )
            outcome = orchestrator.run(request)
        except SplitError as exc:
            parser.exit(1, f"Error: {exc}\n")
        except Exception as exc:  # pragma: no cover - unexpected failure
            parser.exit(1, f"classsplit split failed: {exc}\nRun with --verbose for more details.\n")
        print(reporter.render_summary(outcome.summary), end="")
        if args.summary_json:
            write_summary_json(outcome.summary, Path(args.summary_json))
        if outcome.summary.dry_run:
            for path in outcome.summary.written:
                print(f"would write {_relativize(Path(path))}")
    elif args.command == "inspect":
        try:
            result = orchestrator.parse(Path(args.source.strip().strip('"')))
        except SplitError as exc:
            parser.exit(1, f"Error: {exc}\n")
        print(reporter.render_inspection(result), end="")
    else:  # pragma: no cover - argparse enforces choices
        parser.exit(1, "Unknown command\n")


def _relativize(path: Path) -> str:
    try:
        return str(path.resolve().relative_to(Path.cwd()))
    except ValueError:
        return str(path)


if __name__ == "__main__":
    main(sys.argv[1:])
