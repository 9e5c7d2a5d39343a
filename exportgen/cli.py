"""CLI entrypoints for exportgen commands."""

from __future__ import annotations

import argparse
import os
import sys
from pathlib import Path

from .config import ConfigError
from .logging import configure_logging
from .orchestrator import CompileOutcome, Orchestrator


def _add_logging_options(
    parser: argparse.ArgumentParser, *, suppress_default: bool = False
) -> None:
    kwargs: dict[str, object] = {
        "action": "store_true",
        "help": "List exported functions and increase log verbosity.",
    }
    if suppress_default:
        kwargs["default"] = argparse.SUPPRESS
    else:
        kwargs["default"] = False
    parser.add_argument(
        "-v",
        "--verbose",
        **kwargs,
    )
    parser.add_argument(
        "--log-file",
        type=Path,
        default=argparse.SUPPRESS if suppress_default else None,
        help="Also write a DEBUG-level log of the run to this file.",
    )


def _add_package_options(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "path",
        nargs="?",
        default=".",
        help="Path to the package root (defaults to current directory).",
    )
    parser.add_argument(
        "--package",
        default=None,
        help="Package name (defaults to the Package field of DESCRIPTION).",
    )
    parser.add_argument(
        "--file-sep",
        default=os.sep,
        help="Path separator used when building generated file paths.",
    )


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="exportgen",
        description="Generate R and C++ glue code for [[Rcpp::export]] functions.",
    )
    _add_logging_options(parser)
    subparsers = parser.add_subparsers(dest="command", required=True)

    compile_parser = subparsers.add_parser(
        "compile",
        help="Regenerate the export files of a package.",
    )
    _add_logging_options(compile_parser, suppress_default=True)
    _add_package_options(compile_parser)

    check_parser = subparsers.add_parser(
        "check",
        help="Report export files that are out of date without writing them.",
    )
    _add_logging_options(check_parser, suppress_default=True)
    _add_package_options(check_parser)

    return parser


def main(argv: list[str] | None = None) -> None:
    """CLI entrypoint for exportgen commands."""
    parser = _build_parser()
    args = parser.parse_args(argv)
    verbose = bool(args.verbose)

    configure_logging(verbose=verbose, log_file=args.log_file)

    orchestrator = Orchestrator()
    check = args.command == "check"
    try:
        outcome = orchestrator.run_compile(
            args.path,
            package=args.package,
            file_sep=args.file_sep,
            verbose=verbose,
            check=check,
        )
    except OSError as exc:
        parser.exit(1, f"{exc}\n")
    except (ConfigError, ValueError) as exc:
        parser.exit(1, f"exportgen {args.command} failed: {exc}\n")

    _report(outcome)
    if check and outcome.changed:
        parser.exit(1)


def _report(outcome: CompileOutcome) -> None:
    if not outcome.changed:
        print("Exports already up to date")
        return
    updated_label = "Out of date" if outcome.check else "Updated"
    removed_label = "Stale" if outcome.check else "Removed"
    for target in outcome.updated:
        print(f"{updated_label} {_relativize(Path(target))}")
    for target in outcome.removed:
        print(f"{removed_label} {_relativize(Path(target))}")


def _relativize(path: Path) -> str:
    try:
        return str(path.resolve().relative_to(Path.cwd()))
    except ValueError:
        return str(path)


if __name__ == "__main__":
    main(sys.argv[1:])
