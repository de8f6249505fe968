"""CLI entrypoint for i18nify."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from .config import load_config
from .errors import I18nifyError
from .logging import configure_logging
from .orchestrator import Orchestrator


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="i18nify",
        description=(
            "Extract CJK text from Vue components and JS/TS files, rewrite it into "
            "translation calls and collect a key -> text dictionary."
        ),
    )
    parser.add_argument(
        "source",
        help="File, directory or glob pattern to process (quote globs to keep the shell out).",
    )
    parser.add_argument(
        "-o",
        "--output",
        type=Path,
        default=None,
        help="Translation JSON file to merge into (defaults to translations.json).",
    )
    parser.add_argument(
        "-c",
        "--config",
        type=Path,
        default=None,
        help="Path to a .i18nify.yml file (defaults to the one in the current directory).",
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Report what would change without writing sources or the dictionary.",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        default=False,
        help="Increase log verbosity for troubleshooting.",
    )
    parser.add_argument(
        "--log-file",
        type=Path,
        default=None,
        help="Also write log output to this file.",
    )
    return parser


def main(argv: list[str] | None = None) -> None:
    """CLI entrypoint for i18nify."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    configure_logging(verbose=bool(args.verbose), log_file=args.log_file)

    if args.config is not None and not args.config.exists():
        parser.exit(1, f"Config file not found: {args.config}\n")

    try:
        config = load_config(args.config)
        report = Orchestrator(config).run(
            args.source,
            output=args.output,
            dry_run=bool(args.dry_run),
        )
    except (I18nifyError, OSError) as exc:
        parser.exit(1, f"i18nify failed: {exc}\nRun with --verbose for more details.\n")

    changed = len(report.changed_files)
    total = len(report.outcomes)
    if report.dry_run:
        print(f"{changed} of {total} files would change (dry-run); {report.dictionary_size} keys")
    else:
        print(f"{changed} of {total} files rewritten; {report.dictionary_size} keys saved to {_relativize(report.output)}")
    if report.collisions:
        print(f"{len(report.collisions)} key collisions kept their first text; see the log for details")


def _relativize(path: Path | None) -> str:
    if path is None:
        return ""
    try:
        return str(path.relative_to(Path.cwd()))
    except ValueError:
        return str(path)


if __name__ == "__main__":
    main(sys.argv[1:])
