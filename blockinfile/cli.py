"""CLI entrypoint for blockinfile."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from . import __version__
from .config import DEFAULT_MARKER, Options, build_configs, load_options_file
from .errors import BlockInFileError
from .logging import configure_logging, get_logger
from .updater import BlockUpdater


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="blockinfile",
        description=(
            "Insert, update, or remove a block of multi-line text surrounded by "
            "customizable marker lines."
        ),
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s v{__version__}")
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
        help="Also write a full DEBUG trace of the run to this file.",
    )
    parser.add_argument(
        "--config",
        type=Path,
        help="YAML file supplying any of the options below; command-line values win.",
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Print the changes that would be made without touching the file.",
    )
    parser.add_argument(
        "--path",
        help=(
            "The file to modify. A relative path is resolved against the "
            "current working directory."
        ),
    )
    parser.add_argument(
        "--block",
        help=(
            "The text to insert inside the marker lines. If it is missing or empty, "
            "the block is removed as if --state were false."
        ),
    )
    parser.add_argument(
        "--indent",
        type=int,
        help="The number of spaces to indent the block (default: 0).",
    )
    parser.add_argument(
        "--insertbefore",
        help=(
            "Insert the block before the last occurrence of this text. "
            "Falls back to the end of the file when the text is not found."
        ),
    )
    parser.add_argument(
        "--insertafter",
        help=(
            "Insert the block after the last occurrence of this text. "
            "Falls back to the end of the file when the text is not found."
        ),
    )
    parser.add_argument(
        "--marker",
        help=(
            "The marker line template; {mark} is replaced with --markerbegin and "
            f"--markerend (default: {DEFAULT_MARKER!r})."
        ),
    )
    parser.add_argument(
        "--markerbegin",
        help="Inserted at {mark} in the opening marker (default: BEGIN).",
    )
    parser.add_argument(
        "--markerend",
        help="Inserted at {mark} in the closing marker (default: END).",
    )
    parser.add_argument(
        "--state",
        help="Whether the block should be there or not (default: true).",
    )
    parser.add_argument(
        "--backup",
        help="Keep a timestamped copy of the original file when it changes (default: false).",
    )
    parser.add_argument("--mode", help="Permissions for the file, e.g. '0644' or 'u+rw'.")
    parser.add_argument("--owner", help="Name of the user that should own the file.")
    parser.add_argument("--group", help="Name of the group that should own the file.")
    return parser


def _options_from_args(args: argparse.Namespace) -> Options:
    return Options(**{name: getattr(args, name, None) for name in Options.names()})


def _printable(text: str) -> str:
    return text.encode("utf-8", "surrogateescape").decode("utf-8", "replace")


def main(argv: list[str] | None = None) -> None:
    """CLI entrypoint for blockinfile."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    configure_logging(verbose=bool(args.verbose), log_file=args.log_file)
    logger = get_logger("cli")

    try:
        options = _options_from_args(args)
        if args.config is not None:
            logger.debug("Loading options from %s", args.config)
            options = load_options_file(args.config).merged(options)
        config, settings = build_configs(options)
        outcome = BlockUpdater().run(config, settings, dry_run=bool(args.dry_run))
    except BlockInFileError as exc:
        logger.debug("Run aborted", exc_info=True)
        parser.exit(1, f"blockinfile: {exc}\n")

    if outcome.dry_run:
        if outcome.changed:
            print(f"{outcome.path} changes (dry-run):")
            # Undecodable bytes from the file are kept as surrogates; show them replaced.
            print(_printable(outcome.diff), end="")
        else:
            print(f"{outcome.path} already up to date (dry-run)")
        return

    if outcome.backup_path is not None:
        print(f"backup written to {outcome.backup_path}")
    if outcome.changed:
        print(f"{outcome.path} updated")
    else:
        print(f"{outcome.path} already up to date")


if __name__ == "__main__":
    main(sys.argv[1:])
