"""Command-line interface for makeinvoice.

Parses arguments, configures logging, loads runtime settings and runs the
export pipeline. All business logic lives in :mod:`makeinvoice.pipeline`.

A successful run is silent and exits with status 0. Any
:class:`makeinvoice.exceptions.AppError` is reported as a single line on
stderr (red unless ``--no-color`` or ``NO_COLOR`` is set), without a
traceback, and the process exits with the error's ``exit_code``.

Examples
--------
CLI usage::

    makeinvoice data.csv
    makeinvoice --output invoice42.pdf --style invoice.css items.csv totals.csv
    makeinvoice -t invoice.html -o invoice.html -d ";" items.csv
"""

from __future__ import annotations

import argparse
import logging
import os
from collections.abc import Sequence
from pathlib import Path

from rich.console import Console

from makeinvoice import __version__
from makeinvoice.config import LOG_FORMAT, PROGRAM_NAME, Settings, load_settings
from makeinvoice.exceptions import AppError, UsageError
from makeinvoice.pipeline.runner import run_export

logger = logging.getLogger(__name__)

EXIT_INTERRUPTED = 130


def configure_logging(level: str = "WARNING", log_file: Path | None = None) -> None:
    """Configure root logging for a CLI run.

    Handlers always include a stderr stream handler so stdout stays reserved
    for the exported document. A file handler is added when ``log_file`` is
    given and ``DISABLE_FILE_LOGS`` is not set.

    Parameters
    ----------
    level : str, optional
        Logging level name, e.g. ``"INFO"``. Unknown names fall back to
        ``WARNING``.
    log_file : Path | None, optional
        Extra file to append log records to.
    """
    for handler in logging.root.handlers[:]:
        logging.root.removeHandler(handler)
    handlers: list[logging.Handler] = [logging.StreamHandler()]
    if log_file is not None and not os.environ.get("DISABLE_FILE_LOGS"):
        try:
            log_file.parent.mkdir(parents=True, exist_ok=True)
            handlers.insert(0, logging.FileHandler(log_file, mode="a"))
        except OSError as exc:
            logger.warning("Cannot open log file %s: %s", log_file, exc)
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.WARNING),
        format=LOG_FORMAT,
        handlers=handlers,
    )


def build_parser(settings: Settings | None = None) -> argparse.ArgumentParser:
    """Build the argument parser, with defaults taken from ``settings``."""
    settings = settings or Settings()
    parser = argparse.ArgumentParser(
        prog=PROGRAM_NAME,
        description="Create an invoice populated with data from one or more CSV files.",
        epilog="example: makeinvoice --output invoice42.pdf data.csv",
    )
    parser.add_argument("files", nargs="*", type=Path, help="CSV file(s) to read.")
    parser.add_argument(
        "-o",
        "--output",
        type=Path,
        default=None,
        help="Export to Markdown, HTML or PDF (by extension). Defaults to stdout.",
    )
    parser.add_argument(
        "-t",
        "--template",
        type=Path,
        default=None,
        help="Template file (Markdown or HTML). Defaults to the built-in template.",
    )
    parser.add_argument(
        "-s",
        "--style",
        "-c",
        "--css",
        dest="style",
        type=Path,
        default=None,
        help="Stylesheet to decorate the output (only for PDF).",
    )
    parser.add_argument(
        "-d",
        "--separator",
        type=str,
        default=settings.separator,
        help="CSV field separator (single character).",
    )
    parser.add_argument(
        "--log-level",
        type=str,
        default=settings.log_level,
        help="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL).",
    )
    parser.add_argument(
        "--log-file", type=Path, default=None, help="Also append logs to this file."
    )
    parser.add_argument(
        "--no-color", action="store_true", help="Do not colorize error messages."
    )
    parser.add_argument(
        "--version", action="version", version=f"%(prog)s {__version__}"
    )
    return parser


def report_error(message: str, *, color: bool = True) -> None:
    """Print a one-line error message on stderr."""
    console = Console(stderr=True, no_color=not color, highlight=False)
    console.print(message, style="red" if color else None, markup=False, soft_wrap=True)


def main(argv: Sequence[str] | None = None) -> int:
    """Run the CLI.

    Parameters
    ----------
    argv : Sequence[str] | None, optional
        Arguments without the program name; ``sys.argv[1:]`` when ``None``.

    Returns
    -------
    int
        Process exit status.
    """
    color = True
    try:
        settings = load_settings()
        args = build_parser(settings).parse_args(argv)
        color = not args.no_color
        configure_logging(args.log_level, args.log_file)
        if not args.files:
            raise UsageError("no arguments passed")
        run_export(
            args.files,
            output=args.output,
            template=args.template,
            style=args.style,
            separator=args.separator,
            settings=settings,
        )
    except AppError as exc:
        logger.debug("Export failed: %s", exc.to_dict())
        report_error(str(exc), color=color)
        return exc.exit_code
    except KeyboardInterrupt:
        report_error("interrupted", color=color)
        return EXIT_INTERRUPTED
    return 0
