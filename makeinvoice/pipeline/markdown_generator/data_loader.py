"""CSV ingestion for the markdown generation stage.

This module reads delimited CSV files into record grids, derives the
document key each file is referenced by in templates, and builds the keyed
table mapping consumed by the template engine. Files are processed strictly
in the order given and the first failure aborts the whole ingestion; no
partial mapping is ever returned.

Examples
--------
>>> prepare_key("data/Q1_sales.csv")
'Q1_sales'
>>> prepare_key("report.CSV")
'Report'
"""

import csv
import logging
from collections.abc import Iterable
from pathlib import Path

from makeinvoice.config import CSV_ENCODING, DEFAULT_SEPARATOR
from makeinvoice.exceptions import (
    EmptyInputError,
    MalformedInputError,
    SourceFileError,
    UsageError,
)

from .formatter import format_table

logger = logging.getLogger(__name__)


def resolve_separator(separator: str | None) -> str:
    """Return the effective field separator.

    Parameters
    ----------
    separator : str | None
        Requested separator; ``None`` or ``""`` selects the comma.

    Returns
    -------
    str
        A single-character separator.

    Raises
    ------
    UsageError
        If ``separator`` is longer than one character.
    """
    if not separator:
        return DEFAULT_SEPARATOR
    if len(separator) != 1:
        raise UsageError(
            f"invalid separator `{separator}`: expected a single character",
            context={"separator": separator},
        )
    return separator


def read_records(path: Path | str, separator: str | None = None) -> list[list[str]]:
    """Read a CSV file into a record grid.

    Empty lines are ignored. Every other record must have the same number
    of fields as the first one.

    Parameters
    ----------
    path : Path | str
        CSV file to read.
    separator : str | None, optional
        Field separator, comma when omitted.

    Returns
    -------
    list[list[str]]
        Rows of string cells in file order.

    Raises
    ------
    SourceFileError
        If the file cannot be opened or read.
    MalformedInputError
        If the content cannot be tokenized or the rows are ragged.
    """
    csv_path = Path(path)
    delimiter = resolve_separator(separator)
    try:
        with csv_path.open("r", encoding=CSV_ENCODING, newline="") as csvfile:
            reader = csv.reader(csvfile, delimiter=delimiter, strict=True)
            records = [row for row in reader if row]
    except (csv.Error, UnicodeDecodeError) as exc:
        raise MalformedInputError(
            f"cannot read `{path}`: invalid CSV file",
            context={"path": str(path), "reason": str(exc)},
        ) from exc
    except OSError as exc:
        raise SourceFileError(
            f"cannot open `{path}`: no such file",
            context={"path": str(path), "reason": str(exc)},
        ) from exc

    if records:
        expected = len(records[0])
        for line_number, row in enumerate(records[1:], start=2):
            if len(row) != expected:
                raise MalformedInputError(
                    f"cannot read `{path}`: invalid CSV file",
                    context={
                        "path": str(path),
                        "record": line_number,
                        "reason": f"expected {expected} fields, got {len(row)}",
                    },
                )
    return records


def prepare_key(filename: Path | str) -> str:
    """Derive the document key of a source file.

    The key is the base name with its last extension removed and its first
    character upper-cased.
    """
    stem = Path(filename).stem
    return stem[:1].upper() + stem[1:]


def ingest_csv_files(
    paths: Iterable[Path | str], separator: str | None = None
) -> dict[str, str]:
    """Read every CSV file and format it as a Markdown table.

    Parameters
    ----------
    paths : Iterable[Path | str]
        Input files, processed in order.
    separator : str | None, optional
        Field separator shared by all files.

    Returns
    -------
    dict[str, str]
        Mapping from document key to Markdown table text.

    Raises
    ------
    EmptyInputError
        If ``paths`` is empty.
    SourceFileError, MalformedInputError
        As raised by :func:`read_records` for the first failing file.

    Notes
    -----
    Two files with the same document key overwrite each other; the last one
    wins and a warning is logged.
    """
    path_list = list(paths)
    if not path_list:
        raise EmptyInputError("no file to parse")

    delimiter = resolve_separator(separator)
    tables: dict[str, str] = {}
    sources: dict[str, str] = {}
    for path in path_list:
        records = read_records(path, delimiter)
        key = prepare_key(path)
        if key in tables:
            logger.warning(
                "Document key %r from %s overwrites the table read from %s",
                key,
                path,
                sources[key],
            )
        tables[key] = format_table(records)
        sources[key] = str(path)
        logger.info("Ingested %s as %r (%d records)", path, key, len(records))
    return tables
