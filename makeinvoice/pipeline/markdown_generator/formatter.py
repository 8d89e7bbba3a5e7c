"""Markdown table formatting for parsed CSV records.

Pure string transformation: a two-dimensional grid of cells becomes a single
pipe-delimited Markdown table. No I/O happens here.

Examples
--------
>>> format_table([["a", "bb"], ["x", "y"]])
'a|bb\\n-|--\\nx|y'
>>> format_table([])
''
"""

from collections.abc import Sequence


def is_blank_row(row: Sequence[str]) -> bool:
    """Return True when every cell of ``row`` is empty or whitespace."""
    return all(not cell.strip() for cell in row)


def format_row(row: Sequence[str]) -> str:
    """Join the cells of a row with ``|``."""
    return "|".join(row)


def format_separator(header: Sequence[str]) -> str:
    """Build the line that follows the header row.

    Each column gets a run of ``-`` exactly as long as its header cell. An
    empty header cell still gets one dash so the column is kept.

    Examples
    --------
    >>> format_separator(["Name", "a"])
    '----|-'
    """
    return "|".join("-" * max(len(cell), 1) for cell in header)


def format_table(grid: Sequence[Sequence[str]]) -> str:
    """Format a record grid as a Markdown table.

    The first non-blank row is the header and is followed by a separator
    line. Rows made only of blank cells are dropped so trailing blank lines
    in a CSV file do not produce empty table rows.

    Parameters
    ----------
    grid : Sequence[Sequence[str]]
        Rows of string cells, header first.

    Returns
    -------
    str
        The table text, stripped of surrounding whitespace. Empty for an
        empty grid.

    Notes
    -----
    Cells are not escaped: a cell containing ``|`` splits into two columns
    once rendered.
    """
    lines: list[str] = []
    for row in grid:
        if is_blank_row(row):
            continue
        lines.append(format_row(row))
        if len(lines) == 1:
            lines.append(format_separator(row))
    return "\n".join(lines).strip()
