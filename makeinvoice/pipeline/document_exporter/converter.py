"""Markdown to HTML conversion.

Thin wrapper around ``markdown2`` with the extras the tables rely on. The
conversion is total: malformed Markdown still yields best-effort HTML.

Examples
--------
>>> "<table>" in to_html("a|b\\n--|--\\nx|y")
True
>>> sorted(to_html_all({"A": "*x*"}).items())
[('A', '<p><em>x</em></p>')]
"""

from collections.abc import Mapping

import markdown2

from makeinvoice.config import MARKDOWN_EXTRAS


def to_html(markdown_text: str) -> str:
    """Convert a Markdown string to HTML.

    Block-level HTML already present in the input (for example a previously
    converted ``<table>``) is passed through, so converting twice does not
    wrap tables in extra paragraphs. Exact output is engine dependent.
    """
    return str(markdown2.markdown(markdown_text, extras=MARKDOWN_EXTRAS)).strip()


def to_html_all(tables: Mapping[str, str]) -> dict[str, str]:
    """Convert every value of a keyed mapping, preserving its keys."""
    return {key: to_html(value) for key, value in tables.items()}
