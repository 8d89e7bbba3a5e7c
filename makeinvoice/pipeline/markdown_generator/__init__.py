"""Markdown generator pipeline package.

Public API for turning CSV files into Markdown tables and rendering them
through a template. Consumers (the runner, the CLI, tests) import from this
package rather than from the submodules.
"""

from .data_loader import (
    ingest_csv_files,
    prepare_key,
    read_records,
    resolve_separator,
)
from .formatter import format_table
from .templating import (
    build_context,
    is_html_template,
    load_template,
    render_template,
)

__all__ = [
    "build_context",
    "format_table",
    "ingest_csv_files",
    "is_html_template",
    "load_template",
    "prepare_key",
    "read_records",
    "render_template",
    "resolve_separator",
]
