"""Template loading and rendering for the export pipeline.

Templates use the Jinja2 syntax. A template is loaded either from a user
file or from the default template source injected through
:class:`makeinvoice.config.Settings`, and rendered against the keyed table
mapping (or, for single-table templates, a lone table string).

Boundaries
----------
- Reads template files only; never writes to disk.
- Does not interpret Markdown or HTML; tables are injected verbatim, so
  autoescaping is disabled.
- Undefined variables are errors (``StrictUndefined``), not empty strings.

Examples
--------
>>> template = load_template(None, default_template="{{ Table }}!")
>>> render_template(template, "a|b")
'a|b!'
>>> render_template(load_template(None), {"B": "two", "A": "one"})
'one\\n\\ntwo\\n\\n'
"""

import logging
from collections.abc import Mapping
from pathlib import Path

import jinja2

from makeinvoice.config import DEFAULT_TEMPLATE, HTML_EXTENSION, TEMPLATE_ENCODING
from makeinvoice.exceptions import (
    InvalidTemplateError,
    TemplateExecutionError,
    TemplateReadError,
)

logger = logging.getLogger(__name__)

SINGLE_TABLE_VARIABLE = "Table"
TABLES_VARIABLE = "tables"


def build_environment() -> jinja2.Environment:
    """Return the Jinja2 environment shared by every template."""
    return jinja2.Environment(
        undefined=jinja2.StrictUndefined,
        autoescape=False,
        keep_trailing_newline=True,
    )


def is_html_template(path: Path | str | None) -> bool:
    """Return True when the template file has an ``.html`` extension."""
    if not path:
        return False
    return Path(path).suffix.lower() == HTML_EXTENSION


def load_template(
    path: Path | str | None, default_template: str = DEFAULT_TEMPLATE
) -> jinja2.Template:
    """Load and parse a template.

    Parameters
    ----------
    path : Path | str | None
        Template file. ``None`` or an empty string selects
        ``default_template``.
    default_template : str, optional
        Template source used when no file is given.

    Returns
    -------
    jinja2.Template
        The compiled template.

    Raises
    ------
    TemplateReadError
        If the template file cannot be read.
    InvalidTemplateError
        If the template content does not parse.
    """
    env = build_environment()
    if not path:
        logger.info("Using the default template")
        source = default_template
        label = "<default>"
    else:
        template_path = Path(path)
        try:
            source = template_path.read_text(encoding=TEMPLATE_ENCODING)
        except (OSError, UnicodeDecodeError) as exc:
            raise TemplateReadError(
                f"cannot read the template `{path}`",
                context={"path": str(path), "reason": str(exc)},
            ) from exc
        label = str(template_path)
        logger.info("Using template %s", template_path)

    try:
        return env.from_string(source)
    except jinja2.TemplateSyntaxError as exc:
        raise InvalidTemplateError(
            f"invalid template file `{label}`: {exc.message} (line {exc.lineno})",
            context={"path": label, "line": exc.lineno},
        ) from exc


def build_context(data: str | Mapping[str, str]) -> dict[str, object]:
    """Build the variables a template is rendered with.

    A plain string is exposed as ``Table``. A mapping exposes every key as
    a top-level variable and the whole mapping, sorted by key, as
    ``tables``; when it holds a single entry that entry is also ``Table``.
    """
    if isinstance(data, str):
        return {SINGLE_TABLE_VARIABLE: data}
    tables = {key: data[key] for key in sorted(data)}
    context: dict[str, object] = dict(tables)
    context[TABLES_VARIABLE] = tables
    if len(tables) == 1:
        context.setdefault(SINGLE_TABLE_VARIABLE, next(iter(tables.values())))
    return context


def render_template(template: jinja2.Template, data: str | Mapping[str, str]) -> str:
    """Render ``template`` against a table string or a keyed table mapping.

    Raises
    ------
    TemplateExecutionError
        If rendering fails, e.g. on an undefined variable.
    """
    try:
        return template.render(build_context(data))
    except jinja2.TemplateError as exc:
        raise TemplateExecutionError(
            f"cannot execute the template: {exc.message or exc}",
            context={"reason": str(exc)},
        ) from exc
    except Exception as exc:
        # Expressions may raise anything (e.g. str + int), not only TemplateError.
        raise TemplateExecutionError(
            f"cannot execute the template: {type(exc).__name__}: {exc}",
            context={"reason": str(exc), "type": type(exc).__name__},
        ) from exc
