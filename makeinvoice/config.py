"""Global configuration constants and runtime settings for makeinvoice.

Constants are UPPER_SNAKE_CASE and shared by the pipeline modules. Values
that a user may tune at runtime (PDF converter, separator, default template,
log level) are gathered into :class:`Settings`, built once at startup by
:func:`load_settings` and passed down explicitly.
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path

from dotenv import dotenv_values

from makeinvoice.exceptions import ConfigurationError

# File extensions driving format dispatch
MARKDOWN_EXTENSION: str = ".md"
HTML_EXTENSION: str = ".html"
PDF_EXTENSION: str = ".pdf"
CSS_EXTENSION: str = ".css"

# CSV / table formatting defaults
DEFAULT_SEPARATOR: str = ","
CSV_ENCODING: str = "utf-8-sig"

# Template defaults
DEFAULT_TEMPLATE: str = "{% for key, table in tables.items() %}{{ table }}\n\n{% endfor %}"
TEMPLATE_ENCODING: str = "utf-8"

# Markdown conversion
MARKDOWN_EXTRAS: list[str] = ["tables", "fenced-code-blocks", "strike"]

# PDF generation
DEFAULT_PDF_CONVERTER: str = "wkhtmltopdf"
PDF_STYLE_OPTION: str = "--user-style-sheet"
STAGING_FILE_PREFIX: str = "mkinv_"
OUTPUT_ENCODING: str = "utf-8"

# CLI defaults and logging
PROGRAM_NAME: str = "makeinvoice"
DEFAULT_LOG_LEVEL: str = "WARNING"
LOG_FORMAT: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
DOTENV_FILENAME: str = ".env"

# Environment variable names
ENV_PDF_CONVERTER: str = "MAKEINVOICE_PDF_CONVERTER"
ENV_SEPARATOR: str = "MAKEINVOICE_SEPARATOR"
ENV_LOG_LEVEL: str = "MAKEINVOICE_LOG_LEVEL"
ENV_DEFAULT_TEMPLATE: str = "MAKEINVOICE_DEFAULT_TEMPLATE"


@dataclass(frozen=True)
class Settings:
    """Runtime settings injected into the pipeline.

    Attributes
    ----------
    pdf_converter : str
        Executable name (or path) of the HTML to PDF converter.
    separator : str
        Default CSV field separator.
    default_template : str
        Template source used when no template file is given.
    log_level : str
        Default logging level for the CLI.
    """

    pdf_converter: str = DEFAULT_PDF_CONVERTER
    separator: str = DEFAULT_SEPARATOR
    default_template: str = DEFAULT_TEMPLATE
    log_level: str = DEFAULT_LOG_LEVEL


def load_settings(
    env: Mapping[str, str] | None = None, dotenv_path: Path | None = None
) -> Settings:
    """Build :class:`Settings` from the environment and an optional ``.env`` file.

    Values from the real environment take precedence over the ``.env``
    file, which in turn takes precedence over the built-in defaults.

    Parameters
    ----------
    env : Mapping[str, str] | None, optional
        Environment mapping to read. Defaults to ``os.environ``.
    dotenv_path : Path | None, optional
        ``.env`` file to merge under ``env``. Defaults to ``./.env``.

    Returns
    -------
    Settings
        Frozen settings object.

    Raises
    ------
    ConfigurationError
        If ``MAKEINVOICE_DEFAULT_TEMPLATE`` points to an unreadable file.

    Examples
    --------
    >>> load_settings(env={"MAKEINVOICE_SEPARATOR": ";"}).separator
    ';'
    """
    source = dict(os.environ if env is None else env)
    env_file = dotenv_path if dotenv_path is not None else Path.cwd() / DOTENV_FILENAME
    if env_file.is_file():
        for key, value in dotenv_values(env_file).items():
            if value is not None:
                source.setdefault(key, value)

    default_template = DEFAULT_TEMPLATE
    template_file = source.get(ENV_DEFAULT_TEMPLATE)
    if template_file:
        try:
            default_template = Path(template_file).read_text(encoding=TEMPLATE_ENCODING)
        except OSError as exc:
            raise ConfigurationError(
                f"cannot read the default template `{template_file}`",
                context={"path": template_file, "reason": str(exc)},
            ) from exc

    return Settings(
        pdf_converter=source.get(ENV_PDF_CONVERTER) or DEFAULT_PDF_CONVERTER,
        separator=source.get(ENV_SEPARATOR) or DEFAULT_SEPARATOR,
        default_template=default_template,
        log_level=source.get(ENV_LOG_LEVEL) or DEFAULT_LOG_LEVEL,
    )
