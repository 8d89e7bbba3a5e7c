"""PDF generation through an external HTML to PDF converter.

The converter (``wkhtmltopdf`` by default) picks its input format from the
file extension, so the HTML is staged in a temporary ``.html`` file for the
duration of the call. The staging file is removed on every exit path.

The converter is called as ``<tool> [--user-style-sheet STYLE] <input.html>
<output.pdf>`` and blocks until it exits; there is no timeout and no retry.
"""

import logging
import os
import shutil
import subprocess
import tempfile
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path

from makeinvoice.config import (
    DEFAULT_PDF_CONVERTER,
    HTML_EXTENSION,
    OUTPUT_ENCODING,
    PDF_STYLE_OPTION,
    STAGING_FILE_PREFIX,
)
from makeinvoice.exceptions import (
    ConverterFailedError,
    DestinationWriteError,
    SourceFileError,
    ToolUnavailableError,
)

logger = logging.getLogger(__name__)


def require_converter(converter: str) -> str:
    """Resolve the converter executable on ``PATH``.

    Returns
    -------
    str
        Absolute path of the executable.

    Raises
    ------
    ToolUnavailableError
        If the executable cannot be found.
    """
    resolved = shutil.which(converter)
    if resolved is None:
        raise ToolUnavailableError(
            f"impossible to call `{converter}`: install it and run this command again",
            context={"tool": converter},
        )
    return resolved


def style_arguments(style: Path | str | None) -> list[str]:
    """Return the converter options applying ``style``, if any.

    Raises
    ------
    SourceFileError
        If the stylesheet is not a readable file.
    """
    if not style:
        return []
    style_path = Path(style)
    if not style_path.is_file():
        raise SourceFileError(
            f"cannot open `{style}`: no such file",
            context={"path": str(style)},
        )
    return [PDF_STYLE_OPTION, str(style_path)]


@contextmanager
def staged_html_file(html: str) -> Iterator[Path]:
    """Write ``html`` to a temporary ``.html`` file and remove it afterwards.

    Yields
    ------
    Path
        Location of the staging file.

    Raises
    ------
    DestinationWriteError
        If the staging file cannot be created or written.
    """
    try:
        fd, name = tempfile.mkstemp(prefix=STAGING_FILE_PREFIX, suffix=HTML_EXTENSION)
    except OSError as exc:
        raise DestinationWriteError(
            "cannot create a temporary html file", context={"reason": str(exc)}
        ) from exc
    staging_path = Path(name)
    try:
        try:
            with os.fdopen(fd, "w", encoding=OUTPUT_ENCODING) as fh:
                fh.write(html)
        except OSError as exc:
            raise DestinationWriteError(
                f"cannot write data to a temporary file `{staging_path}`",
                context={"path": str(staging_path), "reason": str(exc)},
            ) from exc
        logger.debug("Staged HTML in %s", staging_path)
        yield staging_path
    finally:
        staging_path.unlink(missing_ok=True)
        logger.debug("Removed staging file %s", staging_path)


def render_pdf(
    html: str,
    output_path: Path,
    *,
    converter: str = DEFAULT_PDF_CONVERTER,
    style: Path | str | None = None,
) -> Path:
    """Convert an HTML document into ``output_path`` with the external converter.

    The converter is resolved before anything is written, so a missing tool
    never leaves a staging file behind.

    Parameters
    ----------
    html : str
        Complete HTML document.
    output_path : Path
        Destination PDF file.
    converter : str, optional
        Converter executable name or path.
    style : Path | str | None, optional
        Stylesheet forwarded to the converter.

    Returns
    -------
    Path
        ``output_path``.

    Raises
    ------
    ToolUnavailableError
        If the converter is not on the execution path.
    SourceFileError
        If ``style`` is given but missing.
    DestinationWriteError
        If the output folder cannot be created.
    ConverterFailedError
        If the converter cannot be started or exits with a non-zero status.
    """
    executable = require_converter(converter)
    options = style_arguments(style)
    try:
        output_path.parent.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        raise DestinationWriteError(
            f"cannot write data to `{output_path}`",
            context={"path": str(output_path), "reason": str(exc)},
        ) from exc
    with staged_html_file(html) as staging_path:
        command = [executable, *options, str(staging_path), str(output_path)]
        logger.info("Running %s", " ".join(command))
        try:
            result = subprocess.run(command, capture_output=True, text=True)
        except OSError as exc:
            raise ConverterFailedError(
                f"cannot run `{converter}`: {exc}",
                context={"tool": converter, "reason": str(exc)},
            ) from exc
        if result.returncode != 0:
            stderr = (result.stderr or "").strip()
            detail = stderr.splitlines()[-1] if stderr else "no error output"
            raise ConverterFailedError(
                f"`{converter}` exited with status {result.returncode}: {detail}",
                context={
                    "tool": converter,
                    "returncode": result.returncode,
                    "stderr": stderr,
                },
            )
    logger.info("PDF written to %s", output_path)
    return output_path
