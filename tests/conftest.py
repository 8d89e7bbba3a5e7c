"""Pytest configuration for test environment setup.

- Forces ``DISABLE_FILE_LOGS=1`` to avoid writing log files during tests.
- Ensures the project root is available on ``sys.path`` for imports.
- Provides fixtures for CSV inputs, an isolated staging directory and a fake
  external PDF converter placed on ``PATH``.
"""

import os
import sys
import tempfile
from pathlib import Path
from types import SimpleNamespace

import pytest

os.environ.setdefault("DISABLE_FILE_LOGS", "1")  # Avoid creating log files during tests

# Ensure project root is on sys.path
ROOT = Path(__file__).resolve().parents[1]
root_str = str(ROOT)
if root_str not in sys.path:
    sys.path.insert(0, root_str)

from makeinvoice.config import Settings  # noqa: E402

FAKE_CONVERTER_NAME = "fake-html2pdf"

# Records its arguments, then copies the staged HTML to the output path so
# tests can check what the converter received.
_FAKE_CONVERTER_SOURCE = """\
import json
import shutil
import sys
from pathlib import Path

args = sys.argv[1:]
src, dst = Path(args[-2]), Path(args[-1])
record = {{
    "argv": args,
    "input_exists": src.exists(),
    "input_content": src.read_text(encoding="utf-8") if src.exists() else None,
}}
Path({log!r}).write_text(json.dumps(record), encoding="utf-8")
if {exit_code}:
    sys.stderr.write("conversion exploded\\n")
    sys.exit({exit_code})
shutil.copyfile(src, dst)
"""


@pytest.fixture
def write_csv(tmp_path: Path):
    """Return a helper writing CSV text into ``tmp_path``."""

    def _write(name: str, content: str) -> Path:
        path = tmp_path / name
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")
        return path

    return _write


@pytest.fixture
def staging_dir(tmp_path: Path, monkeypatch) -> Path:
    """Redirect temporary files into an empty, inspectable directory."""
    directory = tmp_path / "staging"
    directory.mkdir()
    monkeypatch.setattr(tempfile, "tempdir", str(directory))
    return directory


@pytest.fixture
def make_converter(tmp_path: Path, monkeypatch):
    """Return a factory installing a fake PDF converter on ``PATH``.

    The factory returns a namespace with the converter ``name``, the
    ``settings`` selecting it and the ``log`` file it writes on each call.
    """
    if os.name == "nt":
        pytest.skip("fake converter script requires a POSIX shebang")
    bin_dir = tmp_path / "bin"
    bin_dir.mkdir()
    monkeypatch.setenv("PATH", f"{bin_dir}{os.pathsep}{os.environ.get('PATH', '')}")

    def _make(exit_code: int = 0) -> SimpleNamespace:
        log = tmp_path / "converter-call.json"
        script = bin_dir / FAKE_CONVERTER_NAME
        body = _FAKE_CONVERTER_SOURCE.format(log=str(log), exit_code=exit_code)
        script.write_text(f"#!{sys.executable}\n{body}", encoding="utf-8")
        script.chmod(0o755)
        return SimpleNamespace(
            name=FAKE_CONVERTER_NAME,
            log=log,
            settings=Settings(pdf_converter=FAKE_CONVERTER_NAME),
        )

    return _make


@pytest.fixture
def missing_converter_settings(tmp_path: Path, monkeypatch) -> Settings:
    """Settings naming a converter that is not on an emptied ``PATH``."""
    empty_bin = tmp_path / "empty-bin"
    empty_bin.mkdir()
    monkeypatch.setenv("PATH", str(empty_bin))
    return Settings(pdf_converter="no-such-html2pdf")
