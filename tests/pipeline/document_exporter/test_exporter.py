"""Tests for output format resolution and document routing."""

import io
import logging
from pathlib import Path

import pytest

from makeinvoice.exceptions import DestinationWriteError
from makeinvoice.pipeline.document_exporter import exporter
from makeinvoice.pipeline.document_exporter.exporter import (
    OutputFormat,
    RenderedDocument,
    export_document,
    force_extension,
    resolve_destination,
    resolve_format,
)

TABLE = "a|b\n--|--\n1|2"


@pytest.mark.parametrize(
    "path, expected",
    [
        (None, OutputFormat.STDOUT),
        ("", OutputFormat.STDOUT),
        ("out.md", OutputFormat.MARKDOWN),
        ("out", OutputFormat.MARKDOWN),
        ("out.txt", OutputFormat.MARKDOWN),
        ("out.html", OutputFormat.HTML),
        ("out.pdf", OutputFormat.PDF),
        (Path("dir/OUT.PDF"), OutputFormat.PDF),
    ],
)
def test_resolve_format(path, expected):
    assert resolve_format(path) is expected


def test_resolve_destination():
    dest = resolve_destination("invoice.pdf")
    assert dest.path == Path("invoice.pdf")
    assert dest.format is OutputFormat.PDF
    assert resolve_destination(None).path is None


def test_force_extension():
    assert force_extension("invoice", ".pdf") == "invoice.pdf"
    assert force_extension("invoice.pdf", ".pdf") == "invoice.pdf"
    assert force_extension("invoice.txt", ".pdf") == "invoice.txt.pdf"
    assert force_extension("invoice.MD", ".md") == "invoice.MD"


def test_stdout_prints_verbatim(capsys):
    assert export_document(RenderedDocument(TABLE), None) is None
    assert capsys.readouterr().out == TABLE


def test_stdout_to_custom_stream():
    stream = io.StringIO()
    export_document(RenderedDocument("# x\n"), "", stream=stream)
    assert stream.getvalue() == "# x\n"


def test_markdown_file_written_unconverted(tmp_path: Path):
    target = tmp_path / "out.md"
    written = export_document(RenderedDocument(TABLE), target)
    assert written == target
    assert target.read_text(encoding="utf-8") == TABLE


def test_unrecognized_extension_falls_back_to_markdown(tmp_path: Path):
    written = export_document(RenderedDocument(TABLE), tmp_path / "out.txt")
    assert written == tmp_path / "out.txt.md"
    assert written.read_text(encoding="utf-8") == TABLE


def test_markdown_file_truncates_existing(tmp_path: Path):
    target = tmp_path / "out.md"
    target.write_text("old content that is longer", encoding="utf-8")
    export_document(RenderedDocument("new"), target)
    assert target.read_text(encoding="utf-8") == "new"


def test_html_destination_converts_markdown_once(tmp_path: Path, monkeypatch):
    calls = []
    real = exporter.to_html

    def counting(text):
        calls.append(text)
        return real(text)

    monkeypatch.setattr(exporter, "to_html", counting)
    written = export_document(RenderedDocument(TABLE), tmp_path / "out.html")
    assert calls == [TABLE]
    assert "<table>" in written.read_text(encoding="utf-8")


def test_markdown_destination_never_converts(tmp_path: Path, monkeypatch):
    monkeypatch.setattr(
        exporter, "to_html", lambda text: pytest.fail("converted twice")
    )
    doc = RenderedDocument("<html><table></table></html>", is_html=True)
    written = export_document(doc, tmp_path / "page")
    assert written == tmp_path / "page.md"
    assert written.read_text(encoding="utf-8") == doc.content


def test_preconverted_html_destination_written_as_is(tmp_path: Path, monkeypatch):
    monkeypatch.setattr(
        exporter, "to_html", lambda text: pytest.fail("converted twice")
    )
    doc = RenderedDocument("<p>done</p>", is_html=True)
    written = export_document(doc, tmp_path / "page.html")
    assert written.read_text(encoding="utf-8") == "<p>done</p>"


def test_pdf_destination_converts_then_renders(tmp_path: Path, monkeypatch):
    seen = {}

    def fake_render_pdf(html, output_path, *, converter, style):
        seen.update(html=html, output=output_path, converter=converter, style=style)
        return output_path

    monkeypatch.setattr(exporter, "render_pdf", fake_render_pdf)
    written = export_document(
        RenderedDocument(TABLE), tmp_path / "invoice.pdf", style="s.css"
    )
    assert written == tmp_path / "invoice.pdf"
    assert "<table>" in seen["html"]
    assert seen["converter"] == "wkhtmltopdf"
    assert seen["style"] == "s.css"


def test_style_ignored_outside_pdf(tmp_path: Path, caplog):
    caplog.set_level(logging.WARNING)
    export_document(RenderedDocument("x"), tmp_path / "o.md", style="s.css")
    assert "only applied to PDF" in caplog.text


def test_write_failure_names_path(tmp_path: Path):
    blocker = tmp_path / "blocker"
    blocker.write_text("file, not a directory", encoding="utf-8")
    target = blocker / "out.md"
    with pytest.raises(DestinationWriteError) as excinfo:
        export_document(RenderedDocument("x"), target)
    assert str(target) in str(excinfo.value)


class _BrokenPipeStream(io.StringIO):
    def write(self, text):
        raise BrokenPipeError("pipe closed")


def test_stdout_write_failure_is_a_destination_error():
    with pytest.raises(DestinationWriteError, match="standard output"):
        export_document(RenderedDocument(TABLE), None, stream=_BrokenPipeStream())
