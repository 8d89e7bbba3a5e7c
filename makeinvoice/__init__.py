"""makeinvoice package.

Turns one or more CSV files into a Markdown, HTML or PDF document. Each CSV
file becomes a Markdown table keyed by its file name, the keyed tables are
rendered through a Jinja2 template, and the result is routed by the output
path's extension.

Package Structure
-----------------
- `pipeline/markdown_generator/`:
    CSV ingestion, Markdown table formatting and template rendering.
- `pipeline/document_exporter/`:
    Markdown to HTML conversion and routing of the rendered document to
    stdout, Markdown, HTML or PDF.
- `pipeline/runner.py`: the end-to-end export entry point.
- `cli.py`: command-line interface.
- `config.py`: constants and runtime settings.
- `exceptions.py`: application exception hierarchy.

Examples
--------
>>> from makeinvoice.pipeline.runner import run_export
>>> run_export(["data.csv"], output="invoice.pdf")  # doctest: +SKIP
"""

__version__ = "1.0.0"
