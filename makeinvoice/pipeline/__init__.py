"""Export pipeline subpackages.

- `markdown_generator`: CSV ingestion, table formatting and templating.
- `document_exporter`: Markdown to HTML conversion and output routing.
- `runner`: the end-to-end export entry point.
"""
