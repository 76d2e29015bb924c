# File: webapp_scraper/report/__init__.py
"""webapp_scraper.report: writers for generated documents (JSON, Markdown, HTML)."""

from __future__ import annotations

from pathlib import Path
from typing import List, Optional

from webapp_scraper.config import OutputConfig
from webapp_scraper.crawler.models import ContentRecord
from webapp_scraper.report.html_report import render_html
from webapp_scraper.report.json_report import render_json
from webapp_scraper.report.markdown_report import render_markdown

_EXTENSIONS = {"json": "json", "markdown": "md", "html": "html"}


def render_documents(
    documents: List[ContentRecord], output: OutputConfig, basename: str = "documents"
) -> Optional[Path]:
    """Write *documents* in ``output.format`` into ``output.directory``; no directory, no file."""
    if output.directory is None:
        return None
    path = Path(output.directory) / f"{basename}.{_EXTENSIONS[output.format]}"
    if output.format == "json":
        return render_json(documents, path)
    if output.format == "html":
        return render_html(documents, None, path)
    return render_markdown(documents, path)


__all__ = ["render_json", "render_markdown", "render_html", "render_documents"]
