# webapp_scraper/report/markdown_report.py
"""Markdown output: all documents in one file, separated by horizontal rules."""

from __future__ import annotations

from pathlib import Path
from typing import List, Union

from webapp_scraper.crawler.models import ContentRecord

_SEPARATOR = "\n\n---\n\n"


def render_markdown(documents: List[ContentRecord], output_path: Union[Path, str]) -> Path:
    output = Path(output_path)
    output.parent.mkdir(parents=True, exist_ok=True)
    body = _SEPARATOR.join(doc["content"] for doc in documents)
    output.write_text(body + "\n" if body else "", encoding="utf-8")
    return output
