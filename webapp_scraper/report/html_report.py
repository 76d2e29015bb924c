# File: webapp_scraper/report/html_report.py
"""webapp_scraper.report.html_report: HTML output rendered with Jinja2."""

from __future__ import annotations

from pathlib import Path
from typing import Any, List, Optional, Union

from jinja2 import Environment, FileSystemLoader, select_autoescape

from webapp_scraper.crawler.models import ContentRecord

TEMPLATE_NAME = "documents.html.j2"
BUILTIN_TEMPLATES = Path(__file__).resolve().parent / "templates"


def render_html(
    documents: List[ContentRecord],
    template_dir: Optional[Union[Path, str]],
    output_path: Union[Path, str],
) -> Path:
    """Render *documents* through ``documents.html.j2`` and save the result.

    Args:
        documents: content records from ``WebAppScraper.generate_documentation()``.
        template_dir: directory holding ``documents.html.j2``; ``None`` uses
            the template shipped with the package.
        output_path: path of the resulting HTML file.

    Returns:
        Path of the saved HTML file.

    Example:
    ```python
    from webapp_scraper.report.html_report import render_html
    html_path = render_html(documents, template_dir=None, output_path='out/documents.html')
    ```
    """
    template_dir = Path(template_dir) if template_dir is not None else BUILTIN_TEMPLATES
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)

    env = Environment(
        loader=FileSystemLoader(str(template_dir)),
        autoescape=select_autoescape(["html", "xml", "j2"]),
    )
    template = env.get_template(TEMPLATE_NAME)

    context: dict[str, Any] = {"documents": documents}

    html_content = template.render(**context)
    output_path.write_text(html_content, encoding="utf-8")

    return output_path
