# webapp_scraper/report/json_report.py

"""
JSON output for WebAppScraper.

Serializes the generated content records to a file.
"""
import json
from pathlib import Path
from typing import List

from webapp_scraper.crawler.models import ContentRecord


def render_json(documents: List[ContentRecord], output_path: Path | str, pretty: bool = True) -> Path:
    """
    Save *documents* as a JSON array at *output_path*.

    :param documents: content records from ``WebAppScraper.generate_documentation()``
    :param output_path: path of the JSON file
    :param pretty: indent the output by two spaces
    :return: Path of the saved file

    Example:
    ```python
    from webapp_scraper.report.json_report import render_json
    report_path = render_json(scraper.generate_documentation(), 'out/documents.json')
    ```
    """
    output = Path(output_path)
    output.parent.mkdir(parents=True, exist_ok=True)

    with output.open('w', encoding='utf-8') as f:
        json.dump(documents, f, ensure_ascii=False, indent=2 if pretty else None)

    return output
