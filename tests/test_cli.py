# File: tests/test_cli.py
"""CLI tests with click.testing.CliRunner.
Cover the `crawl` and `config` commands, `--version` and error handling.
"""
import importlib
import json

import pytest
from click.testing import CliRunner

import webapp_scraper.scraper as scraper_module
from webapp_scraper.cli import cli

# The package re-exports the click Group as `cli`, shadowing the submodule attribute.
cli_module = importlib.import_module("webapp_scraper.cli")

DOCUMENTS = [
    {
        "id": "page-https___example_com",
        "content": "# Example\n\nURL: https://example.com\n\nScraped at: 2024-01-01T00:00:00+00:00",
        "metadata": {
            "source": "https://example.com",
            "title": "Example",
            "timestamp": "2024-01-01T00:00:00+00:00",
            "type": "web-page",
        },
    }
]


@pytest.fixture(autouse=True)
def patch_run_scraper(monkeypatch):
    """Replace run_scraper so no browser is started."""
    calls = []

    async def fake_run(cfg, timeout=None):
        calls.append((cfg, timeout))
        return DOCUMENTS

    monkeypatch.setattr(cli_module, "run_scraper", fake_run)
    return calls


@pytest.fixture()
def cfg_file(tmp_path):
    path = tmp_path / "config.json"
    path.write_text(
        json.dumps(
            {
                "crawler": {
                    "baseUrl": "https://example.com",
                    "maxDepth": 1,
                    "maxPages": 50,
                    "requestDelayMs": 0,
                    "settleMs": 0,
                },
                "extraction": {"captureScreenshots": False},
            }
        ),
        encoding="utf-8",
    )
    return path


def test_version_option():
    runner = CliRunner()
    result = runner.invoke(cli, ["--version"])
    assert result.exit_code == 0
    assert "WebAppScraper" in result.output


def test_show_config(cfg_file):
    runner = CliRunner()
    result = runner.invoke(cli, ["--config", str(cfg_file), "--limit", "5", "config"])
    assert result.exit_code == 0
    data = json.loads(result.output)
    assert data["crawler"]["base_url"] == "https://example.com"
    assert data["crawler"]["max_pages"] == 5
    assert data["crawler"]["max_depth"] == 1


def test_crawl_stdout_is_pure_json(cfg_file, monkeypatch, site, session):
    """Logs go to stderr; stdout holds only the documents."""
    site.add("https://example.com", title="Example", hrefs=["/about"])
    site.add("https://example.com/about", title="About")
    monkeypatch.setattr(cli_module, "run_scraper", scraper_module.run_scraper)
    monkeypatch.setattr(scraper_module, "BrowserSession", lambda config, logger=None: session)

    runner = CliRunner()
    result = runner.invoke(cli, ["--config", str(cfg_file), "--log-level", "DEBUG", "crawl"])

    assert result.exit_code == 0
    documents = json.loads(result.stdout)
    assert [doc["metadata"]["source"] for doc in documents] == [
        "https://example.com",
        "https://example.com/about",
    ]
    assert "WebAppScraper initialized" in result.stderr
    assert session.close_calls == 1


def test_crawl_passes_timeout(cfg_file, patch_run_scraper):
    runner = CliRunner()
    result = runner.invoke(cli, ["--config", str(cfg_file), "crawl", "--crawl-timeout", "30"])
    assert result.exit_code == 0
    assert json.loads(result.stdout) == DOCUMENTS
    cfg, timeout = patch_run_scraper[0]
    assert cfg.crawler.base_url == "https://example.com"
    assert timeout == 30.0


def test_crawl_url_override(cfg_file, patch_run_scraper):
    runner = CliRunner()
    result = runner.invoke(cli, ["--config", str(cfg_file), "crawl", "--url", "https://other.org"])
    assert result.exit_code == 0
    assert patch_run_scraper[0][0].crawler.base_url == "https://other.org"


def test_crawl_invalid_url_override(cfg_file):
    runner = CliRunner()
    result = runner.invoke(cli, ["--config", str(cfg_file), "crawl", "--url", "not-a-url"])
    assert result.exit_code == 1


def test_crawl_file_outputs(cfg_file, tmp_path):
    out_json = tmp_path / "out.json"
    out_md = tmp_path / "out.md"
    out_html = tmp_path / "out.html"
    runner = CliRunner()
    result = runner.invoke(
        cli,
        [
            "--config", str(cfg_file), "crawl",
            "--json", str(out_json), "--markdown", str(out_md), "--html", str(out_html),
        ],
    )
    assert result.exit_code == 0
    assert json.loads(out_json.read_text(encoding="utf-8")) == DOCUMENTS
    assert out_md.read_text(encoding="utf-8").startswith("# Example")
    assert "https://example.com" in out_html.read_text(encoding="utf-8")


def test_crawl_failure_exits_with_error(cfg_file, monkeypatch):
    async def broken(cfg, timeout=None):
        raise RuntimeError("browser missing")

    monkeypatch.setattr(cli_module, "run_scraper", broken)
    runner = CliRunner()
    result = runner.invoke(cli, ["--config", str(cfg_file), "crawl"])
    assert result.exit_code == 1
    assert "browser missing" in result.output


def test_invalid_config_exits_with_error(tmp_path):
    bad = tmp_path / "bad.yaml"
    bad.write_text("crawler: {maxDepth: 1}", encoding="utf-8")
    runner = CliRunner()
    result = runner.invoke(cli, ["--config", str(bad), "config"])
    assert result.exit_code == 1
    assert "Failed to load configuration" in result.output
