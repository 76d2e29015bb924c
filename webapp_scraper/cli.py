#!/usr/bin/env python3
"""
Command-line entry point for WebAppScraper.

Commands:
  crawl     Crawl the configured site and print/save the generated documents
  config    Show the effective configuration

Common options:
  --config PATH       Path to a YAML/JSON config (default: configs/default.yaml)
  --limit INT         Max number of pages to visit (overrides crawler.max_pages)
  --log-level LEVEL   Logging level (DEBUG, INFO, ...); defaults to log_level from the config
  --log-file PATH     Log file (stderr only when omitted)
  --log-format FORMAT Log format (e.g. "%(asctime)s %(levelname)s %(message)s")

crawl options:
  --url URL           Override crawler.base_url
  --json PATH         Save documents as JSON
  --markdown PATH     Save documents as Markdown
  --html PATH         Save documents as HTML
  --template DIR      Directory with documents.html.j2
  --pretty            Indent JSON output by 2
  --crawl-timeout SEC Stop dequeuing new pages after SEC seconds

Misc:
  --version, -v       Show the WebAppScraper version

Example:
  webapp_scraper --config configs/default.yaml --limit 20 crawl --json out/documents.json
"""
import asyncio
import json
import sys
from pathlib import Path

import click
from pydantic import ValidationError

from webapp_scraper import __version__
from webapp_scraper.config import CrawlerConfig, ScraperConfig, load_config
from webapp_scraper.logger import init_logging
from webapp_scraper.report import render_documents, render_html, render_json, render_markdown
from webapp_scraper.scraper import run_scraper

CONTEXT_SETTINGS = dict(help_option_names=["--help"])


def print_error(message: str):
    click.secho(message, fg='red', err=True)
    sys.exit(1)


def override_crawler(cfg: ScraperConfig, **changes) -> ScraperConfig:
    """Return a copy of *cfg* with crawler fields replaced and re-validated."""
    crawler = CrawlerConfig.model_validate({**cfg.crawler.model_dump(), **changes})
    return cfg.model_copy(update={"crawler": crawler})


@click.group(context_settings=CONTEXT_SETTINGS)
@click.version_option(__version__, '--version', '-v', message='WebAppScraper, version %(version)s')
@click.option(
    '--config', '-c', 'config_path',
    default='configs/default.yaml',
    show_default=True,
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help='Path to the YAML/JSON configuration file.'
)
@click.option(
    '--limit', '-l', 'limit',
    type=click.IntRange(min=1),
    default=None,
    help='Max number of pages to visit (overrides crawler.max_pages)'
)
@click.option(
    '--log-level', 'log_level',
    default=None,
    type=click.Choice(['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL']),
    help='Logging level (default: log_level from the config)'
)
@click.option(
    '--log-file', 'log_file',
    default=None,
    type=click.Path(writable=True, dir_okay=False, path_type=Path),
    help='Log file path (stderr only when omitted)'
)
@click.option(
    '--log-format', 'log_format',
    default='%(asctime)s %(levelname)s %(message)s',
    show_default=True,
    help='Format string for log records'
)
@click.pass_context
def cli(ctx, config_path, limit, log_level, log_file, log_format):
    """WebAppScraper command group."""
    try:
        cfg = load_config(config_path)
        if limit is not None:
            cfg = override_crawler(cfg, max_pages=limit)
    except Exception as e:
        print_error(f'Failed to load configuration: {e}')
    init_logging(
        level=log_level or cfg.log_level,
        log_file=str(log_file) if log_file else None,
        log_format=log_format
    )
    ctx.ensure_object(dict)
    ctx.obj['config'] = cfg


@cli.command('crawl', context_settings=CONTEXT_SETTINGS)
@click.option(
    '--url', '-u', 'base_url',
    default=None,
    help='Override crawler.base_url'
)
@click.option(
    '--json', '-j', 'json_output',
    default=None,
    type=click.Path(writable=True, dir_okay=False, path_type=Path),
    help='Save documents as JSON'
)
@click.option(
    '--markdown', '-m', 'markdown_output',
    default=None,
    type=click.Path(writable=True, dir_okay=False, path_type=Path),
    help='Save documents as Markdown'
)
@click.option(
    '--html', '-h', 'html_output',
    default=None,
    type=click.Path(writable=True, dir_okay=False, path_type=Path),
    help='Save documents as HTML'
)
@click.option(
    '--template', '-t', 'template_dir',
    default=None,
    type=click.Path(exists=True, file_okay=False, path_type=Path),
    help='Directory with documents.html.j2 (built-in template when omitted)'
)
@click.option(
    '--pretty', is_flag=True,
    help='Indent JSON output by 2'
)
@click.option(
    '--crawl-timeout', 'crawl_timeout',
    type=float,
    default=None,
    help='Stop dequeuing new pages after this many seconds'
)
@click.pass_context
def crawl(ctx, base_url, json_output, markdown_output, html_output, template_dir, pretty, crawl_timeout):
    """Crawl the site and output the generated documents."""
    cfg = ctx.obj['config']
    if base_url:
        try:
            cfg = override_crawler(cfg, base_url=base_url)
        except ValidationError as e:
            print_error(f'Invalid --url: {e}')
    click.echo(f'Starting crawl at: {cfg.crawler.base_url}', err=True)
    try:
        documents = asyncio.run(run_scraper(cfg, timeout=crawl_timeout))
    except Exception as e:
        print_error(f'Crawl failed: {e}')

    saved = render_documents(documents, cfg.output)
    if saved is not None:
        click.echo(f'{cfg.output.format} output: {saved}', err=True)

    # nothing requested explicitly: print to stdout
    if not json_output and not markdown_output and not html_output:
        indent = 2 if pretty else None
        click.echo(json.dumps(documents, ensure_ascii=False, indent=indent))
        return

    if json_output:
        try:
            click.echo(f'JSON output: {render_json(documents, json_output, pretty=pretty)}')
        except OSError as e:
            print_error(f'Failed to save JSON: {e}')

    if markdown_output:
        try:
            click.echo(f'Markdown output: {render_markdown(documents, markdown_output)}')
        except OSError as e:
            print_error(f'Failed to save Markdown: {e}')

    if html_output:
        try:
            click.echo(f'HTML output: {render_html(documents, template_dir, html_output)}')
        except Exception as e:
            print_error(f'Failed to save HTML: {e}')


@cli.command('config', context_settings=CONTEXT_SETTINGS)
@click.pass_context
def show_config(ctx):
    """Show the effective configuration as JSON."""
    cfg = ctx.obj['config']
    click.echo(cfg.model_dump_json(indent=2))


if __name__ == "__main__":
    cli()
