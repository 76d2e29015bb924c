"""
Loading and validation of the WebAppScraper configuration.
Pydantic describes the schema; defaults fill in everything except
``crawler.base_url``, which has no default and must be supplied.
"""
from __future__ import annotations

import errno
import json
import os
import re
from pathlib import Path
from typing import Any, List, Literal, Mapping, Optional, Union
from urllib.parse import urlsplit

import yaml
from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    field_validator,
)
from pydantic.alias_generators import to_camel

__all__ = (
    "CrawlerConfig",
    "ExtractionConfig",
    "AuthConfig",
    "OutputConfig",
    "ScraperConfig",
    "build_config",
    "load_config",
)

DEFAULT_TEXT_SELECTORS = [
    "h1, h2, h3, h4, h5, h6",
    "p, li, td, th",
    'label, button, input[type="submit"]',
    ".content, .description, .help-text",
]


class _Section(BaseModel):
    # camelCase keys ("maxDepth") and snake_case keys ("max_depth") are both accepted
    model_config = ConfigDict(
        extra="forbid",
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )


class CrawlerConfig(_Section):
    """Frontier, budget and browser-session settings for one crawl."""

    base_url: str = Field(..., description="Seed URL; its origin bounds the crawl.")
    max_depth: int = Field(3, ge=0, description="Maximum link-following depth (0 = seed only).")
    max_pages: int = Field(100, ge=1, description="Hard cap on the number of visited pages.")
    request_delay_ms: int = Field(500, ge=0, description="Politeness pause between visits.")
    exclude_urls: List[str] = Field(
        default_factory=list, description="Regex patterns; matching links are never enqueued."
    )
    respect_robots_txt: bool = Field(True, description="Install the robots.txt gate.")
    user_agent: str = Field("Web-App-Scraper/1.0", min_length=1, description="Browser user agent.")

    navigation_timeout_ms: int = Field(30000, gt=0, description="Timeout of one navigation.")
    page_timeout_ms: int = Field(30000, gt=0, description="Default timeout of page operations.")
    settle_ms: int = Field(1000, ge=0, description="Wait after navigation before reading the page.")
    wait_until: Literal["load", "domcontentloaded", "networkidle", "commit"] = "networkidle"
    headless: bool = True
    viewport_width: int = Field(1280, gt=0)
    viewport_height: int = Field(800, gt=0)
    concurrency: int = Field(1, ge=1, description="Number of pages visited at the same time.")

    @field_validator("base_url")
    @classmethod
    def _check_base_url(cls, v: str) -> str:
        parts = urlsplit(v)
        if parts.scheme not in ("http", "https") or not parts.netloc:
            raise ValueError(f"base_url must be an absolute http(s) URL, got {v!r}")
        return v

    @field_validator("exclude_urls")
    @classmethod
    def _check_patterns(cls, v: List[str]) -> List[str]:
        for pattern in v:
            try:
                re.compile(pattern)
            except re.error as exc:
                raise ValueError(f"invalid exclude pattern {pattern!r}: {exc}") from exc
        return v


class ExtractionConfig(_Section):
    capture_screenshots: bool = True
    # accepted for compatibility; workflow detection is not performed
    detect_workflows: bool = True
    text_selectors: List[str] = Field(default_factory=lambda: list(DEFAULT_TEXT_SELECTORS))
    max_screenshot_width: int = Field(1200, gt=0)
    max_workflow_depth: int = Field(5, ge=0)


class Credentials(_Section):
    username: str
    password: str


class OtpHandlerConfig(_Section):
    enabled: bool = False
    timeout_ms: int = Field(60000, gt=0)


class AuthConfig(_Section):
    """Authentication settings. Only stored; login automation is not performed."""

    login_url: Optional[str] = None
    credentials: Optional[Credentials] = None
    otp_handler: Optional[OtpHandlerConfig] = None


class OutputConfig(_Section):
    directory: Optional[str] = None
    format: Literal["markdown", "json", "html"] = "markdown"


class ScraperConfig(_Section):
    """Complete configuration of one scraper instance."""

    crawler: CrawlerConfig
    extraction: ExtractionConfig = Field(default_factory=ExtractionConfig)
    authentication: Optional[AuthConfig] = None
    output: OutputConfig = Field(default_factory=OutputConfig)
    use_llm: bool = Field(True, alias="useLLM", description="Ignored; no LLM enhancement.")
    log_level: Literal["debug", "info", "warn", "error"] = "info"


def build_config(config: Union[ScraperConfig, Mapping[str, Any]]) -> ScraperConfig:
    """Merge a caller-supplied mapping over the defaults; pass models through."""
    if isinstance(config, ScraperConfig):
        return config
    return ScraperConfig.model_validate(dict(config))


_DEFAULT_CFG = Path("configs/default.yaml")


def _read_yaml(path: Path) -> dict[str, Any]:
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as exc:
        raise ValueError(f"Invalid YAML in {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise TypeError(f"Top level of YAML must be a mapping, got {type(data).__name__}")
    return data


def _read_json(path: Path) -> dict[str, Any]:
    try:
        data = json.loads(path.read_text(encoding="utf-8")) or {}
    except json.JSONDecodeError as exc:
        raise ValueError(f"Invalid JSON in {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise TypeError(f"Top level of JSON must be a mapping, got {type(data).__name__}")
    return data


def load_config(path: Union[str, Path, None]) -> ScraperConfig:
    """
    Read YAML or JSON and return a validated ScraperConfig.
    Raises FileNotFoundError when the file (or the default config) is missing.
    """
    if path is None:
        if not _DEFAULT_CFG.exists():
            raise FileNotFoundError(errno.ENOENT, os.strerror(errno.ENOENT), str(_DEFAULT_CFG))
        path_obj = _DEFAULT_CFG
    else:
        path_obj = Path(path).expanduser().resolve()
        if not path_obj.is_file():
            raise FileNotFoundError(errno.ENOENT, os.strerror(errno.ENOENT), str(path_obj))

    suffix = path_obj.suffix.lower()
    if suffix in (".yaml", ".yml"):
        data = _read_yaml(path_obj)
    elif suffix == ".json":
        data = _read_json(path_obj)
    else:
        raise ValueError(f"Unsupported config format: {suffix}")

    return ScraperConfig(**data)
