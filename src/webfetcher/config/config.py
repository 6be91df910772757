"""
Configuration management for webfetcher using Pydantic.
"""

from __future__ import annotations

import logging
import os
import threading
from pathlib import Path
from typing import Any, ClassVar, Dict, List, Literal, Optional, cast

import yaml
from pydantic import BaseModel, Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# --- Setup Logging ---
log = logging.getLogger(__name__)

DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
)

# --- Nested Configuration Models ---


class HttpConfig(BaseModel):
    """Fast-path HTTP extractor configuration."""

    timeout: float = Field(default=10.0, description="Request timeout in seconds.")
    max_redirects: int = Field(default=5, ge=0, description="Maximum redirect hops to follow.")
    user_agent: str = Field(default=DEFAULT_USER_AGENT, description="Default browser identity string.")
    accept: str = "text/html,application/xhtml+xml,application/xml;q=0.9,application/json,*/*;q=0.8"
    accept_language: str = "en-US,en;q=0.5"
    github_token: Optional[str] = Field(
        default_factory=lambda: os.getenv("GITHUB_TOKEN") or None,
        description="Bearer credential attached only to repository API requests.",
    )

    @field_validator("timeout")
    @classmethod
    def validate_timeout(cls, v: float) -> float:
        if v <= 0:
            raise ValueError("timeout must be positive")
        return v


class BrowserConfig(BaseModel):
    """Rendered-page extractor configuration."""

    enabled: bool = True
    headless: bool = True
    max_timeout_ms: int = Field(default=15000, gt=0, description="Upper bound for the page-load timeout.")
    settle_delay: float = Field(default=2.0, ge=0, description="Seconds to wait after the body element exists.")
    user_agent: str = Field(default=DEFAULT_USER_AGENT)
    executable_path: Optional[str] = Field(
        default_factory=lambda: os.getenv("CHROME_BIN") or None,
        description="Chromium binary to launch instead of the bundled one.",
    )
    launch_args: List[str] = Field(
        default_factory=lambda: [
            "--no-sandbox",
            "--disable-dev-shm-usage",
            "--disable-blink-features=AutomationControlled",
            "--disable-extensions",
        ]
    )


class OcrConfig(BaseModel):
    """Screenshot OCR extractor configuration."""

    enabled: bool = True
    max_timeout_ms: int = Field(default=10000, gt=0)
    settle_delay: float = Field(default=3.0, ge=0)
    headless: bool = True
    executable_path: Optional[str] = Field(
        default_factory=lambda: os.getenv("CHROME_BIN") or None,
        description="Chromium binary to launch instead of the bundled one.",
    )
    viewport_width: int = 1920
    viewport_height: int = 1080
    max_image_width: int = Field(default=1920, gt=0, description="Screenshots wider than this are downscaled.")
    language: str = "eng"
    oem: int = 1
    psm: int = 3
    tesseract_cmd: Optional[str] = Field(
        default=None,
        description="Path to the tesseract binary, applied process-wide by configure_tesseract().",
    )
    trigger: Literal["always", "fallback"] = Field(
        default="always",
        description="'always' joins every race; 'fallback' only when no browser or document extractor runs.",
    )
    launch_args: List[str] = Field(default_factory=lambda: ["--no-sandbox", "--disable-dev-shm-usage"])


class DocumentConfig(BaseModel):
    """Structured document extractor configuration."""

    enabled: bool = True
    timeout: float = Field(default=30.0, description="Download timeout in seconds.")
    extensions: List[str] = Field(default_factory=lambda: [".pdf", ".doc", ".docx", ".pptx", ".ppt"])

    @field_validator("extensions")
    @classmethod
    def validate_extensions(cls, v: List[str]) -> List[str]:
        if not v:
            raise ValueError("extensions must contain at least one suffix")
        return [ext.lower() if ext.startswith(".") else f".{ext.lower()}" for ext in v]


class ScoringConfig(BaseModel):
    """Heuristic content scoring constants."""

    fast_path_threshold: float = Field(
        default=50.0,
        description="HTTP results scoring above this are returned without running other extractors.",
    )
    min_length: int = 100
    short_content_penalty: float = 20.0
    chars_per_point: float = 100.0
    max_length_points: float = 50.0
    paragraph_min_length: int = 50
    points_per_paragraph: float = 2.0
    max_paragraph_points: float = 20.0
    error_penalty: float = 30.0
    error_patterns: List[str] = Field(
        default_factory=lambda: [
            r"error",
            r"not found",
            r"access denied",
            r"forbidden",
            r"timeout",
            r"captcha",
            r"robot",
        ]
    )
    method_bonuses: Dict[str, float] = Field(
        default_factory=lambda: {
            "browser": 5.0,
            "http": 3.0,
            "document": 10.0,
            "ocr": -5.0,
        }
    )
    heading_bonus: float = 10.0
    link_bonus: float = 5.0
    directory_listing_score: float = 80.0
    file_content_score: float = 90.0


class MonitoringConfig(BaseModel):
    """Configuration for logging output."""

    log_level: str = Field(default="INFO", description="Logging level (e.g., DEBUG, INFO, WARNING).")
    log_file: str | None = Field(default=None, description="Path to log file. If None, logs to stderr.")

    @field_validator("log_file", mode="before")
    @classmethod
    def create_parent_dir(cls, v: str | Path | None) -> str | None:
        if v is None:
            return None
        path = Path(v)
        path.parent.mkdir(parents=True, exist_ok=True)
        return str(path)


# --- Main Configuration Class ---


class Config(BaseSettings):
    project_name: str = "webfetcher"
    version: str = "0.1.0"
    default_timeout_ms: int = Field(default=30000, gt=0, description="Overall budget for the parallel phase.")
    http: HttpConfig = Field(default_factory=HttpConfig)
    browser: BrowserConfig = Field(default_factory=BrowserConfig)
    ocr: OcrConfig = Field(default_factory=OcrConfig)
    document: DocumentConfig = Field(default_factory=DocumentConfig)
    scoring: ScoringConfig = Field(default_factory=ScoringConfig)
    monitoring: MonitoringConfig = Field(default_factory=MonitoringConfig)

    model_config = SettingsConfigDict(env_prefix="WEBFETCHER_", env_nested_delimiter="__", case_sensitive=False)

    @classmethod
    def from_yaml(cls, path: Path) -> Config:
        log.debug("Loading configuration from YAML file: %s", path)
        if not path.is_file():
            raise FileNotFoundError(f"Configuration file not found or is not a file: {path}")
        with open(path, "r", encoding="utf-8") as f:
            yaml_data = yaml.safe_load(f)
        if not yaml_data:
            log.warning("Configuration file is empty: %s. Using default settings.", path)
            return cls.model_validate({})
        return cls.model_validate(yaml_data)


def find_config_file() -> Path | None:
    current_dir = Path.cwd()
    paths_to_check = [
        current_dir / "webfetcher.yaml",
        current_dir / "webfetcher.yml",
    ]
    for path in paths_to_check:
        if path.exists():
            return path
    return None


# --- Lazy Configuration Loader ---


class LazyConfig:
    """
    A proxy for the Config object that delays its loading and validation
    until an attribute is first accessed, so a broken config file does not
    crash the importing process.
    """

    _config: ClassVar[Config | None] = None
    _lock: ClassVar[threading.Lock] = threading.Lock()

    def __getattr__(self, name: str) -> Any:
        if self.__class__._config is None:
            with self.__class__._lock:
                if self.__class__._config is None:
                    self.__class__._config = self._load_config_with_fallback()
        return getattr(self.__class__._config, name)

    def _load_config_with_fallback(self) -> Config:
        """Load configuration from file or fall back to defaults."""
        config_path = find_config_file()
        if config_path:
            try:
                log.info("Lazy loading configuration from: %s", config_path)
                return Config.from_yaml(config_path)
            except (ValidationError, OSError, yaml.YAMLError) as e:
                log.error(
                    "Failed to load or validate configuration from '%s': %s. "
                    "Falling back to default settings. Please check your config file.",
                    config_path,
                    e,
                    exc_info=log.getEffectiveLevel() <= logging.DEBUG,
                )
        else:
            log.debug("No config file found. Using default settings for lazy load.")

        try:
            return Config()
        except ValidationError as e:
            log.critical("FATAL: Default configuration is invalid: %s", e, exc_info=True)
            raise RuntimeError(f"Default configuration is invalid, cannot start: {e}") from e

    @classmethod
    def reset(cls) -> None:
        """Drop the cached configuration so the next access reloads it."""
        with cls._lock:
            cls._config = None


# --- Global Settings Instance ---
settings: "Config" = cast("Config", LazyConfig())
