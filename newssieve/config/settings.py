"""
NewsSieve Configuration System
==============================

Environment-driven settings built on pydantic-settings, plus the static
feed-source list loaded from YAML. Environment variables override Field
defaults (prefix ``NEWSSIEVE_``, nested delimiter ``__``).
"""

from pathlib import Path
from typing import List, Optional
from enum import Enum

import yaml
from pydantic import BaseModel, Field, ValidationError as PydanticValidationError, field_validator
from pydantic_settings import BaseSettings

from ..models import FeedSource
from ..utils.exceptions import ConfigurationError, ErrorCode


DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
)


class AIProvider(str, Enum):
    """Available text oracle providers."""
    GROQ = "groq"
    GEMINI = "gemini"
    DEEPSEEK = "deepseek"
    CEREBRAS = "cerebras"


class LogLevel(str, Enum):
    """Available log levels."""
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class ProcessingSettings(BaseModel):
    """Feed fetching and batch limits."""
    max_entries_per_feed: int = Field(default=50, ge=1, le=1000, description="Default per-feed item cap")
    request_timeout: int = Field(default=30, ge=1, le=300, description="Feed request timeout in seconds")
    max_redirects: int = Field(default=3, ge=0, le=20, description="Redirects followed per request")
    ai_request_timeout: int = Field(default=60, ge=1, le=600, description="Oracle call timeout in seconds")
    user_agent: str = Field(default=DEFAULT_USER_AGENT, description="User-Agent sent with every request")


class ContentSettings(BaseModel):
    """Content resolution and length policy."""
    min_content_length: int = Field(default=30, ge=0, description="Bodies shorter than this are discarded")
    max_content_length: int = Field(default=500, ge=1, description="Bodies longer than this are summarized")
    detail_page_enabled: bool = Field(default=True, description="Global switch for detail-page scraping")
    detail_page_timeout: int = Field(default=30, ge=1, le=300, description="Detail page timeout in seconds")
    min_fragment_length: int = Field(default=100, ge=0, description="Selector matches must be longer than this")
    footer_window_lines: int = Field(default=10, ge=0, description="Trailing lines inspected for boilerplate")
    default_content_selectors: List[str] = Field(
        default_factory=lambda: [
            "article",
            ".content",
            'div[class*="content"]',
            'div[class*="main"]',
            'div[class*="article"]',
            'div[class*="post"]',
        ],
        description="Selectors tried when a source configures none",
    )

    @field_validator("max_content_length")
    @classmethod
    def validate_max_length(cls, v, info):
        """Keep the summarize threshold above the discard threshold."""
        minimum = info.data.get("min_content_length")
        if minimum is not None and v < minimum:
            raise ValueError("max_content_length must not be below min_content_length")
        return v


class AISettings(BaseModel):
    """Text oracle configuration."""
    groq_api_key: Optional[str] = Field(default=None, description="Groq API key")
    gemini_api_key: Optional[str] = Field(default=None, description="Google Gemini API key")
    deepseek_api_key: Optional[str] = Field(default=None, description="DeepSeek API key")
    cerebras_api_key: Optional[str] = Field(default=None, description="Cerebras API key")

    classification_provider: AIProvider = Field(default=AIProvider.GROQ, description="Oracle for title classification")
    classification_model: str = Field(default="qwen/qwen3-32b", description="Classification model")
    summarization_provider: AIProvider = Field(default=AIProvider.GROQ, description="Oracle for condensation")
    summarization_model: str = Field(default="qwen/qwen3-32b", description="Summarization model")

    temperature: float = Field(default=0.7, ge=0.0, le=2.0, description="Sampling temperature")
    max_tokens: int = Field(default=8192, ge=16, le=65536, description="Maximum tokens per response")
    summary_char_budget: int = Field(default=400, ge=50, description="Target length of condensed bodies")

    def get_api_key(self, provider: AIProvider) -> Optional[str]:
        """Get API key for specified provider."""
        return {
            AIProvider.GROQ: self.groq_api_key,
            AIProvider.GEMINI: self.gemini_api_key,
            AIProvider.DEEPSEEK: self.deepseek_api_key,
            AIProvider.CEREBRAS: self.cerebras_api_key,
        }.get(AIProvider(provider))

    def require_api_key(self, provider: AIProvider) -> str:
        """Get API key or raise ConfigurationError when it is not configured."""
        key = self.get_api_key(provider)
        if not key:
            provider_value = AIProvider(provider).value
            raise ConfigurationError(
                f"Missing API key for {provider_value}",
                config_key=f"ai.{provider_value}_api_key",
                error_code=ErrorCode.CONFIG_CREDENTIAL_MISSING,
            )
        return key


class StorageSettings(BaseModel):
    """Record persistence."""
    root_dir: str = Field(default="app_data", description="Root directory of the collection store")
    collection: str = Field(default="news_feed/text", description="Collection records are written to")
    max_key_length: int = Field(default=100, ge=10, le=200, description="Maximum derived key length")
    record_extension: str = Field(default=".txt", description="Suffix appended to derived keys")


class LoggingSettings(BaseModel):
    """Logging configuration."""
    level: LogLevel = Field(default=LogLevel.INFO, description="Global log level")
    file_path: Optional[str] = Field(default="logs/newssieve.log", description="Log file path")
    max_file_size_mb: int = Field(default=10, ge=1, le=100, description="Max log file size in MB")
    backup_count: int = Field(default=5, ge=1, le=20, description="Number of log backup files")
    structured_logging: bool = Field(default=False, description="Use structured JSON logging")
    console_logging: bool = Field(default=True, description="Enable console logging")


class NewsSieveSettings(BaseSettings):
    """Main application settings."""

    processing: ProcessingSettings = Field(default_factory=ProcessingSettings)
    content: ContentSettings = Field(default_factory=ContentSettings)
    ai: AISettings = Field(default_factory=AISettings)
    storage: StorageSettings = Field(default_factory=StorageSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)

    feeds_file: str = Field(default="feeds.yaml", description="YAML list of feed sources")

    app_name: str = Field(default="NewsSieve", description="Application name")
    version: str = Field(default="1.0.0", description="Application version")
    debug: bool = Field(default=False, description="Enable debug mode")

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": False,
        "env_nested_delimiter": "__",
        "env_prefix": "NEWSSIEVE_",
        "extra": "ignore",
    }

    def get_effective_log_level(self) -> str:
        """Get effective log level considering debug mode."""
        if self.debug:
            return "DEBUG"
        return self.logging.level.value

    def configured_providers(self) -> List[AIProvider]:
        """Providers that have a credential configured."""
        return [provider for provider in AIProvider if self.ai.get_api_key(provider)]


def load_settings() -> NewsSieveSettings:
    """Load settings from environment variables, .env and defaults.

    Credentials are not required here; an oracle without a key fails only
    when it is first asked.

    Returns:
        Loaded and validated settings

    Raises:
        ConfigurationError: If configuration is invalid
    """
    from dotenv import load_dotenv
    load_dotenv()

    try:
        return NewsSieveSettings()
    except Exception as e:
        raise ConfigurationError(
            f"Failed to initialize settings: {e}",
            error_code=ErrorCode.CONFIG_INVALID
        ) from e


def load_feed_sources(path) -> List[FeedSource]:
    """Load feed sources from a YAML document.

    The document is either a list of sources or a mapping with a ``feeds`` list.
    Order is preserved; it is the processing order within a group.

    Args:
        path: YAML file path

    Returns:
        Validated feed sources

    Raises:
        ConfigurationError: If the file is missing, unparsable, or invalid
    """
    feeds_path = Path(path)
    if not feeds_path.is_file():
        raise ConfigurationError(
            f"Feed configuration not found: {feeds_path}",
            config_key="feeds_file",
            error_code=ErrorCode.CONFIG_MISSING,
        )

    try:
        with feeds_path.open("r", encoding="utf-8") as fh:
            document = yaml.safe_load(fh)
    except yaml.YAMLError as e:
        raise ConfigurationError(
            f"Invalid YAML in {feeds_path}: {e}",
            config_key="feeds_file",
            error_code=ErrorCode.CONFIG_PARSE_ERROR,
        ) from e

    if document is None:
        return []
    if isinstance(document, dict):
        document = document.get("feeds") or []
    if not isinstance(document, list):
        raise ConfigurationError(
            f"{feeds_path} must contain a list of feeds",
            config_key="feeds_file",
            error_code=ErrorCode.CONFIG_PARSE_ERROR,
        )

    sources = []
    for index, entry in enumerate(document):
        try:
            sources.append(FeedSource.model_validate(entry))
        except PydanticValidationError as e:
            raise ConfigurationError(
                f"Invalid feed #{index + 1} in {feeds_path}: {e}",
                config_key="feeds_file",
                context={"feed_index": index},
            ) from e

    return sources


_settings: Optional[NewsSieveSettings] = None


def get_settings(reload: bool = False) -> NewsSieveSettings:
    """Get global settings instance (singleton pattern).

    Args:
        reload: Force reload of settings

    Returns:
        Global settings instance
    """
    global _settings

    if _settings is None or reload:
        _settings = load_settings()

    return _settings
