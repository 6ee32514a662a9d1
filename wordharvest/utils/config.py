"""
Configuration management for wordharvest.

Built-in defaults can be overridden by an optional YAML file, which in turn
is overridden by command-line flags.
"""

import yaml
import logging
from pathlib import Path
from typing import Dict, List, Any, Optional
from dataclasses import dataclass, field, fields, replace


DEFAULT_USER_AGENT = "wordharvest/1.0"


class ConfigError(ValueError):
    """Raised for unreadable or invalid configuration."""
    pass


@dataclass
class CrawlerConfig:
    """Configuration for crawler behavior."""
    depth: int = 2
    min_word_length: int = 3
    max_word_length: int = 24
    scope: List[str] = field(default_factory=list)
    url_filter: Optional[str] = None
    no_filter: bool = False
    max_concurrent_requests: int = 10
    request_timeout: int = 30
    user_agent: str = DEFAULT_USER_AGENT
    respect_robots_txt: bool = False


@dataclass
class OutputConfig:
    """Configuration for result output."""
    path: Optional[str] = None
    json: bool = False


@dataclass
class LoggingConfig:
    """Configuration for logging."""
    level: str = "INFO"
    file: Optional[str] = None
    format: str = "%(asctime)s %(message)s"


@dataclass
class Config:
    """Main configuration class."""
    crawler: CrawlerConfig = field(default_factory=CrawlerConfig)
    output: OutputConfig = field(default_factory=OutputConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)


SECTIONS = {
    'crawler': CrawlerConfig,
    'output': OutputConfig,
    'logging': LoggingConfig,
}


class ConfigManager:
    """Manages configuration loading and validation."""

    def __init__(self, config_path: Optional[str] = None):
        self.config_path = Path(config_path) if config_path else None

    def load_config(self) -> Config:
        """Load configuration from the YAML file, or defaults without one."""
        if self.config_path is None:
            return Config()

        if not self.config_path.exists():
            raise ConfigError(f"Configuration file not found: {self.config_path}")

        try:
            with open(self.config_path, 'r') as file:
                config_data = yaml.safe_load(file) or {}
        except (OSError, yaml.YAMLError) as e:
            raise ConfigError(f"Cannot read configuration file {self.config_path}: {e}") from e

        if not isinstance(config_data, dict):
            raise ConfigError(f"Configuration file {self.config_path} must contain a mapping")

        sections = {}
        for name, section_cls in SECTIONS.items():
            sections[name] = self._parse_section(name, section_cls, config_data.get(name) or {})

        config = Config(**sections)
        validate_config(config)
        return config

    @staticmethod
    def _parse_section(name: str, section_cls, data: Dict[str, Any]):
        if not isinstance(data, dict):
            raise ConfigError(f"Section '{name}' must be a mapping")

        known = {f.name for f in fields(section_cls)}
        unknown = set(data) - known
        if unknown:
            raise ConfigError(f"Unknown keys in section '{name}': {', '.join(sorted(unknown))}")

        return section_cls(**data)


def validate_config(config: Config):
    """
    Validate configuration values.

    Raises:
        ConfigError: On the first invalid value
    """
    crawler = config.crawler

    for name in ('depth', 'min_word_length', 'max_word_length',
                 'max_concurrent_requests', 'request_timeout'):
        value = getattr(crawler, name)
        if not isinstance(value, int) or isinstance(value, bool):
            raise ConfigError(f"crawler.{name} must be an integer, got {value!r}")

    if crawler.depth < 0:
        raise ConfigError("crawler.depth must be non-negative")

    if crawler.max_concurrent_requests < 1:
        raise ConfigError("crawler.max_concurrent_requests must be at least 1")

    if crawler.request_timeout < 1:
        raise ConfigError("crawler.request_timeout must be at least 1")

    if not isinstance(crawler.scope, list):
        raise ConfigError("crawler.scope must be a list")

    level = config.logging.level
    if not isinstance(level, str) or not isinstance(logging.getLevelName(level.upper()), int):
        raise ConfigError(f"Unknown logging level: {config.logging.level}")


def merge_overrides(config: Config, section: str, **overrides) -> Config:
    """
    Return a copy of ``config`` with non-None values replaced in one section.
    """
    values = {key: value for key, value in overrides.items() if value is not None}
    if not values:
        return config
    updated = replace(getattr(config, section), **values)
    return replace(config, **{section: updated})


def load_config(config_path: Optional[str] = None) -> Config:
    """Load configuration from file, or built-in defaults when no path is given."""
    return ConfigManager(config_path).load_config()
