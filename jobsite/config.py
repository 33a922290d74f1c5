"""
Configuration loader for the Jobsite billing package.

Loads settings from jobsite_config.yaml and provides typed access
to all configuration sections.
"""
import logging
from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from pathlib import Path
from typing import Any, Optional
from functools import lru_cache

import yaml

from jobsite.domain.entities import MarkupPolicy
from jobsite.domain.exceptions import ValidationError


# Default config shipped inside the package
DEFAULT_CONFIG_PATH = Path(__file__).parent / "jobsite_config.yaml"


class ConfigurationError(Exception):
    """Raised when the config file is missing, unreadable or has bad values."""
    pass


class JobsiteConfig:
    """
    Configuration manager for the Jobsite package.

    Wraps the parsed YAML and exposes billing, date, report and logging
    settings with their defaults.
    Most callers go through get_config().
    """

    def __init__(self, config_path: Optional[Path] = None):
        self._config_path = Path(config_path) if config_path else DEFAULT_CONFIG_PATH
        self._config: dict = {}
        self._load()

    def _load(self) -> None:
        """Read and validate the YAML file."""
        if not self._config_path.exists():
            raise ConfigurationError(f"Config file not found: {self._config_path}")

        try:
            with open(self._config_path, 'r') as f:
                self._config = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ConfigurationError(f"Invalid YAML in config file: {e}")

        if not isinstance(self._config, dict):
            raise ConfigurationError("Config file must contain a YAML mapping")

    def reload(self) -> None:
        """Re-read the file this instance was built from."""
        self._load()
        # get_config() must not hand out the stale instance
        get_config.cache_clear()

    @property
    def path(self) -> Path:
        return self._config_path

    @property
    def version(self) -> str:
        """Version string declared by the config file."""
        return self._config.get("version", "unknown")

    # =========================================================================
    # Billing
    # =========================================================================

    @property
    def billing(self) -> dict:
        """Billing configuration."""
        return self._config.get("billing", {})

    def _markup_value(self, key: str, default: str) -> Decimal:
        raw = self.billing.get("markup", {}).get(key, default)
        try:
            value = Decimal(str(raw))
        except InvalidOperation:
            raise ConfigurationError(f"billing.markup.{key} is not a number: {raw!r}")
        if value < 0:
            raise ConfigurationError(f"billing.markup.{key} cannot be negative")
        return value

    @property
    def markup_on_time(self) -> Decimal:
        """Markup applied when the project had no delay."""
        return self._markup_value("on_time", "1.35")

    @property
    def markup_delayed(self) -> Decimal:
        """Markup applied when the project had any delay."""
        return self._markup_value("delayed", "1.25")

    def markup_policy(self) -> MarkupPolicy:
        """Build the project markup policy from the billing section."""
        return MarkupPolicy(on_time=self.markup_on_time, delayed=self.markup_delayed)

    # =========================================================================
    # Dates
    # =========================================================================

    @property
    def date_format(self) -> str:
        """strptime format for date strings."""
        return self._config.get("dates", {}).get("format", "%Y-%m-%d")

    def parse_date(self, value: Any, field: str = "date") -> date:
        """
        Parse a date string using the configured format.

        Args:
            value: Date string (date objects are returned unchanged)
            field: Field name reported on failure

        Raises:
            ValidationError: If the value does not match the format
        """
        if isinstance(value, datetime):
            return value.date()
        if isinstance(value, date):
            return value
        try:
            return datetime.strptime(str(value), self.date_format).date()
        except ValueError:
            raise ValidationError(field, f"'{value}' does not match {self.date_format}")

    # =========================================================================
    # Report
    # =========================================================================

    @property
    def report(self) -> dict:
        """Summary formatting configuration."""
        return self._config.get("report", {})

    @property
    def currency_symbol(self) -> str:
        return self.report.get("currency_symbol", "$")

    @property
    def decimal_places(self) -> int:
        return int(self.report.get("decimal_places", 2))

    # =========================================================================
    # Logging
    # =========================================================================

    @property
    def logging(self) -> dict:
        """Logging configuration."""
        return self._config.get("logging", {})

    @property
    def log_level(self) -> int:
        """Numeric logging level (INFO when unset or unknown)."""
        name = str(self.logging.get("level", "INFO")).upper()
        level = logging.getLevelName(name)
        return level if isinstance(level, int) else logging.INFO

    @property
    def log_format(self) -> str:
        return self.logging.get(
            "format", "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
        )

    # =========================================================================
    # Raw Access
    # =========================================================================

    def get(self, key: str, default: Any = None) -> Any:
        """Raw top-level section, or default."""
        return self._config.get(key, default)

    def __getitem__(self, key: str) -> Any:
        """Raw top-level section; raises KeyError when absent."""
        return self._config[key]

    def __contains__(self, key: str) -> bool:
        """Whether a top-level section is present."""
        return key in self._config


@lru_cache(maxsize=1)
def get_config(config_path: Optional[str] = None) -> JobsiteConfig:
    """
    Shared configuration, loaded once per process.

    Args:
        config_path: Alternate YAML file (the packaged one when omitted)

    Returns:
        JobsiteConfig singleton instance
    """
    path = Path(config_path) if config_path else None
    return JobsiteConfig(path)


def reload_config() -> JobsiteConfig:
    """Drop the cached config and load it again."""
    get_config.cache_clear()
    return get_config()
