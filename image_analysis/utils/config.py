"""Configuration Management

Loads configuration from YAML files and environment variables.
"""

import os
from pathlib import Path
from typing import Any, Optional

import yaml
from dotenv import load_dotenv

from ..errors import ConfigurationError


class Config:
    """Configuration manager for the application."""

    DEFAULT_CONFIG_PATH = Path(__file__).parent.parent.parent / "config" / "settings.yaml"

    def __init__(self, config_path: Optional[Path] = None):
        """Initialize configuration.

        Args:
            config_path: Optional path to configuration file.
        """
        load_dotenv()

        self.config_path = Path(
            config_path or os.environ.get("CONFIG_FILE", self.DEFAULT_CONFIG_PATH)
        )
        self._config = self._load_config()

    def _load_config(self) -> dict:
        if self.config_path.exists():
            with open(self.config_path, "r", encoding="utf-8") as f:
                return yaml.safe_load(f) or {}
        return {}

    def get(self, key: str, default: Any = None) -> Any:
        """Get a configuration value using dot notation.

        Args:
            key: Configuration key (e.g., "http.timeout").
            default: Default value if key not found.

        Returns:
            Configuration value.
        """
        keys = key.split(".")
        value = self._config

        for k in keys:
            if isinstance(value, dict) and k in value:
                value = value[k]
            else:
                return default

        return value

    def _number(self, key: str, default: Any, cast: type) -> Any:
        value = self.get(key, default)
        try:
            return cast(value)
        except (TypeError, ValueError) as e:
            raise ConfigurationError(
                f"Invalid value for '{key}' in {self.config_path}: {value!r}"
            ) from e

    def _timeout(self, key: str, default: float) -> Optional[float]:
        timeout = self._number(key, default, float)
        return timeout if timeout > 0 else None

    @property
    def http_timeout(self) -> Optional[float]:
        """Image download timeout in seconds; 0 or less disables it."""
        return self._timeout("http.timeout", 10.0)

    @property
    def vision_max_results(self) -> int:
        return self._number("vision.max_results", 20, int)

    @property
    def vision_timeout(self) -> Optional[float]:
        """Vision API request timeout in seconds; 0 or less keeps the SDK default."""
        return self._timeout("vision.timeout", 30.0)

    @property
    def deepl_api_key(self) -> Optional[str]:
        return os.environ.get("DEEPL_API_KEY")

    @property
    def translation_strategy(self) -> str:
        """Get the translation strategy ("joined" or "per_label")."""
        return self.get("translation.strategy", "joined")

    @property
    def translation_timeout(self) -> Optional[float]:
        """DeepL request timeout in seconds; 0 or less keeps the SDK default."""
        return self._timeout("translation.timeout", 10.0)

    @property
    def strict_alignment(self) -> bool:
        """Whether a translation/label count mismatch fails the request."""
        return bool(self.get("formatting.strict_alignment", False))

    @property
    def log_level(self) -> str:
        return self.get("logging.level", "INFO")

    @property
    def log_file(self) -> Optional[Path]:
        path = self.get("logging.file")
        return Path(path) if path else None
