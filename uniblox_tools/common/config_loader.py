"""
================================================================================
Configuration Loader
================================================================================

YAML-based configuration management with environment variable override support.

Features:
    - YAML configuration loading (config/config.yaml)
    - Environment variable override (UNIBLOX_APP_URL overrides app.url)
    - Dot notation path access
    - Typed accessors for the harness settings
    - Hard-coded default set when the file is missing

Author: Automation Team
License: MIT
================================================================================
"""

from __future__ import annotations

import copy
import os
from pathlib import Path
from typing import Any, Dict, Optional

import yaml
from loguru import logger


# Default configuration file path
DEFAULT_CONFIG_PATH = Path(__file__).parent.parent.parent / "config" / "config.yaml"

# Prefix for environment overrides (UNIBLOX_APP_URL -> app.url)
ENV_PREFIX = "UNIBLOX_"

# Used when the configuration file does not exist
DEFAULT_SETTINGS: Dict[str, Any] = {
    "app": {
        "name": "Uniblox",
        "url": "https://d28j9pfwubj8q5.cloudfront.net/5U5PU/4oKeg/app-selector",
    },
    "browser": "chrome",
    "timeout": 10,
    "implicit_wait": 5,
}


class ConfigurationError(Exception):
    """Raised when configuration loading or access fails."""
    pass


class ConfigLoader:
    """
    Configuration loader with YAML and environment variable support.

    Configuration hierarchy (highest to lowest priority):
        1. Environment variables (UNIBLOX_APP_URL, UNIBLOX_BROWSER, UNIBLOX_TIMEOUT)
        2. YAML configuration file
        3. Default values

    Usage:
        >>> config = ConfigLoader()
        >>> config.app_url
        'https://d28j9pfwubj8q5.cloudfront.net/5U5PU/4oKeg/app-selector'

        >>> config.get("test.user.name", "Test User")
        'Test User'

    Environment Variable Mapping:
        - app.url -> UNIBLOX_APP_URL
        - browser_options.headless -> UNIBLOX_BROWSER_OPTIONS_HEADLESS
        - implicit_wait -> UNIBLOX_IMPLICIT_WAIT
    """

    _instance: Optional["ConfigLoader"] = None
    _config: Dict[str, Any] = {}

    def __new__(cls, config_path: Optional[Path] = None) -> "ConfigLoader":
        """
        Singleton pattern - return existing instance if available.
        """
        if cls._instance is None:
            cls._instance = super().__new__(cls)
            cls._instance._initialized = False
        return cls._instance

    def __init__(self, config_path: Optional[Path] = None) -> None:
        """
        Initialize configuration loader.

        Args:
            config_path: Path to YAML configuration file.
                        Uses DEFAULT_CONFIG_PATH if not specified.
        """
        if getattr(self, "_initialized", False):
            return

        self._config_path = Path(config_path or DEFAULT_CONFIG_PATH)
        self._load_config()
        self._initialized = True

    def _load_config(self) -> None:
        """Load configuration from YAML file."""
        if not self._config_path.exists():
            logger.warning(
                f"Configuration file not found: {self._config_path}. "
                f"Using built-in defaults."
            )
            self._config = copy.deepcopy(DEFAULT_SETTINGS)
            return

        try:
            with open(self._config_path, "r", encoding="utf-8") as f:
                self._config = yaml.safe_load(f) or {}
            logger.debug(f"Loaded configuration from: {self._config_path}")
        except yaml.YAMLError as e:
            raise ConfigurationError(
                f"Invalid YAML in configuration file: {e}"
            ) from e

    def get(self, key: str, default: Any = None) -> Any:
        """
        Get configuration value by dot-notation path.

        First checks environment variables, then YAML config, then default.

        Args:
            key: Dot-notation path (e.g., "app.url")
            default: Default value if key not found

        Returns:
            Configuration value or default
        """
        env_key = ENV_PREFIX + key.upper().replace(".", "_")
        env_value = os.environ.get(env_key)
        if env_value is not None:
            return self._convert_type(env_value, default)

        value = self._config
        for part in key.split("."):
            if isinstance(value, dict):
                value = value.get(part)
            else:
                value = None

            if value is None:
                return default

        return value

    # =========================================================================
    # Typed accessors
    # =========================================================================

    @property
    def app_url(self) -> str:
        return str(self.get("app.url", DEFAULT_SETTINGS["app"]["url"]))

    @property
    def app_name(self) -> str:
        return str(self.get("app.name", DEFAULT_SETTINGS["app"]["name"]))

    @property
    def browser(self) -> str:
        return str(self.get("browser", "chrome"))

    @property
    def timeout(self) -> int:
        """Synchronized-wait timeout in seconds."""
        return int(self.get("timeout", 10))

    @property
    def implicit_wait(self) -> int:
        """Element lookup budget in seconds."""
        return int(self.get("implicit_wait", 5))

    @property
    def headless(self) -> bool:
        return bool(self.get("browser_options.headless", True))

    @property
    def disable_images(self) -> bool:
        return bool(self.get("browser_options.disable_images", False))

    @property
    def page_load_strategy(self) -> str:
        return str(self.get("browser_options.page_load_strategy", "normal"))

    @property
    def report_dir(self) -> Path:
        return Path(self.get("report.dir", "test-output/reports"))

    @property
    def screenshot_dir(self) -> Path:
        return Path(self.get("report.screenshot_dir", "test-output/screenshots"))

    @property
    def placeholder_screenshots(self) -> bool:
        return bool(self.get("report.placeholder_screenshots", False))

    def reload(self) -> None:
        """
        Reload configuration from file.
        """
        self._load_config()
        logger.info(f"Configuration reloaded from: {self._config_path}")

    def _convert_type(self, value: str, reference: Any) -> Any:
        """
        Convert string value to match reference type.

        Used for environment variables which are always strings.
        """
        if reference is None:
            return value

        if isinstance(reference, bool):
            return value.lower() in ("true", "1", "yes", "on")
        if isinstance(reference, int):
            try:
                return int(value)
            except ValueError:
                return value
        if isinstance(reference, float):
            try:
                return float(value)
            except ValueError:
                return value

        return value

    @classmethod
    def reset(cls) -> None:
        """
        Reset singleton instance.

        Useful for testing when configuration needs to be reloaded
        with different settings.
        """
        cls._instance = None
        cls._config = {}


__all__ = [
    "ConfigLoader",
    "ConfigurationError",
    "DEFAULT_SETTINGS",
    "ENV_PREFIX",
]
