"""
Configuration Manager
---------------------
Loads client settings from YAML with environment variable overrides.

Rules:
- The API key lives in the environment only, never in the config file
- A missing config file is fine; defaults apply
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional
import logging
import os

import yaml

# DeepL issues free-tier keys with this suffix
FREE_TIER_KEY_SUFFIX = ":fx"

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off"}


class ConfigError(Exception):
    """Configuration is missing or malformed."""


def parse_bool(value: Any, key: str) -> bool:
    """Interpret a YAML or environment value as a boolean."""
    if isinstance(value, bool):
        return value
    text = str(value).strip().lower()
    if text in _TRUE_VALUES:
        return True
    if text in _FALSE_VALUES:
        return False
    raise ConfigError(f"Invalid boolean for {key}: {value!r}")


@dataclass
class ClientConfig:
    """Settings needed to build a DeepL client."""
    api_key_env: str = "DEEPL_API_KEY"  # Environment variable name (NOT the actual key)
    free_tier: Optional[bool] = None     # None: decide from the key
    timeout_seconds: float = 30.0

    def resolve_free_tier(self, api_key: str) -> bool:
        """Explicit setting wins, otherwise free-tier keys end in ':fx'."""
        if self.free_tier is not None:
            return self.free_tier
        return api_key.endswith(FREE_TIER_KEY_SUFFIX)


class ConfigManager:
    """
    Centralized configuration management.
    Loads the ``deepl`` section from YAML with environment variable overrides.
    """

    ENV_PREFIX = "DEEPL_"

    def __init__(self, config_path: Optional[str] = "config.yaml"):
        self._config_path = Path(config_path) if config_path else None
        self._config: Dict[str, Any] = {}
        self._logger = logging.getLogger("deepl.infra.config")

        self._load_config()

    def _load_config(self) -> None:
        """Load configuration from file."""
        if self._config_path is None:
            return
        if not self._config_path.exists():
            self._logger.debug(f"Config file not found: {self._config_path}")
            return

        try:
            with open(self._config_path, "r", encoding="utf-8") as f:
                loaded = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ConfigError(f"Cannot parse {self._config_path}: {e}") from e

        if not isinstance(loaded, dict):
            raise ConfigError(f"{self._config_path} must contain a mapping")
        self._config = loaded
        self._logger.info(f"Loaded config from {self._config_path}")

    def get(self, key: str, default: Any = None) -> Any:
        """
        Get a configuration value.
        Supports dot notation: 'deepl.timeout_seconds'
        Environment variables override file config: DEEPL_TIMEOUT_SECONDS.
        """
        env_key = f"{self.ENV_PREFIX}{key.split('.')[-1].upper()}"
        env_value = os.getenv(env_key)
        if env_value is not None:
            return env_value

        value = self._config
        for part in key.split("."):
            if isinstance(value, dict) and part in value:
                value = value[part]
            else:
                return default

        return value

    def client_config(self) -> ClientConfig:
        """Build the client settings from file and environment."""
        defaults = ClientConfig()

        api_key_env = self.get("deepl.api_key_env", defaults.api_key_env)

        free_tier = self.get("deepl.free_tier")
        if free_tier is not None:
            free_tier = parse_bool(free_tier, "free_tier")

        timeout = self.get("deepl.timeout_seconds", defaults.timeout_seconds)
        try:
            timeout = float(timeout)
        except (TypeError, ValueError) as e:
            raise ConfigError(f"Invalid timeout_seconds: {timeout!r}") from e
        if timeout <= 0:
            raise ConfigError(f"timeout_seconds must be positive, got {timeout}")

        return ClientConfig(
            api_key_env=str(api_key_env),
            free_tier=free_tier,
            timeout_seconds=timeout,
        )


def load_client_config(config_path: Optional[str] = "config.yaml") -> ClientConfig:
    """Load client settings from an optional YAML file plus the environment."""
    return ConfigManager(config_path).client_config()


def resolve_api_key(config: ClientConfig) -> str:
    """Read the API key from the environment variable the config names."""
    api_key = os.getenv(config.api_key_env, "").strip()
    if not api_key:
        raise ConfigError(
            f"API key not found: set the {config.api_key_env} environment variable"
        )
    return api_key
