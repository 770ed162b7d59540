"""
Config system - Layered typed configuration for response emission.

Merge order (later overrides earlier):
1. ResponseConfig defaults
2. .env file (HERALD_* keys)
3. Environment variables (HERALD_* prefix)
4. Manual overrides
"""

from dataclasses import dataclass, fields, replace
from typing import Any, Dict, Optional
import os

from dotenv import dotenv_values

from .faults import Fault, FaultDomain


@dataclass(frozen=True)
class ResponseConfig:
    """Settings shared by every response type."""

    encoding: str = "utf-8"
    sniff_limit: int = 3072
    chunk_size: int = 64 * 1024
    json_sort_keys: bool = False
    template_autoescape: bool = True

    def __post_init__(self):
        if self.sniff_limit <= 0:
            raise ConfigError(f"sniff_limit must be positive, got {self.sniff_limit}")
        if self.chunk_size <= 0:
            raise ConfigError(f"chunk_size must be positive, got {self.chunk_size}")
        try:
            "".encode(self.encoding)
        except LookupError:
            raise ConfigError(f"Unknown encoding: {self.encoding!r}")

    def with_overrides(self, **overrides: Any) -> "ResponseConfig":
        return replace(self, **overrides)


class ConfigError(Fault):
    """Raised when configuration validation fails."""

    def __init__(self, message: str, **kwargs):
        super().__init__(
            code="CONFIG_INVALID",
            message=message,
            domain=FaultDomain.CONFIG,
            **kwargs,
        )


class ConfigLoader:
    """
    Loads and merges response configuration with precedence:
    overrides > environment variables > .env file > defaults
    """

    def __init__(self, env_prefix: str = "HERALD_"):
        self.env_prefix = env_prefix
        self.config_data: Dict[str, Any] = {}

    @classmethod
    def load(
        cls,
        env_file: Optional[str] = None,
        env_prefix: str = "HERALD_",
        overrides: Optional[Dict[str, Any]] = None,
    ) -> ResponseConfig:
        """
        Build a ResponseConfig from all sources.

        Args:
            env_file: Path to .env file
            env_prefix: Prefix for environment variables
            overrides: Manual overrides (highest precedence)

        Returns:
            Validated ResponseConfig
        """
        loader = cls(env_prefix=env_prefix)

        if env_file:
            loader._load_env_file(env_file)

        loader._load_from_env()

        if overrides:
            loader.config_data.update(overrides)

        return loader.build()

    def _load_env_file(self, path: str):
        """Load config from .env file."""
        for key, value in dotenv_values(path).items():
            if value is not None and key.startswith(self.env_prefix):
                self._set(key, value)

    def _load_from_env(self):
        """Load config from environment variables."""
        for key, value in os.environ.items():
            if key.startswith(self.env_prefix):
                self._set(key, value)

    def _set(self, key: str, value: str):
        """Convert HERALD_CHUNK_SIZE to chunk_size."""
        name = key[len(self.env_prefix):].lower()
        self.config_data[name] = self._parse_value(value)

    def _parse_value(self, value: str) -> Any:
        """Parse string value to appropriate type."""
        if value.lower() in ("true", "yes", "on"):
            return True
        if value.lower() in ("false", "no", "off"):
            return False

        try:
            if "." in value:
                return float(value)
            return int(value)
        except ValueError:
            pass

        return value

    def build(self) -> ResponseConfig:
        known = {f.name: f.type for f in fields(ResponseConfig)}
        data = {}
        for key, value in self.config_data.items():
            if key not in known:
                continue
            expected = known[key]
            if expected in (int, "int") and (isinstance(value, bool) or not isinstance(value, int)):
                raise ConfigError(f"Config key '{key}' expects an integer, got {value!r}")
            if expected in (bool, "bool") and not isinstance(value, bool):
                raise ConfigError(f"Config key '{key}' expects a boolean, got {value!r}")
            if expected in (str, "str"):
                value = str(value)
            data[key] = value
        return ResponseConfig(**data)


_default_config = ResponseConfig()


def get_default_config() -> ResponseConfig:
    """Config used by responses that were not given one explicitly."""
    return _default_config


def set_default_config(config: ResponseConfig) -> None:
    global _default_config
    _default_config = config
