"""
System configuration.

One configuration for the whole library, loaded from YAML:

    num:
      backend: decimal        # decimal | double
      precision: 32           # significant digits for the decimal backend
    indicators:
      recursion_threshold: 100
    logging:
      level: INFO

Search order for ``SystemConfig.load()``:
1. Explicit path argument
2. ``$QTANALYSIS_CONFIG``
3. ``config/qtanalysis.yaml`` in the working directory
4. Built-in defaults

Partial files are deep-merged over the defaults and ``${VAR}`` placeholders
are substituted from the environment.
"""

import os
import re
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any, Literal

import yaml

from qtanalysis.num import DEFAULT_PRECISION, DecimalNumFactory, DoubleNumFactory, NumFactory
from qtanalysis.system.log_system import LoggingConfig as LoggerConfig

CONFIG_ENV_VAR = "QTANALYSIS_CONFIG"
DEFAULT_CONFIG_PATH = Path("config/qtanalysis.yaml")

_ENV_PATTERN = re.compile(r"\$\{([^}]+)\}")


@dataclass
class NumConfig:
    """Numeric backend used by series that are built without an explicit factory."""

    backend: Literal["decimal", "double"] = "decimal"
    precision: int = DEFAULT_PRECISION

    def build_factory(self) -> NumFactory:
        """
        Build the configured NumFactory.

        Returns:
            Shared factory instance when the defaults are used, a new one otherwise

        Raises:
            ValueError: If the backend name is unknown
        """
        if self.backend == "double":
            return DoubleNumFactory.get_instance()
        if self.backend == "decimal":
            if self.precision == DEFAULT_PRECISION:
                return DecimalNumFactory.get_instance()
            return DecimalNumFactory(self.precision)
        raise ValueError(f"Unknown num backend '{self.backend}' (expected 'decimal' or 'double')")


@dataclass
class IndicatorConfig:
    """Indicator evaluation settings."""

    # Bars a recursive indicator may be asked ahead of its cache before prefilling
    recursion_threshold: int = 100


@dataclass
class LoggingConfig:
    """Logging section of the system file (see log_system.LoggingConfig)."""

    level: str = "INFO"
    format: str = "console"
    timestamp_format: str = "compact"
    enable_file: bool = False
    file_path: str = "logs/qtanalysis.log"
    file_level: str = "WARNING"
    file_rotation: bool = True
    max_file_size_mb: int = 10
    backup_count: int = 3

    def to_logger_config(self) -> LoggerConfig:
        """Convert to the pydantic model consumed by LoggerFactory."""
        data = asdict(self)
        data["file_path"] = Path(self.file_path)
        return LoggerConfig(**data)


@dataclass
class SystemConfig:
    """Complete library configuration."""

    num: NumConfig = field(default_factory=NumConfig)
    indicators: IndicatorConfig = field(default_factory=IndicatorConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    @classmethod
    def load(cls, path: Path | str | None = None) -> "SystemConfig":
        """
        Load configuration from YAML, falling back to defaults.

        Args:
            path: Optional explicit config file

        Returns:
            SystemConfig with file values merged over defaults
        """
        candidates: list[Path] = []
        if path is not None:
            candidates.append(Path(path))
        else:
            env_path = os.environ.get(CONFIG_ENV_VAR)
            if env_path:
                candidates.append(Path(env_path))
            candidates.append(DEFAULT_CONFIG_PATH)

        for candidate in candidates:
            if candidate.is_file():
                with open(candidate) as f:
                    data = yaml.safe_load(f) or {}
                return cls._from_dict(_substitute_env_vars(data))

        return cls()

    @classmethod
    def _from_dict(cls, data: dict[str, Any]) -> "SystemConfig":
        """Build config from a (possibly partial) dictionary."""
        merged = _deep_merge(asdict(cls()), data)
        return cls(
            num=NumConfig(**merged["num"]),
            indicators=IndicatorConfig(**merged["indicators"]),
            logging=LoggingConfig(**merged["logging"]),
        )


def _deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Recursively merge override into a copy of base (override wins)."""
    result = dict(base)
    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = _deep_merge(result[key], value)
        else:
            result[key] = value
    return result


def _substitute_env_vars(value: Any) -> Any:
    """Replace ${VAR} placeholders with environment values (unknown vars are kept)."""
    if isinstance(value, dict):
        return {key: _substitute_env_vars(item) for key, item in value.items()}
    if isinstance(value, list):
        return [_substitute_env_vars(item) for item in value]
    if isinstance(value, str):
        return _ENV_PATTERN.sub(lambda match: os.environ.get(match.group(1), match.group(0)), value)
    return value


_system_config: SystemConfig | None = None


def get_system_config(path: Path | str | None = None) -> SystemConfig:
    """
    Get the system configuration singleton.

    Args:
        path: Optional explicit config file; when given the file is loaded
              and replaces the cached instance

    Returns:
        Cached SystemConfig
    """
    global _system_config
    if path is not None or _system_config is None:
        _system_config = SystemConfig.load(path)
    return _system_config


def reload_system_config(path: Path | str | None = None) -> SystemConfig:
    """Force a reload of the system configuration."""
    global _system_config
    _system_config = SystemConfig.load(path)
    return _system_config
