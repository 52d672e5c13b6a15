"""
Configuration schema for mm1-trace.

Supports:
- YAML file loading
- Environment variable substitution (${VAR_NAME})
- Validation with error messages

Example config (mm1trace.yml):
    version: 1

    format:
      max_channels: 8
      tick_seconds: 3.2e-7

    plot:
      cols: 70
      rows: 30

    logging:
      level: ${MM1TRACE_LOG_LEVEL}
"""

import logging
import os
import re
from pathlib import Path
from dataclasses import dataclass, field, fields, asdict
from typing import Optional, List, Any

import yaml


def _substitute_env_vars(value: Any) -> Any:
    """
    Substitute ${VAR_NAME} with environment variable values.

    Example:
        ${MM1TRACE_LOG_LEVEL} → os.environ.get('MM1TRACE_LOG_LEVEL')
    """
    if isinstance(value, str):
        pattern = r'\$\{([^}]+)\}'

        def replace(match):
            var_name = match.group(1)
            env_value = os.environ.get(var_name)
            if env_value is None:
                return match.group(0)  # Keep original if not found
            return env_value

        return re.sub(pattern, replace, value)

    elif isinstance(value, dict):
        return {k: _substitute_env_vars(v) for k, v in value.items()}

    elif isinstance(value, list):
        return [_substitute_env_vars(v) for v in value]

    return value


_TRUE = ('true', 'yes', 'on', '1')
_FALSE = ('false', 'no', 'off', '0')


def _coerce_section(section_cls, values: dict):
    """
    Build a config section, converting values to the declared field types.

    Substituted ${VAR} values always arrive as strings.
    """
    types = {f.name: f.type for f in fields(section_cls)}
    converted = {}

    for key, value in values.items():
        kind = types.get(key)
        if kind is bool and isinstance(value, str):
            lowered = value.strip().lower()
            if lowered not in _TRUE + _FALSE:
                raise ValueError(f"Invalid boolean for {key}: {value!r}")
            value = lowered in _TRUE
        elif kind in (int, float) and not isinstance(value, bool):
            # YAML 1.1 reads exponents such as 1e-7 as strings
            value = kind(value)
        converted[key] = value

    return section_cls(**converted)


@dataclass
class FormatConfig:
    """Capture format settings."""
    max_channels: int = 8
    tick_seconds: float = 3.2e-7
    strict_pixel_mode: bool = False


@dataclass
class PlotConfig:
    """Spectrum plot canvas."""
    cols: int = 70
    rows: int = 30


@dataclass
class LoggingConfig:
    """Logging settings."""
    level: str = 'WARNING'

    @property
    def level_value(self) -> int:
        return logging.getLevelName(str(self.level).upper())


@dataclass
class TraceConfig:
    """Root configuration."""

    version: int = 1
    format: FormatConfig = field(default_factory=FormatConfig)
    plot: PlotConfig = field(default_factory=PlotConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    @classmethod
    def load(cls, path: Path) -> 'TraceConfig':
        """Load from YAML file with env var substitution."""
        path = Path(path)

        if not path.exists():
            raise FileNotFoundError(f"Config not found: {path}")

        with open(path) as f:
            data = yaml.safe_load(f) or {}

        data = _substitute_env_vars(data)
        return cls.from_dict(data)

    @classmethod
    def from_dict(cls, data: dict) -> 'TraceConfig':
        """Create from dictionary."""
        return cls(
            version=int(data.get('version', 1)),
            format=_coerce_section(FormatConfig, data.get('format') or {}),
            plot=_coerce_section(PlotConfig, data.get('plot') or {}),
            logging=_coerce_section(LoggingConfig, data.get('logging') or {}),
        )

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return asdict(self)

    def to_yaml(self) -> str:
        """Convert to YAML string."""
        return yaml.dump(self.to_dict(), default_flow_style=False, sort_keys=False)

    def validate(self) -> List[str]:
        """Validate config. Returns list of errors (empty if valid)."""
        errors = []

        if self.version != 1:
            errors.append(f"Unsupported config version: {self.version}")

        if not 0 < self.format.max_channels <= 0xFFFF:
            errors.append(f"Invalid max_channels: {self.format.max_channels}")

        if self.format.tick_seconds <= 0:
            errors.append(f"Invalid tick_seconds: {self.format.tick_seconds}")

        if self.plot.cols <= 0:
            errors.append(f"Invalid plot cols: {self.plot.cols}")

        if self.plot.rows < 2:
            errors.append(f"Invalid plot rows: {self.plot.rows} (need at least 2)")

        if not isinstance(self.logging.level_value, int):
            errors.append(f"Invalid log level: {self.logging.level}")

        return errors


def load_config(path: Optional[Path] = None) -> TraceConfig:
    """Load config from file or return defaults."""
    if path:
        return TraceConfig.load(path)

    search_paths = [
        Path('./mm1trace.yml'),
        Path('./mm1trace.yaml'),
        Path.home() / '.mm1trace' / 'config.yml',
    ]

    for p in search_paths:
        if p.exists():
            return TraceConfig.load(p)

    return TraceConfig()


def generate_default_config() -> str:
    """Generate default config as YAML."""
    return """# mm1-trace configuration
version: 1

format:
  max_channels: 8
  tick_seconds: 3.2e-7
  strict_pixel_mode: false

plot:
  cols: 70
  rows: 30

logging:
  level: WARNING
"""
