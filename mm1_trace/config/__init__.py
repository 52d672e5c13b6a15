"""Configuration management for mm1-trace."""

from .schema import (
    TraceConfig,
    FormatConfig,
    PlotConfig,
    LoggingConfig,
    load_config,
    generate_default_config,
)

__all__ = [
    'TraceConfig',
    'FormatConfig',
    'PlotConfig',
    'LoggingConfig',
    'load_config',
    'generate_default_config',
]
