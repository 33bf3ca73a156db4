"""Configuration loading, schema, and defaults."""

from stratadiff.config.loader import ConfigError, load_config
from stratadiff.config.schema import OUTPUT_FORMATS, DiffConfig, OutputConfig, StrataDiffConfig

__all__ = [
    "ConfigError",
    "DiffConfig",
    "OUTPUT_FORMATS",
    "OutputConfig",
    "StrataDiffConfig",
    "load_config",
]
