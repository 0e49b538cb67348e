"""Configuration loading, schema, and defaults."""

from verdiff.config.loader import load_config
from verdiff.config.schema import VerdiffConfig, risk_at_or_above
from verdiff.errors import ConfigError

__all__ = [
    "ConfigError",
    "VerdiffConfig",
    "load_config",
    "risk_at_or_above",
]
