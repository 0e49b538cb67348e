"""Strategy registry: strategies are chosen by name, never by subclassing."""

from __future__ import annotations

from typing import TYPE_CHECKING, Dict, List, Optional, Type

from verdiff.errors import ConfigError
from verdiff.versioning.base import VersioningStrategy
from verdiff.versioning.branch import BranchVersioning
from verdiff.versioning.custom import CustomConfig, CustomVersioning
from verdiff.versioning.semantic import SemanticVersioning
from verdiff.versioning.timestamp import TimestampConfig, TimestampVersioning

if TYPE_CHECKING:
    from verdiff.config.schema import VerdiffConfig

STRATEGIES: Dict[str, Type[VersioningStrategy]] = {
    "semantic": SemanticVersioning,
    "timestamp": TimestampVersioning,
    "custom": CustomVersioning,
    "branch": BranchVersioning,
}


def available_strategies() -> List[str]:
    return sorted(STRATEGIES)


def build_strategy(
    name: str,
    *,
    timestamp: Optional[TimestampConfig] = None,
    custom: Optional[CustomConfig] = None,
) -> VersioningStrategy:
    """Instantiate the strategy registered under *name*."""
    if name not in STRATEGIES:
        raise ConfigError(
            f"Unknown versioning strategy: {name}", {"available": ", ".join(available_strategies())}
        )
    if name == "timestamp":
        return TimestampVersioning(timestamp)
    if name == "custom":
        return CustomVersioning(custom)
    return STRATEGIES[name]()


def strategy_from_config(config: "VerdiffConfig", name: Optional[str] = None) -> VersioningStrategy:
    """Build the configured strategy (or *name*, when given) from a VerdiffConfig."""
    section = config.versioning
    ts = section.timestamp
    return build_strategy(
        name or section.strategy,
        timestamp=TimestampConfig(
            format=ts.format,
            precision=ts.precision,
            timezone=ts.timezone,
            prefix=ts.prefix,
            suffix=ts.suffix,
        ),
        custom=CustomConfig(
            pattern=section.custom.pattern,
            validation=section.custom.validation,
        ),
    )
