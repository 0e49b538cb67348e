"""Abstract versioning strategy: the five-operation contract."""

from __future__ import annotations

import abc
import logging
from datetime import datetime, timezone

from verdiff.errors import InvalidGeneratedVersionError, InvalidMetadataError
from verdiff.versioning.models import ComparisonOutcome, VersionComparison, VersionMetadata

logger = logging.getLogger(__name__)


def utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def describe(a: str, b: str, result: ComparisonOutcome) -> str:
    """Human-readable sentence for a comparison outcome."""
    if result is ComparisonOutcome.GREATER:
        return f"Version {a} is greater than {b}"
    if result is ComparisonOutcome.LESS:
        return f"Version {a} is less than {b}"
    if result is ComparisonOutcome.EQUAL:
        return f"Version {a} is equal to {b}"
    return f"Version {a} is incompatible with {b}"


def incompatible(a: str, b: str, reason: str = "", *, breaking: bool = False) -> VersionComparison:
    """Comparison value used when two versions cannot be ordered."""
    return VersionComparison(
        result=ComparisonOutcome.INCOMPATIBLE,
        difference=0,
        compatible=False,
        breaking_changes=breaking,
        explanation=reason or describe(a, b, ComparisonOutcome.INCOMPATIBLE),
    )


class VersioningStrategy(abc.ABC):
    """Base class for the closed family of versioning strategies.

    Strategies are selected by name through :func:`verdiff.versioning.build_strategy`;
    they hold only immutable configuration, so one instance may be shared
    between threads.
    """

    name: str = ""

    @abc.abstractmethod
    def generate_version(self, metadata: VersionMetadata) -> str:
        """Render *metadata* as a version string for this strategy."""

    @abc.abstractmethod
    def parse_version(self, version: str) -> VersionMetadata:
        """Parse *version*; raises InvalidVersionFormatError when malformed."""

    @abc.abstractmethod
    def compare_versions(self, a: str, b: str) -> VersionComparison:
        """Order *a* relative to *b*."""

    @abc.abstractmethod
    def is_valid_version(self, version: str) -> bool:
        ...

    def get_strategy_name(self) -> str:
        return self.name

    # ---- shared helpers ----

    def _require_metadata(self, metadata: VersionMetadata) -> None:
        if not isinstance(metadata, VersionMetadata):
            raise InvalidMetadataError(
                "Metadata must be a VersionMetadata value",
                {"strategy": self.name, "got": type(metadata).__name__},
            )
        if not isinstance(metadata.tags, tuple) or not all(
            isinstance(t, str) for t in metadata.tags
        ):
            raise InvalidMetadataError("Metadata tags must be a tuple of strings", {"strategy": self.name})

    def _checked(self, version: str) -> str:
        """Reject output that fails this strategy's own validator."""
        if not self.is_valid_version(version):
            logger.debug("%s strategy generated invalid version %r", self.name, version)
            raise InvalidGeneratedVersionError(
                "Generated version is not valid", {"strategy": self.name, "version": version}
            )
        return version
