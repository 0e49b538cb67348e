"""Exception hierarchy: every public entry point raises one of these.

Each error carries a stable ``code`` so callers (and the CLI) can branch on
the failure kind without matching message text.
"""

from __future__ import annotations

from typing import Dict, Optional


class VerdiffError(Exception):
    """Base exception for all verdiff errors."""

    code = "VERDIFF_ERROR"

    def __init__(self, message: str, details: Optional[Dict[str, str]] = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        if self.details:
            details_str = ", ".join(f"{k}={v}" for k, v in self.details.items())
            return f"{self.message} ({details_str})"
        return self.message


# ── versioning ────────────────────────────────────────────────────────────────


class InvalidMetadataError(VerdiffError):
    """Metadata passed to a strategy is structurally unusable."""

    code = "INVALID_METADATA"


class MissingStrategyInfoError(VerdiffError):
    """Metadata lacks the strategy-specific block the strategy needs."""

    code = "MISSING_STRATEGY_INFO"


class InvalidComponentsError(VerdiffError):
    """Version components are negative or non-numeric."""

    code = "INVALID_COMPONENTS"


class InvalidGeneratedVersionError(VerdiffError):
    """A strategy produced a string its own validator rejects."""

    code = "INVALID_GENERATED_VERSION"


class InvalidVersionFormatError(VerdiffError):
    """A version string does not match the strategy's grammar."""

    code = "INVALID_VERSION_FORMAT"


class InvalidBumpTypeError(VerdiffError):
    code = "INVALID_BUMP_TYPE"


# ── comparison / reporting ────────────────────────────────────────────────────


class InvalidVersionsError(VerdiffError):
    """One or both snapshots of a comparison are missing."""

    code = "INVALID_VERSIONS"


class InvalidFormatError(VerdiffError):
    """Unsupported report encoding or diff layout."""

    code = "INVALID_FORMAT"


# ── caller-side adapters ──────────────────────────────────────────────────────


class SnapshotError(VerdiffError):
    """Snapshot file is unreadable or violates snapshot invariants."""

    code = "INVALID_SNAPSHOT"


class ConfigError(VerdiffError):
    """Raised when config is malformed or unreadable."""

    code = "INVALID_CONFIG"
