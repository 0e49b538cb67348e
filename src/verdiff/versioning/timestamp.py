"""Timestamp versioning: a moment in time rendered at a fixed precision.

Three encodings are supported:

* ``iso``: ``2024-01-15T10:30:45Z`` (UTC, machine-sortable)
* ``unix``: signed integer count of precision units since the epoch
* ``readable``: ``2024-01-15 10:30:45`` in the configured timezone

An optional prefix is prepended verbatim and an optional suffix is joined
with ``-``. Comparison strips both, re-parses and compares the instants.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone, tzinfo
from typing import Dict, Optional

from verdiff.errors import ConfigError, InvalidMetadataError, InvalidVersionFormatError
from verdiff.versioning.base import VersioningStrategy, describe, incompatible
from verdiff.versioning.models import (
    ComparisonOutcome,
    TimestampInfo,
    VersionComparison,
    VersionMetadata,
)

logger = logging.getLogger(__name__)

FORMATS = ("iso", "unix", "readable")
PRECISIONS = ("day", "hour", "minute", "second", "millisecond", "microsecond")

_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)

_UNIT_MICROS: Dict[str, int] = {
    "day": 86_400_000_000,
    "hour": 3_600_000_000,
    "minute": 60_000_000,
    "second": 1_000_000,
    "millisecond": 1_000,
    "microsecond": 1,
}

_ISO_RE = re.compile(
    r"^(\d{4})-(\d{2})-(\d{2})(?:T(\d{2})(?::(\d{2})(?::(\d{2})(?:\.(\d{1,6}))?)?)?Z)?$",
    re.ASCII,
)
_READABLE_RE = re.compile(
    r"^(\d{4})-(\d{2})-(\d{2})(?: (\d{2})(?::(\d{2})(?::(\d{2})(?:\.(\d{1,6}))?)?)?)?$",
    re.ASCII,
)
_UNIX_RE = re.compile(r"^-?\d+$", re.ASCII)


def resolve_timezone(name: str) -> tzinfo:
    if name.upper() in ("UTC", "Z"):
        return timezone.utc
    try:
        from zoneinfo import ZoneInfo, ZoneInfoNotFoundError
    except ImportError as exc:  # pragma: no cover - Python < 3.9
        raise ConfigError(f"Timezone support unavailable for {name!r}") from exc
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError) as exc:
        raise ConfigError(f"Unknown timezone: {name}") from exc


@dataclass(frozen=True)
class TimestampConfig:
    format: str = "iso"
    precision: str = "second"
    timezone: str = "UTC"
    prefix: str = ""
    suffix: str = ""

    def __post_init__(self) -> None:
        if self.format not in FORMATS:
            raise ConfigError(f"Invalid timestamp format: {self.format}", {"allowed": ", ".join(FORMATS)})
        if self.precision not in PRECISIONS:
            raise ConfigError(
                f"Invalid timestamp precision: {self.precision}", {"allowed": ", ".join(PRECISIONS)}
            )


def truncate(moment: datetime, precision: str) -> datetime:
    """Zero every field finer than *precision*."""
    if precision == "day":
        return moment.replace(hour=0, minute=0, second=0, microsecond=0)
    if precision == "hour":
        return moment.replace(minute=0, second=0, microsecond=0)
    if precision == "minute":
        return moment.replace(second=0, microsecond=0)
    if precision == "second":
        return moment.replace(microsecond=0)
    if precision == "millisecond":
        return moment.replace(microsecond=moment.microsecond // 1000 * 1000)
    return moment


def _clock_text(moment: datetime, precision: str, separator: str) -> str:
    text = moment.strftime("%Y-%m-%d")
    if precision == "day":
        return text
    text += f"{separator}{moment:%H}"
    if precision != "hour":
        text += f":{moment:%M}"
    if precision not in ("hour", "minute"):
        text += f":{moment:%S}"
    if precision == "millisecond":
        text += f".{moment.microsecond // 1000:03d}"
    elif precision == "microsecond":
        text += f".{moment.microsecond:06d}"
    return text


def _from_match(match: "re.Match[str]", tz: tzinfo) -> datetime:
    year, month, day, hour, minute, second, fraction = match.groups()
    micros = int(fraction.ljust(6, "0")) if fraction else 0
    return datetime(
        int(year),
        int(month),
        int(day),
        int(hour or 0),
        int(minute or 0),
        int(second or 0),
        micros,
        tzinfo=tz,
    )


def parse_instant(value: str) -> datetime:
    """Parse an ISO-8601 string (``Z`` accepted) into an aware UTC datetime."""
    text = value.strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    moment = datetime.fromisoformat(text)
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    return moment.astimezone(timezone.utc)


class TimestampVersioning(VersioningStrategy):
    """Chronologically ordered versions derived from a point in time."""

    name = "timestamp"

    def __init__(self, config: Optional[TimestampConfig] = None) -> None:
        self.config = config or TimestampConfig()
        self._tz = resolve_timezone(self.config.timezone)

    # ---- encoding ----

    def format_timestamp(self, moment: datetime) -> str:
        """Encode *moment* (aware) with the configured format and precision."""
        utc = moment.astimezone(timezone.utc)
        fmt, precision = self.config.format, self.config.precision
        if fmt == "unix":
            delta = utc - _EPOCH
            micros = (delta.days * 86_400 + delta.seconds) * 1_000_000 + delta.microseconds
            return str(micros // _UNIT_MICROS[precision])
        if fmt == "readable":
            return _clock_text(truncate(utc.astimezone(self._tz), precision), precision, " ")
        text = _clock_text(truncate(utc, precision), precision, "T")
        return text if precision == "day" else text + "Z"

    def parse_timestamp(self, text: str) -> Optional[datetime]:
        """Decode a bare timestamp (no prefix/suffix); ``None`` when malformed."""
        fmt = self.config.format
        try:
            if fmt == "unix":
                if not _UNIX_RE.match(text):
                    return None
                units = int(text) * _UNIT_MICROS[self.config.precision]
                return _EPOCH + timedelta(microseconds=units)
            if fmt == "readable":
                match = _READABLE_RE.match(text)
                return _from_match(match, self._tz).astimezone(timezone.utc) if match else None
            match = _ISO_RE.match(text)
            return _from_match(match, timezone.utc) if match else None
        except (ValueError, OverflowError):
            return None

    def _strip_affixes(self, version: str) -> Optional[str]:
        text = version
        if self.config.prefix:
            if not text.startswith(self.config.prefix):
                return None
            text = text[len(self.config.prefix):]
        if self.config.suffix:
            tail = f"-{self.config.suffix}"
            if not text.endswith(tail):
                return None
            text = text[: -len(tail)]
        return text

    def _instant(self, version: str) -> Optional[datetime]:
        if not isinstance(version, str) or not version:
            return None
        bare = self._strip_affixes(version)
        return self.parse_timestamp(bare) if bare is not None else None

    # ---- contract ----

    def is_valid_version(self, version: str) -> bool:
        return self._instant(version) is not None

    def generate_version(self, metadata: VersionMetadata) -> str:
        self._require_metadata(metadata)
        info = metadata.strategy_specific
        source = info.iso if isinstance(info, TimestampInfo) else metadata.created_at

        if source:
            try:
                moment = parse_instant(source)
            except ValueError as exc:
                raise InvalidMetadataError(
                    f"Unparsable timestamp in metadata: {source}", {"strategy": self.name}
                ) from exc
        else:
            moment = datetime.now(timezone.utc)

        version = self.format_timestamp(moment)
        if self.config.prefix:
            version = f"{self.config.prefix}{version}"
        if self.config.suffix:
            version = f"{version}-{self.config.suffix}"
        return self._checked(version)

    def parse_version(self, version: str) -> VersionMetadata:
        moment = self._instant(version)
        if moment is None:
            raise InvalidVersionFormatError(
                f"Invalid timestamp version: {version}",
                {"strategy": self.name, "format": self.config.format},
            )
        readable = _clock_text(
            truncate(moment.astimezone(self._tz), self.config.precision), self.config.precision, " "
        )
        return VersionMetadata(
            version_string=version,
            created_at=moment.isoformat(),
            strategy_specific=TimestampInfo(
                iso=moment.isoformat(),
                unix_seconds=int(moment.timestamp()),
                readable=readable,
                timezone=self.config.timezone,
            ),
        )

    def compare_versions(self, a: str, b: str) -> VersionComparison:
        left, right = self._instant(a), self._instant(b)
        if left is None or right is None:
            logger.debug("Timestamp comparison degraded to incompatible: %r vs %r", a, b)
            return incompatible(a, b, f"Cannot compare versions: {a} and {b}")

        if left > right:
            result = ComparisonOutcome.GREATER
        elif left < right:
            result = ComparisonOutcome.LESS
        else:
            result = ComparisonOutcome.EQUAL

        return VersionComparison(
            result=result,
            difference=(left - right).total_seconds(),
            compatible=True,
            new_features=result is ComparisonOutcome.GREATER,
            explanation=describe(a, b, result),
        )
