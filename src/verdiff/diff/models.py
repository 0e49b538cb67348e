"""Structured diff data models."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Tuple

from verdiff.changes.models import ChangeType


class LineKind(str, Enum):
    ADDED = "added"
    REMOVED = "removed"
    UNCHANGED = "unchanged"


@dataclass(frozen=True)
class LineChange:
    kind: LineKind
    text: str
    line_number: int  # 1-based; old side for removed/unchanged, new side for added


@dataclass(frozen=True)
class Hunk:
    old_start: int
    old_lines: int
    new_start: int
    new_lines: int
    changes: Tuple[LineChange, ...] = ()

    @property
    def header(self) -> str:
        return f"@@ -{self.old_start},{self.old_lines} +{self.new_start},{self.new_lines} @@"


@dataclass(frozen=True)
class FileDiff:
    path: str
    change_type: ChangeType
    old_text: Optional[str] = None
    new_text: Optional[str] = None
    lines_added: int = 0
    lines_removed: int = 0
    hunks: Tuple[Hunk, ...] = ()


@dataclass(frozen=True)
class DiffSummary:
    total_files: int = 0
    added: int = 0
    modified: int = 0
    deleted: int = 0
    lines_added: int = 0
    lines_removed: int = 0


@dataclass(frozen=True)
class DiffMetadata:
    generated_at: str
    version_a: str
    version_b: str


@dataclass(frozen=True)
class DiffReport:
    summary: DiffSummary
    metadata: DiffMetadata
    files: Tuple[FileDiff, ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class DiffOptions:
    """Per-call overrides; ``None`` keeps the generator's configured value."""

    context_lines: Optional[int] = None
    algorithm: Optional[str] = None
