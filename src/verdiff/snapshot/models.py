"""Snapshot value objects: the read-only input to every comparison."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional, Tuple

from verdiff.errors import SnapshotError


@dataclass(frozen=True)
class FileEntry:
    path: str
    size: int = 0
    line_count: int = 0
    last_modified: str = ""

    @property
    def fingerprint(self) -> Tuple[int, int, str]:
        """The metadata triple that decides whether a file was modified."""
        return (self.size, self.line_count, self.last_modified)


@dataclass(frozen=True)
class ExportedSymbol:
    """A public symbol as reported by the snapshot producer."""

    name: str
    file: str
    signature: Optional[str] = None
    is_default: bool = False
    is_exported: bool = True
    kind: str = ""  # function | class | const | type ...
    metadata: Mapping[str, Any] = field(default_factory=dict, compare=False, hash=False)


@dataclass(frozen=True)
class Relation:
    source: str
    target: str
    kind: str = "import"


@dataclass(frozen=True)
class ComplexityMetrics:
    cyclomatic: float = 0.0
    cognitive: float = 0.0
    maintainability: float = 0.0


@dataclass(frozen=True)
class QualityMetrics:
    score: float = 0.0
    issues: Tuple[Any, ...] = ()


@dataclass(frozen=True)
class ProjectSnapshot:
    """Immutable record of a project's files, exports, relations and metrics."""

    name: str
    version_label: str
    files: Tuple[FileEntry, ...] = ()
    exported_symbols: Tuple[ExportedSymbol, ...] = ()
    relations: Tuple[Relation, ...] = ()
    complexity: ComplexityMetrics = field(default_factory=ComplexityMetrics)
    quality: QualityMetrics = field(default_factory=QualityMetrics)

    def paths(self) -> Tuple[str, ...]:
        return tuple(f.path for f in self.files)

    def file_map(self) -> Dict[str, FileEntry]:
        return {f.path: f for f in self.files}

    def symbol_map(self) -> Dict[str, ExportedSymbol]:
        return {s.name: s for s in self.exported_symbols}

    def validate(self) -> "ProjectSnapshot":
        """Check path/name uniqueness. Returns self so calls can be chained."""
        _ensure_unique((f.path for f in self.files), "file path", self.version_label)
        _ensure_unique(
            (s.name for s in self.exported_symbols), "exported symbol", self.version_label
        )
        return self


def _ensure_unique(values, what: str, label: str) -> None:
    seen: set[str] = set()
    for value in values:
        if value in seen:
            raise SnapshotError(
                f"Duplicate {what} in snapshot", {"snapshot": label, "value": value}
            )
        seen.add(value)
