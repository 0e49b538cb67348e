"""Snapshot value objects and loaders."""

from verdiff.snapshot.loader import load_snapshot, snapshot_from_dict
from verdiff.snapshot.models import (
    ComplexityMetrics,
    ExportedSymbol,
    FileEntry,
    ProjectSnapshot,
    QualityMetrics,
    Relation,
)

__all__ = [
    "ComplexityMetrics",
    "ExportedSymbol",
    "FileEntry",
    "ProjectSnapshot",
    "QualityMetrics",
    "Relation",
    "load_snapshot",
    "snapshot_from_dict",
]
