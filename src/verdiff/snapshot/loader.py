"""Build ProjectSnapshot values from JSON / YAML documents.

Field names follow the snapshot wire encoding (``versionLabel``,
``exportedSymbols``, ``lineCount`` ...); snake_case aliases are accepted too.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, List, Mapping, Union

import yaml

from verdiff.errors import SnapshotError
from verdiff.snapshot.models import (
    ComplexityMetrics,
    ExportedSymbol,
    FileEntry,
    ProjectSnapshot,
    QualityMetrics,
    Relation,
)


def _pick(data: Mapping[str, Any], *keys: str, default: Any = None) -> Any:
    for key in keys:
        if key in data and data[key] is not None:
            return data[key]
    return default


def _as_list(value: Any, what: str) -> List[Any]:
    if value is None:
        return []
    if not isinstance(value, list):
        raise SnapshotError(f"'{what}' must be a list", {"got": type(value).__name__})
    return value


def _file_entry(raw: Mapping[str, Any]) -> FileEntry:
    if "path" not in raw:
        raise SnapshotError("File entry without 'path'")
    return FileEntry(
        path=str(raw["path"]),
        size=int(_pick(raw, "size", default=0)),
        line_count=int(_pick(raw, "lineCount", "line_count", "lines", default=0)),
        last_modified=str(_pick(raw, "lastModified", "last_modified", default="")),
    )


def _symbol(raw: Mapping[str, Any]) -> ExportedSymbol:
    if "name" not in raw:
        raise SnapshotError("Exported symbol without 'name'")
    return ExportedSymbol(
        name=str(raw["name"]),
        file=str(_pick(raw, "file", default="")),
        signature=_pick(raw, "signature"),
        is_default=bool(_pick(raw, "isDefault", "is_default", default=False)),
        is_exported=bool(_pick(raw, "isExported", "is_exported", default=True)),
        kind=str(_pick(raw, "kind", "type", default="")),
        metadata=dict(_pick(raw, "metadata", default={})),
    )


def _relation(raw: Mapping[str, Any]) -> Relation:
    return Relation(
        source=str(_pick(raw, "from", "source", default="")),
        target=str(_pick(raw, "to", "target", default="")),
        kind=str(_pick(raw, "kind", "type", default="import")),
    )


def snapshot_from_dict(data: Mapping[str, Any]) -> ProjectSnapshot:
    """Convert a decoded snapshot document into a validated ProjectSnapshot."""
    if not isinstance(data, Mapping):
        raise SnapshotError("Snapshot document must be a mapping")

    complexity_raw = _pick(data, "complexity", default={}) or {}
    quality_raw = _pick(data, "quality", default={}) or {}

    try:
        snapshot = ProjectSnapshot(
            name=str(_pick(data, "name", default="")),
            version_label=str(_pick(data, "versionLabel", "version_label", "version", default="")),
            files=tuple(_file_entry(f) for f in _as_list(data.get("files"), "files")),
            exported_symbols=tuple(
                _symbol(s)
                for s in _as_list(
                    _pick(data, "exportedSymbols", "exported_symbols"), "exportedSymbols"
                )
            ),
            relations=tuple(
                _relation(r) for r in _as_list(data.get("relations"), "relations")
            ),
            complexity=ComplexityMetrics(
                cyclomatic=float(complexity_raw.get("cyclomatic", 0)),
                cognitive=float(complexity_raw.get("cognitive", 0)),
                maintainability=float(complexity_raw.get("maintainability", 0)),
            ),
            quality=QualityMetrics(
                score=float(quality_raw.get("score", 0)),
                issues=tuple(_as_list(quality_raw.get("issues"), "quality.issues")),
            ),
        )
    except (TypeError, ValueError, AttributeError) as exc:
        raise SnapshotError(f"Malformed snapshot: {exc}") from exc

    return snapshot.validate()


def load_snapshot(path: Union[str, Path]) -> ProjectSnapshot:
    """Read a snapshot from a ``.json`` or ``.yaml`` / ``.yml`` file."""
    p = Path(path)
    if not p.is_file():
        raise SnapshotError(f"Snapshot file not found: {p}")

    try:
        text = p.read_text(encoding="utf-8")
        if p.suffix in (".yaml", ".yml"):
            data: Dict[str, Any] = yaml.safe_load(text)
        else:
            data = json.loads(text)
    except (OSError, json.JSONDecodeError, yaml.YAMLError) as exc:
        raise SnapshotError(f"Failed to parse {p}: {exc}") from exc

    return snapshot_from_dict(data)
