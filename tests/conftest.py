"""Shared test fixtures: sample snapshots and snapshot files."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict

import pytest

from verdiff.snapshot.loader import snapshot_from_dict
from verdiff.snapshot.models import (
    ComplexityMetrics,
    ExportedSymbol,
    FileEntry,
    ProjectSnapshot,
    QualityMetrics,
    Relation,
)


@pytest.fixture
def snapshot_a() -> ProjectSnapshot:
    """Old side of the reference scenario: a.x, b.x and one export."""
    return ProjectSnapshot(
        name="demo",
        version_label="1.0.0",
        files=(
            FileEntry("a.x", size=100, line_count=10, last_modified="2024-01-01T00:00:00Z"),
            FileEntry("b.x", size=50, line_count=5, last_modified="2024-01-01T00:00:00Z"),
        ),
        exported_symbols=(ExportedSymbol("foo", "a.x", signature="foo(x)"),),
    )


@pytest.fixture
def snapshot_b() -> ProjectSnapshot:
    """New side of the reference scenario: a.x grew, b.x gone, c.x added, no exports."""
    return ProjectSnapshot(
        name="demo",
        version_label="1.1.0",
        files=(
            FileEntry("a.x", size=120, line_count=12, last_modified="2024-02-01T00:00:00Z"),
            FileEntry("c.x", size=30, line_count=3, last_modified="2024-02-01T00:00:00Z"),
        ),
    )


@pytest.fixture
def snapshot_old() -> ProjectSnapshot:
    """A richer project with relations and metrics."""
    return ProjectSnapshot(
        name="shop",
        version_label="2.0.0",
        files=(
            FileEntry("src/api.py", 400, 40, "t1"),
            FileEntry("src/models.py", 300, 30, "t1"),
            FileEntry("src/utils.py", 100, 10, "t1"),
            FileEntry("src/views.py", 200, 20, "t1"),
        ),
        exported_symbols=(
            ExportedSymbol("Cart", "src/models.py", kind="class"),
            ExportedSymbol("checkout", "src/api.py", signature="checkout(cart)", kind="function"),
            ExportedSymbol("slugify", "src/utils.py", signature="slugify(s)", kind="function"),
            ExportedSymbol("render", "src/views.py", kind="function", metadata={"signature": "render(req)"}),
        ),
        relations=(
            Relation("src/api.py", "src/models.py"),
            Relation("src/views.py", "src/api.py"),
            Relation("src/views.py", "src/utils.py"),
            Relation("src/api.py", "src/utils.py", kind="call"),
        ),
        complexity=ComplexityMetrics(cyclomatic=12, cognitive=20, maintainability=70),
        quality=QualityMetrics(score=80, issues=("e1", "e2", "e3")),
    )


@pytest.fixture
def snapshot_new() -> ProjectSnapshot:
    return ProjectSnapshot(
        name="shop",
        version_label="2.1.0",
        files=(
            FileEntry("src/api.py", 450, 45, "t2"),
            FileEntry("src/models.py", 300, 30, "t1"),
            FileEntry("src/utils.py", 100, 10, "t1"),
            FileEntry("src/views.py", 200, 20, "t1"),
            FileEntry("src/search.py", 150, 15, "t2"),
        ),
        exported_symbols=(
            ExportedSymbol("Cart", "src/models.py", kind="class"),
            ExportedSymbol("checkout", "src/api.py", signature="checkout(cart, coupon)", kind="function"),
            ExportedSymbol("slugify", "src/utils.py", signature="slugify(s)", kind="function"),
            ExportedSymbol("render", "src/views.py", kind="function", metadata={"signature": "render(req)"}),
            ExportedSymbol("search", "src/search.py", signature="search(q)", kind="function"),
        ),
        relations=(
            Relation("src/api.py", "src/models.py"),
            Relation("src/views.py", "src/api.py"),
            Relation("src/views.py", "src/utils.py"),
            Relation("src/search.py", "src/models.py"),
        ),
        complexity=ComplexityMetrics(cyclomatic=15, cognitive=18, maintainability=72.5),
        quality=QualityMetrics(score=85, issues=("e1",)),
    )


def snapshot_document(**overrides: Any) -> Dict[str, Any]:
    """Wire-format snapshot document (camelCase keys)."""
    doc: Dict[str, Any] = {
        "name": "demo",
        "versionLabel": "1.0.0",
        "files": [
            {"path": "a.x", "size": 100, "lineCount": 10, "lastModified": "2024-01-01"},
            {"path": "b.x", "size": 50, "lineCount": 5, "lastModified": "2024-01-01"},
        ],
        "exportedSymbols": [
            {"name": "foo", "file": "a.x", "signature": "foo(x)", "isDefault": False, "isExported": True}
        ],
        "relations": [{"from": "b.x", "to": "a.x", "kind": "import"}],
        "complexity": {"cyclomatic": 3, "cognitive": 4, "maintainability": 90},
        "quality": {"score": 75, "issues": []},
    }
    doc.update(overrides)
    return doc


@pytest.fixture
def snapshot_files(tmp_path: Path) -> Dict[str, Path]:
    """JSON snapshots: the reference pair plus a low-risk patch of the old side."""
    old = snapshot_document()
    new = snapshot_document(
        versionLabel="1.1.0",
        files=[
            {"path": "a.x", "size": 120, "lineCount": 12, "lastModified": "2024-02-01"},
            {"path": "c.x", "size": 30, "lineCount": 3, "lastModified": "2024-02-01"},
        ],
        exportedSymbols=[],
        relations=[],
    )
    calm = snapshot_document(
        versionLabel="1.0.1",
        files=[
            {"path": "a.x", "size": 101, "lineCount": 10, "lastModified": "2024-01-02"},
            {"path": "b.x", "size": 50, "lineCount": 5, "lastModified": "2024-01-01"},
        ],
        relations=[],
    )
    paths = {}
    for key, doc in (("old", old), ("new", new), ("calm", calm)):
        p = tmp_path / f"{key}.json"
        p.write_text(json.dumps(doc), encoding="utf-8")
        paths[key] = p
    return paths


@pytest.fixture
def loaded_document_snapshot() -> ProjectSnapshot:
    return snapshot_from_dict(snapshot_document())


@pytest.fixture
def make_document():
    """Factory for wire-format snapshot documents."""
    return snapshot_document
