"""Structured line diffs and their text layouts."""

from verdiff.diff.formatters import format_context, format_side_by_side, format_unified, render
from verdiff.diff.generator import ContentLookup, DiffGenerator, DirectoryContentLookup
from verdiff.diff.models import (
    DiffMetadata,
    DiffOptions,
    DiffReport,
    DiffSummary,
    FileDiff,
    Hunk,
    LineChange,
    LineKind,
)

__all__ = [
    "ContentLookup",
    "DiffGenerator",
    "DiffMetadata",
    "DiffOptions",
    "DiffReport",
    "DiffSummary",
    "DirectoryContentLookup",
    "FileDiff",
    "Hunk",
    "LineChange",
    "LineKind",
    "format_context",
    "format_side_by_side",
    "format_unified",
    "render",
]
