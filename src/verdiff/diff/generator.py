"""Structured multi-file diff between two snapshots.

Files are partitioned purely on path: added, modified (differing
size/line count/mtime), deleted. Added and deleted files take their line
counts from snapshot metadata. Modified files are hunked from text fetched
through a :data:`ContentLookup`; without one they carry no hunks and their
line deltas come from the metadata line counts.

Two hunking algorithms are available:

``simple``
    Lockstep scan. Walk both line lists together; at each mismatching pair
    emit one hunk of leading context, one removed line and one added line,
    then continue after the pair. Leftover lines on the longer side become a
    single removal or addition hunk. Cheap and predictable, but insertions
    and deletions in the middle of a file are reported as a run of
    replacements.

``sequence``
    Longest-matching-block diff via :class:`difflib.SequenceMatcher`, grouped
    into hunks the same way ``diff -u`` does.
"""

from __future__ import annotations

import difflib
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Callable, Dict, List, Mapping, Optional, Sequence, Tuple, Union

from verdiff.changes.detector import has_file_changed
from verdiff.changes.models import ChangeType
from verdiff.config.schema import DIFF_ALGORITHMS, DiffConfig
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
from verdiff.errors import InvalidFormatError, InvalidVersionsError
from verdiff.snapshot.models import FileEntry, ProjectSnapshot

logger = logging.getLogger(__name__)

# (path, snapshot version label) -> file text, or None when unavailable
ContentLookup = Callable[[str, str], Optional[str]]


class DirectoryContentLookup:
    """Content lookup backed by one checkout directory per version label."""

    def __init__(self, roots: Mapping[str, Union[str, Path]], encoding: str = "utf-8") -> None:
        self.roots: Dict[str, Path] = {label: Path(root) for label, root in roots.items()}
        self.encoding = encoding

    def __call__(self, path: str, snapshot_id: str) -> Optional[str]:
        root = self.roots.get(snapshot_id)
        if root is None:
            return None
        target = root / path
        try:
            return target.read_text(encoding=self.encoding, errors="replace")
        except OSError as exc:
            logger.debug("No content for %s in %s: %s", path, snapshot_id, exc)
            return None


def _range_start(first: int, count: int) -> int:
    """1-based start line; a zero-length range points at the line before."""
    return first + 1 if count else first


def simple_hunks(old: Sequence[str], new: Sequence[str], context: int) -> List[Hunk]:
    hunks: List[Hunk] = []
    i = j = 0
    floor = 0  # context never reaches back into the previous hunk

    while i < len(old) and j < len(new):
        if old[i] == new[j]:
            i += 1
            j += 1
            continue
        lead = i - max(floor, i - context)
        changes = [
            LineChange(LineKind.UNCHANGED, old[k], k + 1) for k in range(i - lead, i)
        ]
        changes.append(LineChange(LineKind.REMOVED, old[i], i + 1))
        changes.append(LineChange(LineKind.ADDED, new[j], j + 1))
        hunks.append(
            Hunk(
                old_start=i - lead + 1,
                old_lines=lead + 1,
                new_start=j - lead + 1,
                new_lines=lead + 1,
                changes=tuple(changes),
            )
        )
        i += 1
        j += 1
        floor = i

    if i < len(old) or j < len(new):
        lead = i - max(floor, i - context)
        changes = [
            LineChange(LineKind.UNCHANGED, old[k], k + 1) for k in range(i - lead, i)
        ]
        changes += [LineChange(LineKind.REMOVED, old[k], k + 1) for k in range(i, len(old))]
        changes += [LineChange(LineKind.ADDED, new[k], k + 1) for k in range(j, len(new))]
        old_count = lead + len(old) - i
        new_count = lead + len(new) - j
        hunks.append(
            Hunk(
                old_start=_range_start(i - lead, old_count),
                old_lines=old_count,
                new_start=_range_start(j - lead, new_count),
                new_lines=new_count,
                changes=tuple(changes),
            )
        )
    return hunks


def sequence_hunks(old: Sequence[str], new: Sequence[str], context: int) -> List[Hunk]:
    matcher = difflib.SequenceMatcher(None, old, new, autojunk=False)
    hunks: List[Hunk] = []
    for group in matcher.get_grouped_opcodes(context):
        changes: List[LineChange] = []
        for tag, i1, i2, j1, j2 in group:
            if tag == "equal":
                changes += [LineChange(LineKind.UNCHANGED, old[k], k + 1) for k in range(i1, i2)]
                continue
            if tag in ("replace", "delete"):
                changes += [LineChange(LineKind.REMOVED, old[k], k + 1) for k in range(i1, i2)]
            if tag in ("replace", "insert"):
                changes += [LineChange(LineKind.ADDED, new[k], k + 1) for k in range(j1, j2)]
        first, last = group[0], group[-1]
        old_count = last[2] - first[1]
        new_count = last[4] - first[3]
        hunks.append(
            Hunk(
                old_start=_range_start(first[1], old_count),
                old_lines=old_count,
                new_start=_range_start(first[3], new_count),
                new_lines=new_count,
                changes=tuple(changes),
            )
        )
    return hunks


HUNKERS = {
    "simple": simple_hunks,
    "sequence": sequence_hunks,
}


def _count(hunks: Sequence[Hunk], kind: LineKind) -> int:
    return sum(1 for h in hunks for c in h.changes if c.kind is kind)


class DiffGenerator:
    """Build :class:`DiffReport` values from snapshot pairs.

    *content_lookup* serves both sides, keyed by version label. Pass
    *new_content_lookup* when the two sides must be read from different
    places regardless of their labels; *content_lookup* then serves only
    the old side.
    """

    def __init__(
        self,
        config: Optional[DiffConfig] = None,
        content_lookup: Optional[ContentLookup] = None,
        *,
        new_content_lookup: Optional[ContentLookup] = None,
    ) -> None:
        self.config = config or DiffConfig()
        self.content_lookup = content_lookup
        self.new_content_lookup = new_content_lookup

    def _lookup(self, path: str, snapshot: ProjectSnapshot, new_side: bool = False) -> Optional[str]:
        lookup = self.content_lookup
        if new_side and self.new_content_lookup is not None:
            lookup = self.new_content_lookup
        if lookup is None:
            return None
        return lookup(path, snapshot.version_label)

    def _settings(self, options: Optional[DiffOptions]) -> Tuple[int, str]:
        options = options or DiffOptions()
        context = self.config.context_lines if options.context_lines is None else options.context_lines
        algorithm = options.algorithm or self.config.algorithm
        if algorithm not in DIFF_ALGORITHMS:
            raise InvalidFormatError(
                f"Unknown diff algorithm: {algorithm}", {"allowed": ", ".join(DIFF_ALGORITHMS)}
            )
        return max(0, int(context)), algorithm

    def _modified(
        self,
        path: str,
        before: FileEntry,
        after: FileEntry,
        a: ProjectSnapshot,
        b: ProjectSnapshot,
        context: int,
        algorithm: str,
    ) -> FileDiff:
        old_text = self._lookup(path, a)
        new_text = self._lookup(path, b, new_side=True)
        if old_text is None or new_text is None:
            return FileDiff(
                path=path,
                change_type=ChangeType.MODIFIED,
                old_text=old_text,
                new_text=new_text,
                lines_added=max(0, after.line_count - before.line_count),
                lines_removed=max(0, before.line_count - after.line_count),
            )

        hunks = HUNKERS[algorithm](old_text.splitlines(), new_text.splitlines(), context)
        return FileDiff(
            path=path,
            change_type=ChangeType.MODIFIED,
            old_text=old_text,
            new_text=new_text,
            lines_added=_count(hunks, LineKind.ADDED),
            lines_removed=_count(hunks, LineKind.REMOVED),
            hunks=tuple(hunks),
        )

    def generate_diff(
        self,
        a: Optional[ProjectSnapshot],
        b: Optional[ProjectSnapshot],
        options: Optional[DiffOptions] = None,
    ) -> DiffReport:
        """Diff snapshot *a* (old) against *b* (new)."""
        if not isinstance(a, ProjectSnapshot) or not isinstance(b, ProjectSnapshot):
            raise InvalidVersionsError("Both versions must be provided")
        context, algorithm = self._settings(options)

        old_files = a.file_map()
        new_files = b.file_map()

        added = [
            FileDiff(
                path=path,
                change_type=ChangeType.ADDED,
                new_text=self._lookup(path, b, new_side=True),
                lines_added=entry.line_count,
            )
            for path, entry in new_files.items()
            if path not in old_files
        ]
        modified = [
            self._modified(path, entry, new_files[path], a, b, context, algorithm)
            for path, entry in old_files.items()
            if path in new_files and has_file_changed(entry, new_files[path])
        ]
        deleted = [
            FileDiff(
                path=path,
                change_type=ChangeType.DELETED,
                old_text=self._lookup(path, a),
                lines_removed=entry.line_count,
            )
            for path, entry in old_files.items()
            if path not in new_files
        ]

        files = tuple(added + modified + deleted)
        summary = DiffSummary(
            total_files=len(files),
            added=len(added),
            modified=len(modified),
            deleted=len(deleted),
            lines_added=sum(f.lines_added for f in files),
            lines_removed=sum(f.lines_removed for f in files),
        )
        logger.debug(
            "Diff %s..%s: %d file(s), +%d -%d (%s)",
            a.version_label,
            b.version_label,
            summary.total_files,
            summary.lines_added,
            summary.lines_removed,
            algorithm,
        )
        return DiffReport(
            summary=summary,
            metadata=DiffMetadata(
                generated_at=datetime.now(timezone.utc).isoformat(),
                version_a=a.version_label,
                version_b=b.version_label,
            ),
            files=files,
        )
