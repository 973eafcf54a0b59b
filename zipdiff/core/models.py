"""
Core data models for archive comparison.

This module defines the data structures shared by the engine:
- Difference statuses and per-entry difference records
- Entry catalogs (name -> content fingerprint)
- Whole-comparison results and progress reports

All models are designed to be:
- UI-agnostic (can be used with any frontend)
- Serializable (``to_dict`` produces JSON-ready structures)
- Immutable where practical
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Any, Iterator, Mapping, Optional


# =============================================================================
# Enumerations
# =============================================================================

class DifferenceStatus(str, Enum):
    """Status of an entry that differs between two archives."""
    ADDED = "Added"                         # Entry exists only in the right archive
    REMOVED = "Removed"                     # Entry exists only in the left archive
    MODIFIED = "Modified"                   # Text entry changed, line diff attached
    MODIFIED_IMAGE = "Modified (Image)"     # Image entry changed, not diffed
    MODIFIED_BINARY = "Modified (Binary)"   # Binary entry changed, not diffed
    UNKNOWN = "Unknown"                     # Presence combination not understood

    def __str__(self) -> str:
        return self.value

    @property
    def is_modification(self) -> bool:
        return self in (
            DifferenceStatus.MODIFIED,
            DifferenceStatus.MODIFIED_IMAGE,
            DifferenceStatus.MODIFIED_BINARY,
        )


# =============================================================================
# Entry Models
# =============================================================================

@dataclass(frozen=True)
class FileDifference:
    """
    One entry whose content is not identical in both archives.

    ``content_diff`` is ``None`` when no line diff was computed (added,
    removed, image, binary and unknown entries). For ``MODIFIED`` entries it
    is a tuple of ``"- "``/``"+ "`` prefixed lines, which may be empty.
    """
    filename: str
    status: DifferenceStatus
    content_diff: Optional[tuple[str, ...]] = None

    def to_dict(self) -> dict[str, Any]:
        """Serialize to the public record shape."""
        return {
            'filename': self.filename,
            'status': self.status.value,
            'content_diff': list(self.content_diff) if self.content_diff is not None else None,
        }


@dataclass(frozen=True)
class EntryCatalog:
    """
    Mapping of entry name to content fingerprint for one archive.

    Built once per archive per comparison and read concurrently by all
    comparison workers afterwards, so the mapping is exposed read-only.
    """
    archive_path: str
    entries: Mapping[str, str] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, 'entries', MappingProxyType(dict(self.entries)))

    def names(self) -> frozenset[str]:
        """All entry names in this catalog."""
        return frozenset(self.entries)

    def digest(self, name: str) -> Optional[str]:
        """Fingerprint of an entry, or None if absent."""
        return self.entries.get(name)

    def __contains__(self, name: object) -> bool:
        return name in self.entries

    def __len__(self) -> int:
        return len(self.entries)

    def __iter__(self) -> Iterator[str]:
        return iter(self.entries)


# =============================================================================
# Comparison Models
# =============================================================================

@dataclass
class CompareProgress:
    """Progress of comparison operation."""
    phase: str  # 'hashing', 'cataloging', 'comparing'
    current_path: str
    items_processed: int
    total_items: int
    percent: float


@dataclass
class ArchiveCompareResult:
    """
    Complete result of comparing two archives.

    ``differences`` holds one record per entry that is not unchanged, in no
    particular order. ``errors`` holds the diagnostics of entries that could
    not be compared; those entries do not appear in ``differences``.
    """
    left_path: str
    right_path: str
    differences: list[FileDifference] = field(default_factory=list)
    errors: list[str] = field(default_factory=list)
    identical_containers: bool = False
    entry_count: int = 0
    compare_time: float = 0.0

    @property
    def is_identical(self) -> bool:
        """True when no entry differs and nothing failed."""
        return not self.differences and not self.errors

    @property
    def has_errors(self) -> bool:
        return bool(self.errors)

    def count(self, status: DifferenceStatus) -> int:
        """Number of differences with the given status."""
        return sum(1 for diff in self.differences if diff.status == status)

    @property
    def added_count(self) -> int:
        return self.count(DifferenceStatus.ADDED)

    @property
    def removed_count(self) -> int:
        return self.count(DifferenceStatus.REMOVED)

    @property
    def modified_count(self) -> int:
        return sum(1 for diff in self.differences if diff.status.is_modification)

    def sorted_differences(self) -> list[FileDifference]:
        """Differences ordered by filename, for presentation."""
        return sorted(self.differences, key=lambda d: d.filename)

    def summary(self) -> dict[str, Any]:
        """Counters describing the comparison."""
        return {
            'left_path': self.left_path,
            'right_path': self.right_path,
            'identical_containers': self.identical_containers,
            'entries': self.entry_count,
            'added': self.added_count,
            'removed': self.removed_count,
            'modified': self.modified_count,
            'errors': len(self.errors),
            'compare_time': round(self.compare_time, 4),
        }

    def to_dict(self) -> dict[str, Any]:
        return {
            'summary': self.summary(),
            'differences': [d.to_dict() for d in self.sorted_differences()],
            'errors': list(self.errors),
        }
