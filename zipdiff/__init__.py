"""
ZipDiff: entry-level comparison of ZIP archives.
"""

from zipdiff.core.archive import (
    ArchiveComparer,
    ArchiveCompareOptions,
    compare_archives,
)
from zipdiff.core.errors import ComparisonError
from zipdiff.core.models import (
    ArchiveCompareResult,
    DifferenceStatus,
    FileDifference,
)

__version__ = "1.0.0"

__all__ = [
    'ArchiveComparer',
    'ArchiveCompareOptions',
    'ArchiveCompareResult',
    'ComparisonError',
    'DifferenceStatus',
    'FileDifference',
    'compare_archives',
]
