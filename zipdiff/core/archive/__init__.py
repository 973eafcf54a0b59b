"""
Archive comparison module.

Provides functionality for:
- Reading ZIP catalogs and entry content
- Classifying entries between two catalogs
- Comparing two archives end to end
"""

from zipdiff.core.archive.reader import (
    ArchiveReader,
    EntryFilter,
)
from zipdiff.core.archive.differ import (
    ContentDiffer,
)
from zipdiff.core.archive.classifier import (
    EntryClassifier,
    EntryOutcome,
)
from zipdiff.core.archive.comparer import (
    ArchiveComparer,
    ArchiveCompareOptions,
    compare_archives,
)

__all__ = [
    # Reader
    'ArchiveReader',
    'EntryFilter',
    # Differ
    'ContentDiffer',
    # Classifier
    'EntryClassifier',
    'EntryOutcome',
    # Comparer
    'ArchiveComparer',
    'ArchiveCompareOptions',
    'compare_archives',
]
