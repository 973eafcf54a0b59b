"""
Entry classification.

Decides, for one entry name, whether it was added, removed, unchanged or
modified between two archive catalogs.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Iterable, Optional

from zipdiff.core.archive.differ import ContentDiffer
from zipdiff.core.diff.image_diff import IMAGE_EXTENSIONS, is_image_entry
from zipdiff.core.errors import ExtractionError
from zipdiff.core.models import DifferenceStatus, EntryCatalog, FileDifference


@dataclass
class EntryOutcome:
    """
    Result of classifying one entry.

    ``difference`` is None for unchanged entries and for entries whose
    content could not be extracted; the latter leave their reason in
    ``errors``.
    """
    name: str
    difference: Optional[FileDifference] = None
    errors: list[ExtractionError] = field(default_factory=list)


class EntryClassifier:
    """
    Classifies entry names against two read-only catalogs.

    ``classify`` keeps no state between calls and may run on many threads at
    once; its only shared inputs are the two immutable catalogs.
    """

    def __init__(
        self,
        left: EntryCatalog,
        right: EntryCatalog,
        differ: ContentDiffer,
        image_extensions: Iterable[str] = IMAGE_EXTENSIONS
    ):
        self.left = left
        self.right = right
        self.differ = differ
        self.image_extensions = tuple(image_extensions)

    def universe(self) -> frozenset[str]:
        """All entry names present in either catalog."""
        return self.left.names() | self.right.names()

    def classify(self, name: str) -> EntryOutcome:
        """Classify one entry name."""
        in_left = name in self.left
        in_right = name in self.right

        if in_left and not in_right:
            return self._outcome(name, DifferenceStatus.REMOVED)
        elif in_right and not in_left:
            return self._outcome(name, DifferenceStatus.ADDED)
        elif in_left and in_right:
            return self._classify_common(name)
        else:
            return self._outcome(name, DifferenceStatus.UNKNOWN)

    def _classify_common(self, name: str) -> EntryOutcome:
        if self.left.digest(name) == self.right.digest(name):
            return EntryOutcome(name=name)

        if is_image_entry(name, self.image_extensions):
            logging.debug(f"EntryClassifier - Skipping image file: {name}")
            return self._outcome(name, DifferenceStatus.MODIFIED_IMAGE)

        try:
            return EntryOutcome(name=name, difference=self.differ.diff(name))
        except ExtractionError as e:
            return EntryOutcome(name=name, errors=[e])

    @staticmethod
    def _outcome(name: str, status: DifferenceStatus) -> EntryOutcome:
        return EntryOutcome(
            name=name,
            difference=FileDifference(filename=name, status=status),
        )
