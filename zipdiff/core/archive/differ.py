"""
Content differ for modified archive entries.

Decides how a changed entry is reported:
- binary content (null byte on either side) -> ``Modified (Binary)``
- UTF-8 text -> ``Modified`` with a line diff
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional

from zipdiff.core.archive.reader import ArchiveReader, decode_utf8
from zipdiff.core.diff.binary_diff import any_binary
from zipdiff.core.diff.text_diff import TextDiffEngine
from zipdiff.core.errors import EntryComparisonError, ExtractionError
from zipdiff.core.models import DifferenceStatus, FileDifference


class ContentDiffer:
    """
    Compares the content of one entry present in both archives.

    Both sides are extracted independently; each extraction opens its own
    handle on the archive, so one differ can be shared by many threads.
    """

    def __init__(
        self,
        left_path: Path | str,
        right_path: Path | str,
        reader: Optional[ArchiveReader] = None,
        text_engine: Optional[TextDiffEngine] = None
    ):
        self.left_path = str(left_path)
        self.right_path = str(right_path)
        self.reader = reader or ArchiveReader()
        self.text_engine = text_engine or TextDiffEngine()

    def diff(self, name: str) -> FileDifference:
        """
        Diff one entry.

        Raises:
            EntryComparisonError: If either side fails to extract or decode
        """
        left_content, right_content = self._extract_both(name)

        if any_binary(left_content, right_content):
            return FileDifference(
                filename=name,
                status=DifferenceStatus.MODIFIED_BINARY,
            )

        left_text, right_text = self._decode_both(name, left_content, right_content)

        return FileDifference(
            filename=name,
            status=DifferenceStatus.MODIFIED,
            content_diff=tuple(self.text_engine.diff_text(left_text, right_text)),
        )

    def _extract_both(self, name: str) -> tuple[bytes, bytes]:
        left_content = right_content = b''
        left_error = right_error = None

        try:
            left_content = self.reader.extract(self.left_path, name)
        except ExtractionError as e:
            left_error = e
        try:
            right_content = self.reader.extract(self.right_path, name)
        except ExtractionError as e:
            right_error = e

        if left_error or right_error:
            raise EntryComparisonError(name, left_error, right_error)
        return left_content, right_content

    def _decode_both(
        self,
        name: str,
        left_content: bytes,
        right_content: bytes
    ) -> tuple[str, str]:
        left_text = right_text = ''
        left_error = right_error = None

        try:
            left_text = decode_utf8(left_content, self.left_path, name)
        except ExtractionError as e:
            left_error = e
        try:
            right_text = decode_utf8(right_content, self.right_path, name)
        except ExtractionError as e:
            right_error = e

        if left_error or right_error:
            raise EntryComparisonError(name, left_error, right_error)
        return left_text, right_text
