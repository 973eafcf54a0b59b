"""
Error taxonomy for archive comparison.

Fatal errors (``ArchiveOpenError``, ``ArchiveReadError``, ``CatalogReadError``)
abort a comparison. ``ExtractionError`` and its subclasses are raised per
entry while diffing content; the comparer collects them instead of letting
them abort the run.
"""

from __future__ import annotations

from typing import Optional


class ComparisonError(Exception):
    """Base class for all archive comparison errors."""
    pass


class ArchiveOpenError(ComparisonError):
    """The archive container cannot be opened or is not a valid ZIP file."""

    def __init__(self, path: str, cause: Optional[BaseException] = None):
        self.path = str(path)
        self.cause = cause
        detail = f": {cause}" if cause else ""
        super().__init__(f"Failed to open {self.path}{detail}")


class ArchiveReadError(ComparisonError):
    """The raw container bytes cannot be read."""

    def __init__(self, path: str, cause: Optional[BaseException] = None):
        self.path = str(path)
        self.cause = cause
        detail = f": {cause}" if cause else ""
        super().__init__(f"Failed to read {self.path}{detail}")


class CatalogReadError(ArchiveReadError):
    """An entry could not be decompressed while building a catalog."""

    def __init__(self, path: str, entry: str, cause: Optional[BaseException] = None):
        super().__init__(path, cause)
        self.entry = entry
        detail = f": {cause}" if cause else ""
        self.args = (f"Failed to read {entry} in {self.path}{detail}",)


class ExtractionError(ComparisonError):
    """A single entry could not be extracted for content comparison."""

    def __init__(
        self,
        path: str,
        entry: str,
        cause: Optional[BaseException] = None,
        message: Optional[str] = None
    ):
        self.path = str(path)
        self.entry = entry
        self.cause = cause
        super().__init__(message or self._default_message())

    def _default_message(self) -> str:
        detail = f": {self.cause}" if self.cause else ""
        return f"Failed to read {self.entry} from {self.path}{detail}"


class EntryNotFoundError(ExtractionError):
    """No entry with the requested name exists in the archive."""

    def _default_message(self) -> str:
        return f"File {self.entry} not found in {self.path}"


class EntryReadError(ExtractionError):
    """The entry exists but its bytes could not be decompressed."""
    pass


class EntryDecodeError(ExtractionError):
    """The entry's bytes are not valid UTF-8."""

    def _default_message(self) -> str:
        return f"Failed to convert {self.entry} from {self.path} to UTF-8"


class EntryComparisonError(ExtractionError):
    """
    One or both sides of a modified entry failed to extract.

    ``left_error`` and ``right_error`` hold the individual failures; at least
    one of them is set.
    """

    def __init__(
        self,
        entry: str,
        left_error: Optional[ExtractionError] = None,
        right_error: Optional[ExtractionError] = None
    ):
        if left_error is None and right_error is None:
            raise ValueError("EntryComparisonError needs at least one cause")
        self.left_error = left_error
        self.right_error = right_error

        if left_error and right_error:
            message = (f"Error comparing file '{entry}': "
                       f"left error: {left_error}, right error: {right_error}")
        else:
            message = f"Error extracting file '{entry}': {left_error or right_error}"

        failed = left_error or right_error
        super().__init__(failed.path, entry, cause=failed, message=message)

    @property
    def both_failed(self) -> bool:
        return self.left_error is not None and self.right_error is not None
