"""
ZIP archive reader.

Provides two access modes over a ZIP container:
- Catalog mode: every entry name mapped to a content fingerprint
- Content mode: the full decompressed bytes of one named entry

Every call opens its own read-only handle and closes it before returning, so
concurrent calls against the same path never share a file cursor.
"""

from __future__ import annotations

import logging
import lzma
import zipfile
import zlib
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterator, Optional

from zipdiff.core.errors import (
    ArchiveOpenError,
    CatalogReadError,
    EntryDecodeError,
    EntryNotFoundError,
    EntryReadError,
)
from zipdiff.core.models import EntryCatalog
from zipdiff.services.hashing import HashAlgorithm, HashingService


# Raised by zipfile and its decompressors for corrupt, truncated,
# encrypted or unsupported entries.
ENTRY_READ_ERRORS = (
    zipfile.BadZipFile,
    zlib.error,
    lzma.LZMAError,
    NotImplementedError,
    RuntimeError,
    EOFError,
    OSError,
)

OPEN_ERRORS = (OSError, zipfile.BadZipFile, zipfile.LargeZipFile)


@dataclass
class EntryFilter:
    """Entry names to ignore: OS metadata directories and marker files."""
    junk_prefixes: list[str] = field(default_factory=lambda: ['__MACOSX/'])
    junk_suffixes: list[str] = field(default_factory=lambda: ['.DS_Store'])

    def is_junk(self, name: str) -> bool:
        """Check if an entry name is OS junk that never takes part in a diff."""
        return (any(name.startswith(prefix) for prefix in self.junk_prefixes) or
                any(name.endswith(suffix) for suffix in self.junk_suffixes))


class ArchiveReader:
    """
    Reads entry catalogs and entry content from ZIP archives.

    Entry names are used verbatim: no case folding or path normalisation,
    so ``Readme.txt`` and ``README.txt`` are different entries.
    """

    def __init__(
        self,
        hashing: Optional[HashingService] = None,
        entry_filter: Optional[EntryFilter] = None,
        algorithm: Optional[HashAlgorithm] = None
    ):
        self.hashing = hashing or HashingService()
        self.entry_filter = entry_filter or EntryFilter()
        self.algorithm = algorithm

    def catalog(self, archive_path: Path | str) -> EntryCatalog:
        """
        Build the name -> digest catalog of an archive.

        Args:
            archive_path: Path to the ZIP file

        Returns:
            EntryCatalog without junk entries

        Raises:
            ArchiveOpenError: If the container cannot be opened
            CatalogReadError: If any entry cannot be decompressed
        """
        path = str(archive_path)
        entries: dict[str, str] = {}

        with self._open(path) as archive:
            for info in self._iter_entries(archive):
                try:
                    with archive.open(info) as stream:
                        digest = self.hashing.hash_stream(stream, self.algorithm)
                except ENTRY_READ_ERRORS as e:
                    logging.error(f"ArchiveReader - Failed to read {info.filename} in {path}: {e}")
                    raise CatalogReadError(path, info.filename, e) from e

                # Duplicate names: the last one listed wins.
                entries[info.filename] = digest.hash_hex

        logging.debug(f"ArchiveReader - Cataloged {len(entries)} entries from {path}")
        return EntryCatalog(archive_path=path, entries=entries)

    def extract(self, archive_path: Path | str, name: str) -> bytes:
        """
        Read the full decompressed content of one entry.

        The archive is reopened and rescanned on every call; the first entry
        with exactly ``name`` is returned.

        Raises:
            EntryNotFoundError: If no entry has that name
            EntryReadError: If the archive cannot be reopened or the entry
                cannot be decompressed
        """
        path = str(archive_path)

        try:
            archive = self._open(path)
        except ArchiveOpenError as e:
            raise EntryReadError(path, name, e.cause or e) from e

        with archive:
            for info in archive.infolist():
                if info.filename != name:
                    continue
                try:
                    with archive.open(info) as stream:
                        return stream.read()
                except ENTRY_READ_ERRORS as e:
                    raise EntryReadError(path, name, e) from e

        raise EntryNotFoundError(path, name)

    def read_text(self, archive_path: Path | str, name: str) -> str:
        """
        Read an entry as strict UTF-8 text.

        Raises:
            EntryDecodeError: If the content is not valid UTF-8
        """
        return decode_utf8(self.extract(archive_path, name), archive_path, name)

    def list_names(self, archive_path: Path | str) -> list[str]:
        """Entry names in archive order, junk excluded."""
        with self._open(str(archive_path)) as archive:
            return [info.filename for info in self._iter_entries(archive)]

    def _iter_entries(self, archive: zipfile.ZipFile) -> Iterator[zipfile.ZipInfo]:
        for info in archive.infolist():
            if self.entry_filter.is_junk(info.filename):
                continue
            yield info

    def _open(self, path: str) -> zipfile.ZipFile:
        try:
            return zipfile.ZipFile(path, 'r')
        except OPEN_ERRORS as e:
            logging.error(f"ArchiveReader - Failed to open {path}: {e}")
            raise ArchiveOpenError(path, e) from e


def decode_utf8(content: bytes, archive_path: Path | str, name: str) -> str:
    """Decode entry bytes as UTF-8, raising EntryDecodeError on failure."""
    try:
        return content.decode('utf-8')
    except UnicodeDecodeError as e:
        raise EntryDecodeError(str(archive_path), name, e) from e
