"""
Archive comparison engine.

Compares two ZIP archives entry by entry and identifies:
- Entries only in the left archive (removed)
- Entries only in the right archive (added)
- Modified entries (text with a line diff, images, binaries)

Unchanged entries are omitted from the result.
"""

from __future__ import annotations

import os
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Optional
import time
import logging

from zipdiff.core.archive.classifier import EntryClassifier, EntryOutcome
from zipdiff.core.archive.reader import ArchiveReader, EntryFilter
from zipdiff.core.archive.differ import ContentDiffer
from zipdiff.core.diff.image_diff import IMAGE_EXTENSIONS
from zipdiff.core.diff.text_diff import TextDiffEngine
from zipdiff.core.errors import ArchiveOpenError, ArchiveReadError
from zipdiff.core.models import (
    ArchiveCompareResult,
    CompareProgress,
    EntryCatalog,
    FileDifference,
)
from zipdiff.services.hashing import DEFAULT_CHUNK_SIZE, HashAlgorithm, HashingService, HashResult


def default_worker_count() -> int:
    """Thread count used when none is configured."""
    return min(32, (os.cpu_count() or 1) + 4)


@dataclass
class ArchiveCompareOptions:
    """Options for archive comparison."""
    # Hashing
    hash_algorithm: HashAlgorithm = HashAlgorithm.XXH64
    chunk_size: int = DEFAULT_CHUNK_SIZE

    # Filtering
    junk_prefixes: list[str] = field(default_factory=lambda: ['__MACOSX/'])
    junk_suffixes: list[str] = field(default_factory=lambda: ['.DS_Store'])
    image_extensions: list[str] = field(default_factory=lambda: list(IMAGE_EXTENSIONS))

    # Performance
    parallel_workers: int = field(default_factory=default_worker_count)
    parallel_catalogs: bool = True


class ArchiveComparer:
    """
    Compares two ZIP archives.

    Pipeline:
    - Whole-container hash: byte-identical archives short-circuit to an
      empty result
    - Catalogs: name -> content hash for each archive
    - Fan-out: every entry name is classified on a thread pool; modified
      entries are extracted and diffed by the worker that owns them
    """

    def __init__(self, options: Optional[ArchiveCompareOptions] = None):
        self.options = options or ArchiveCompareOptions()
        self.hashing = HashingService(
            default_algorithm=self.options.hash_algorithm,
            chunk_size=self.options.chunk_size,
        )
        self.reader = ArchiveReader(
            hashing=self.hashing,
            entry_filter=EntryFilter(
                junk_prefixes=list(self.options.junk_prefixes),
                junk_suffixes=list(self.options.junk_suffixes),
            ),
        )
        self.text_engine = TextDiffEngine()
        self._progress_callback: Optional[Callable[[CompareProgress], None]] = None

    def compare(
        self,
        left_path: Path | str,
        right_path: Path | str,
        progress_callback: Optional[Callable[[CompareProgress], None]] = None
    ) -> ArchiveCompareResult:
        """
        Compare two archives.

        Args:
            left_path: Left/original archive
            right_path: Right/new archive
            progress_callback: Called with progress updates

        Returns:
            ArchiveCompareResult with one FileDifference per changed entry

        Raises:
            ArchiveOpenError: If either archive cannot be opened
            ArchiveReadError: If either archive cannot be read completely,
                including CatalogReadError for undecompressable entries
        """
        start_time = time.time()
        left = str(left_path)
        right = str(right_path)
        self._progress_callback = progress_callback

        # Step 1: whole-container hashes
        self._report_progress('hashing', left, 0, 2, 0.0)
        left_hash = self._hash_container(left)
        self._report_progress('hashing', right, 1, 2, 50.0)
        right_hash = self._hash_container(right)
        self._report_progress('hashing', right, 2, 2, 100.0)

        if left_hash.matches(right_hash):
            logging.info("ArchiveComparer - Archives are identical, skipping diff.")
            return ArchiveCompareResult(
                left_path=left,
                right_path=right,
                identical_containers=True,
                compare_time=time.time() - start_time,
            )

        # Step 2: catalogs
        left_catalog, right_catalog = self._build_catalogs(left, right)

        # Step 3 and 4: classify the union of names in parallel
        classifier = EntryClassifier(
            left_catalog,
            right_catalog,
            ContentDiffer(left, right, reader=self.reader, text_engine=self.text_engine),
            image_extensions=self.options.image_extensions,
        )
        names = classifier.universe()
        differences, errors = self._classify_parallel(classifier, names)

        compare_time = time.time() - start_time
        logging.info(f"ArchiveComparer - Total comparison time: {compare_time:.2f} seconds")

        if errors:
            logging.error("ArchiveComparer - Encountered errors:\n" + "\n".join(errors))

        return ArchiveCompareResult(
            left_path=left,
            right_path=right,
            differences=differences,
            errors=errors,
            entry_count=len(names),
            compare_time=compare_time,
        )

    def _hash_container(self, path: str) -> HashResult:
        """Hash the raw bytes of an archive file."""
        start = time.time()
        try:
            stream = open(path, 'rb')
        except OSError as e:
            logging.error(f"ArchiveComparer - Failed to open {path}: {e}")
            raise ArchiveOpenError(path, e) from e

        with stream:
            try:
                result = self.hashing.hash_stream(stream)
            except OSError as e:
                logging.error(f"ArchiveComparer - Failed to read {path}: {e}")
                raise ArchiveReadError(path, e) from e

        logging.info(f"ArchiveComparer - Archive hash computed in {time.time() - start:.2f} seconds")
        return result

    def _build_catalogs(self, left: str, right: str) -> tuple[EntryCatalog, EntryCatalog]:
        """Catalog both archives, on two threads unless disabled."""
        self._report_progress('cataloging', left, 0, 2, 0.0)

        if self.options.parallel_catalogs:
            with ThreadPoolExecutor(max_workers=2) as executor:
                left_future = executor.submit(self.reader.catalog, left)
                right_future = executor.submit(self.reader.catalog, right)
                left_catalog = left_future.result()
                right_catalog = right_future.result()
        else:
            left_catalog = self.reader.catalog(left)
            self._report_progress('cataloging', right, 1, 2, 50.0)
            right_catalog = self.reader.catalog(right)

        self._report_progress('cataloging', right, 2, 2, 100.0)
        return left_catalog, right_catalog

    def _classify_parallel(
        self,
        classifier: EntryClassifier,
        names: frozenset[str]
    ) -> tuple[list[FileDifference], list[str]]:
        """
        Classify entry names on a worker pool.

        Each task returns its own error buffer; buffers are merged here once
        the task completes, so workers never share mutable state.
        """
        differences: list[FileDifference] = []
        errors: list[str] = []
        total_items = len(names)
        processed = 0

        if not names:
            return differences, errors

        with ThreadPoolExecutor(max_workers=max(1, self.options.parallel_workers)) as executor:
            futures = {
                executor.submit(classifier.classify, name): name
                for name in names
            }

            for future in as_completed(futures):
                name = futures[future]
                try:
                    outcome: EntryOutcome = future.result()
                except Exception as e:
                    logging.error(f"ArchiveComparer - Error in parallel comparison for {name}: {e}")
                    errors.append(f"Error comparing file '{name}': {e}")
                else:
                    if outcome.difference is not None:
                        differences.append(outcome.difference)
                    errors.extend(str(error) for error in outcome.errors)

                processed += 1
                self._report_progress('comparing', name, processed, total_items,
                                      processed / total_items * 100)

        return differences, errors

    def _report_progress(
        self,
        phase: str,
        current_path: str,
        processed: int,
        total: int,
        percent: float
    ) -> None:
        """Report progress to callback."""
        if self._progress_callback:
            progress = CompareProgress(
                phase=phase,
                current_path=current_path,
                items_processed=processed,
                total_items=total,
                percent=percent
            )
            self._progress_callback(progress)


def compare_archives(
    left_path: Path | str,
    right_path: Path | str,
    options: Optional[ArchiveCompareOptions] = None
) -> list[FileDifference]:
    """
    Compare two ZIP archives and return the changed entries.

    Entries that could not be extracted are left out of the list; see
    ``ArchiveComparer.compare`` for the full result including diagnostics.
    """
    return ArchiveComparer(options).compare(left_path, right_path).differences
