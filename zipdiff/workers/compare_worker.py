"""
Background worker that compares two archives.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

from PyQt6.QtCore import QObject

from zipdiff.workers.base_worker import BaseWorker
from zipdiff.core.archive.comparer import ArchiveComparer, ArchiveCompareOptions
from zipdiff.core.models import ArchiveCompareResult


class ArchiveCompareWorker(BaseWorker):
    """
    Runs ``ArchiveComparer.compare`` off the caller's thread.

    ``finished`` carries the ArchiveCompareResult; a fatal ComparisonError
    arrives through ``error`` under its class name.
    """

    def __init__(
        self,
        left_path: str | Path,
        right_path: str | Path,
        options: Optional[ArchiveCompareOptions] = None,
        parent: Optional[QObject] = None
    ):
        super().__init__(parent)
        self.left_path = Path(left_path)
        self.right_path = Path(right_path)
        self.options = options or ArchiveCompareOptions()

    def do_work(self) -> ArchiveCompareResult:
        self.report_status(f"Comparing {self.left_path.name} with {self.right_path.name}...")

        result = ArchiveComparer(self.options).compare(
            self.left_path,
            self.right_path,
            progress_callback=self.report_progress,
        )

        if result.has_errors:
            logging.warning(f"ArchiveCompareWorker - {len(result.errors)} entries could not be compared")
            self.report_status(f"Complete with {len(result.errors)} unreadable entries")
        else:
            self.report_status("Complete")
        return result
