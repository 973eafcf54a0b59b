"""
Background workers for non-blocking comparisons.

Provides QThread-based workers that run the archive comparer off the UI
thread and report through Qt signals.
"""

from zipdiff.workers.base_worker import (
    BaseWorker,
    CancelledException,
    WorkerSignals,
    WorkerState,
    WorkerThread,
)
from zipdiff.workers.compare_worker import (
    ArchiveCompareWorker,
)

__all__ = [
    # Base
    'BaseWorker',
    'CancelledException',
    'WorkerSignals',
    'WorkerState',
    'WorkerThread',
    # Compare
    'ArchiveCompareWorker',
]
