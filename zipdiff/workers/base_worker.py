"""
Qt plumbing shared by background comparison workers.

A worker is a QObject whose ``run`` slot executes ``do_work`` and turns the
outcome into exactly one terminal signal: ``finished``, ``error`` or
``cancelled``.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from enum import Enum, auto
from typing import Any, Optional

from PyQt6.QtCore import QObject, QThread, pyqtSignal, pyqtSlot, QMutex, QMutexLocker

from zipdiff.core.models import CompareProgress


class WorkerState(Enum):
    PENDING = auto()
    RUNNING = auto()
    CANCELLING = auto()
    CANCELLED = auto()
    COMPLETED = auto()
    FAILED = auto()

    @property
    def is_terminal(self) -> bool:
        return self in (WorkerState.CANCELLED, WorkerState.COMPLETED, WorkerState.FAILED)


class WorkerSignals(QObject):
    """Signals a worker emits while running."""
    started = pyqtSignal()
    status = pyqtSignal(str)

    # (items_processed, total_items, phase)
    progress = pyqtSignal(int, int, str)
    # CompareProgress
    phase_progress = pyqtSignal(object)

    finished = pyqtSignal(object)
    error = pyqtSignal(str, str)  # (exception class name, message)
    cancelled = pyqtSignal()

    state_changed = pyqtSignal(object)


class CancelledException(Exception):
    """Raised inside ``do_work`` to stop at a checkpoint."""
    pass


class WorkerMeta(type(QObject), type(ABC)):
    pass


class BaseWorker(QObject, ABC, metaclass=WorkerMeta):
    """
    Base class for comparison workers.

    Cancellation is cooperative and coarse: ``check_cancelled`` stops the
    worker at a checkpoint, and a cancel that arrives while the engine is
    busy only discards the result once ``do_work`` returns.
    """

    def __init__(self, parent: Optional[QObject] = None):
        super().__init__(parent)
        self.signals = WorkerSignals()
        self._mutex = QMutex()
        self._state = WorkerState.PENDING
        self._cancel_requested = False
        self._result: Any = None
        self._error: Optional[tuple[str, str]] = None

    @property
    def state(self) -> WorkerState:
        with QMutexLocker(self._mutex):
            return self._state

    def _set_state(self, state: WorkerState) -> None:
        with QMutexLocker(self._mutex):
            self._state = state
        self.signals.state_changed.emit(state)

    @property
    def is_cancelled(self) -> bool:
        with QMutexLocker(self._mutex):
            return self._cancel_requested

    @property
    def result(self) -> Any:
        return self._result

    @property
    def error(self) -> Optional[tuple[str, str]]:
        return self._error

    def cancel(self) -> None:
        """Ask the worker to stop; a no-op once it has finished."""
        with QMutexLocker(self._mutex):
            if self._state.is_terminal:
                return
            self._cancel_requested = True
            running = self._state == WorkerState.RUNNING
        if running:
            self._set_state(WorkerState.CANCELLING)

    @pyqtSlot()
    def run(self) -> None:
        """Execute ``do_work`` and emit its outcome. Connect to QThread.started."""
        self._set_state(WorkerState.RUNNING)
        self.signals.started.emit()

        try:
            self.check_cancelled()
            result = self.do_work()
            self.check_cancelled()
        except CancelledException:
            self._set_state(WorkerState.CANCELLED)
            self.signals.cancelled.emit()
        except Exception as e:
            self._error = (type(e).__name__, str(e))
            self._set_state(WorkerState.FAILED)
            self.signals.error.emit(*self._error)
        else:
            self._result = result
            self._set_state(WorkerState.COMPLETED)
            self.signals.finished.emit(result)

    @abstractmethod
    def do_work(self) -> Any:
        ...

    def check_cancelled(self) -> None:
        if self.is_cancelled:
            raise CancelledException("Operation cancelled")

    def report_status(self, message: str) -> None:
        self.signals.status.emit(message)

    def report_progress(self, progress: CompareProgress) -> None:
        self.signals.progress.emit(progress.items_processed, progress.total_items, progress.phase)
        self.signals.phase_progress.emit(progress)


class WorkerThread(QThread):
    """
    Owns a worker and runs it on a dedicated thread.

    The thread's event loop quits on the worker's terminal signal.
    """

    def __init__(self, worker: BaseWorker, parent: Optional[QObject] = None):
        super().__init__(parent)
        self.worker = worker
        self.worker.moveToThread(self)

        self.started.connect(self.worker.run)
        for signal in (worker.signals.finished, worker.signals.error, worker.signals.cancelled):
            signal.connect(self.quit)

    def cancel(self) -> None:
        self.worker.cancel()
