from __future__ import annotations

import logging
from typing import Callable

from PySide6 import QtCore

from atomik.chem.elements import ElementRecord
from atomik.config import Settings
from atomik.insight.client import Insight, fetch_insight, unavailable_insight
from atomik.insight.session import InsightSession, InsightState, InsightTicket

logger = logging.getLogger(__name__)

FetchFn = Callable[[ElementRecord, Settings], Insight]
SHUTDOWN_TIMEOUT_MS = 500


class InsightWorker(QtCore.QObject):
    finished = QtCore.Signal(object, object)

    def __init__(self, ticket: InsightTicket, fetch: FetchFn, settings: Settings) -> None:
        super().__init__()
        self._ticket = ticket
        self._fetch = fetch
        self._settings = settings

    @QtCore.Slot()
    def run(self) -> None:
        if self._ticket.cancelled:
            self.finished.emit(self._ticket, None)
            return
        try:
            insight = self._fetch(self._ticket.element, self._settings)
        except Exception:
            logger.exception("Insight fetch crashed for %s", self._ticket.element.symbol)
            insight = unavailable_insight(self._ticket.element)
        self.finished.emit(self._ticket, insight)


class InsightController(QtCore.QObject):
    """Runs one background fetch per selection and publishes only the latest result."""

    insight_changed = QtCore.Signal(object)
    drained = QtCore.Signal()

    def __init__(
        self,
        settings: Settings,
        fetch: FetchFn = fetch_insight,
        parent: QtCore.QObject | None = None,
    ) -> None:
        super().__init__(parent)
        self._settings = settings
        self._fetch = fetch
        self._session = InsightSession()
        self._jobs: dict[int, tuple[QtCore.QThread, InsightWorker]] = {}
        self._shutting_down = False

    def state(self) -> InsightState:
        return self._session.state()

    def request(self, element: ElementRecord) -> InsightTicket:
        ticket = self._session.begin(element)
        self.insight_changed.emit(self._session.state())

        thread = QtCore.QThread(self)
        worker = InsightWorker(ticket, self._fetch, self._settings)
        worker.moveToThread(thread)
        thread.started.connect(worker.run)
        worker.finished.connect(self._on_finished)
        worker.finished.connect(thread.quit)
        thread.finished.connect(self._cleanup_finished)
        self._jobs[ticket.version] = (thread, worker)
        thread.start()
        return ticket

    @QtCore.Slot(object, object)
    def _on_finished(self, ticket: InsightTicket, insight: Insight | None) -> None:
        if insight is None or not self._session.resolve(ticket, insight):
            return
        self.insight_changed.emit(self._session.state())

    @QtCore.Slot()
    def _cleanup_finished(self) -> None:
        for version, (thread, worker) in list(self._jobs.items()):
            if thread.isFinished():
                del self._jobs[version]
                worker.deleteLater()
                thread.deleteLater()
        if self._shutting_down and not self._jobs:
            self.drained.emit()

    def pending(self) -> int:
        return sum(1 for thread, _worker in self._jobs.values() if not thread.isFinished())

    def shutdown(self, timeout_ms: int = SHUTDOWN_TIMEOUT_MS) -> bool:
        """Cancel outstanding requests and wait up to ``timeout_ms`` for their threads.

        Returns False when a request is still in flight after the deadline. Its
        thread is kept until it finishes; ``drained`` fires once none are left.
        """
        self._shutting_down = True
        self._session.cancel()
        deadline = QtCore.QDeadlineTimer(timeout_ms)
        for thread, _worker in list(self._jobs.values()):
            thread.quit()
            thread.wait(deadline)
        remaining = self.pending()
        if remaining:
            logger.warning("%d insight request(s) still running at shutdown", remaining)
        return remaining == 0
