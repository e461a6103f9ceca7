from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field

from atomik.chem.elements import ElementRecord
from atomik.insight.client import Insight

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class InsightTicket:
    version: int
    element: ElementRecord
    cancel_event: threading.Event = field(default_factory=threading.Event, compare=False, repr=False)

    @property
    def cancelled(self) -> bool:
        return self.cancel_event.is_set()


@dataclass(frozen=True)
class InsightState:
    element: ElementRecord | None = None
    loading: bool = False
    insight: Insight | None = None
    version: int = 0


class InsightSession:
    """Latest-selection-wins bookkeeping for insight requests.

    Every ``begin`` issues a ticket with a higher version and cancels the
    previous one. ``resolve`` only stores results whose ticket is still the
    current one, so a slow answer for an earlier element can never replace
    the state of the element selected after it.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._version = 0
        self._ticket: InsightTicket | None = None
        self._state = InsightState()

    def begin(self, element: ElementRecord) -> InsightTicket:
        with self._lock:
            if self._ticket is not None:
                self._ticket.cancel_event.set()
            self._version += 1
            ticket = InsightTicket(self._version, element)
            self._ticket = ticket
            self._state = InsightState(element=element, loading=True, version=ticket.version)
        logger.debug("Insight request %d started for %s", ticket.version, element.symbol)
        return ticket

    def is_current(self, ticket: InsightTicket) -> bool:
        with self._lock:
            return self._ticket is not None and ticket.version == self._ticket.version and not ticket.cancelled

    def resolve(self, ticket: InsightTicket, insight: Insight) -> bool:
        with self._lock:
            current = self._ticket
            if current is None or ticket.version != current.version or ticket.cancelled:
                logger.debug(
                    "Discarding stale insight %d for %s", ticket.version, ticket.element.symbol
                )
                return False
            self._state = InsightState(
                element=ticket.element,
                loading=False,
                insight=insight,
                version=ticket.version,
            )
            return True

    def cancel(self) -> None:
        with self._lock:
            if self._ticket is not None:
                self._ticket.cancel_event.set()
            self._state = InsightState(
                element=self._state.element,
                loading=False,
                insight=self._state.insight,
                version=self._state.version,
            )

    def state(self) -> InsightState:
        with self._lock:
            return self._state
