"""
Event dispatcher - feeds ordered events to the reconciler.

Events are handled strictly one at a time, in delivery order. A failing
event stops the dispatch: its transaction has already been rolled back,
and skipping it would let later events build on a state that never saw it.
"""
from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field
from typing import Dict, Iterable

import structlog

from .data.models.events import ContractEvent
from .reconciler import ArtworkReconciler

logger = structlog.get_logger()


@dataclass
class DispatchStats:
    """Counters for one dispatch run."""

    handled: Counter = field(default_factory=Counter)
    skipped: Counter = field(default_factory=Counter)

    @property
    def total(self) -> int:
        return sum(self.handled.values()) + sum(self.skipped.values())

    def to_dict(self) -> Dict[str, Dict[str, int]]:
        return {"handled": dict(self.handled), "skipped": dict(self.skipped)}


class EventDispatcher:
    """Sequential delivery of events to an ``ArtworkReconciler``."""

    def __init__(self, reconciler: ArtworkReconciler):
        self.reconciler = reconciler
        self.stats = DispatchStats()

    def dispatch_one(self, event: ContractEvent) -> None:
        log = logger.bind(
            event_type=event.event,
            block=event.block_number,
            log_index=event.log_index,
        )
        try:
            artwork = self.reconciler.handle(event)
        except Exception as e:
            log.exception("event_failed", error=str(e))
            raise

        if artwork is None:
            self.stats.skipped[event.event] += 1
        else:
            self.stats.handled[event.event] += 1

    def dispatch(self, events: Iterable[ContractEvent]) -> DispatchStats:
        """Handle every event in order and return the run's counters."""
        for event in events:
            self.dispatch_one(event)

        logger.info("dispatch_complete", total=self.stats.total, **self.stats.to_dict())
        return self.stats
