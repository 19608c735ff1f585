from __future__ import annotations

import logging
from collections import deque
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Deque, Dict, List, Optional
from uuid import uuid4

from pydantic import BaseModel, Field

logger = logging.getLogger(__name__)


class EventType(str, Enum):
    UTM_CAPTURED = "utmCaptured"
    UTM_MISSING = "utmMissing"
    SIMULATION_HISTORY_SAVED = "simulationHistorySaved"


class EventPayload(BaseModel):
    context: Optional[str] = None
    url: Optional[str] = None
    params: Dict[str, str] = Field(default_factory=dict)


class StoredEvent(BaseModel):
    id: str
    type: EventType
    timestamp: datetime
    payload: EventPayload


class SimulationHistoryEntry(BaseModel):
    id: str = Field(default_factory=lambda: uuid4().hex)
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    url: str = ""
    simulation: Dict[str, Any] = Field(default_factory=dict)
    utm_params: Dict[str, str] = Field(default_factory=dict)


class EventLog:
    """Append-only attribution log keeping only the most recent entries."""

    def __init__(self, event_limit: int = 200, history_limit: int = 100) -> None:
        self._events: Deque[StoredEvent] = deque(maxlen=event_limit)
        self._history: Deque[SimulationHistoryEntry] = deque(maxlen=history_limit)

    def record_event(self, event_type: EventType, payload: Optional[EventPayload] = None) -> StoredEvent:
        event = StoredEvent(
            id=f"{event_type.value}-{uuid4().hex}",
            type=event_type,
            timestamp=datetime.now(timezone.utc),
            payload=payload or EventPayload(),
        )
        self._events.append(event)
        return event

    def record_attribution(self, utm_params: Dict[str, str], url: str = "") -> StoredEvent:
        """Log whether a submission arrived with UTM parameters."""
        if utm_params:
            return self.record_event(
                EventType.UTM_CAPTURED, EventPayload(context="submission", url=url or None, params=utm_params)
            )
        return self.record_event(EventType.UTM_MISSING, EventPayload(context="submission", url=url or None))

    def save_simulation_history(self, entry: SimulationHistoryEntry) -> None:
        self._history.append(entry)
        self.record_event(
            EventType.SIMULATION_HISTORY_SAVED,
            EventPayload(context="history", url=entry.url or None, params=entry.utm_params),
        )
        logger.debug("Saved simulation history entry %s", entry.id)

    def events(self) -> List[StoredEvent]:
        return list(self._events)

    def history(self) -> List[SimulationHistoryEntry]:
        return list(self._history)

    def clear(self) -> None:
        self._events.clear()
        self._history.clear()
