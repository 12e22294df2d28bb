"""Event sink — log store rows plus in-process listeners."""

from __future__ import annotations

import json
import logging
import time
from dataclasses import dataclass, field
from typing import Any, Callable

from sqlalchemy.ext.asyncio import AsyncSession

from coursefiles.models.log_event import LogEvent
from coursefiles.services.strings import PLUGIN_COMPONENT

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Event:
    """Structured record of something that happened in a context."""
    eventname: str
    contextid: int
    objectid: int | None = None
    objecttable: str | None = None
    other: dict[str, Any] = field(default_factory=dict)
    userid: int | None = None
    component: str = PLUGIN_COMPONENT


def license_changed(contextid: int, fileid: int, license_code: str,
                    userid: int | None = None) -> Event:
    return Event(
        eventname="license_changed",
        contextid=contextid,
        objectid=fileid,
        objecttable="files",
        other={"license": license_code},
        userid=userid,
    )


Listener = Callable[[Event], None]


class EventBus:
    """Records events with the caller's transaction, notifies after commit.

    ``stage`` adds a log store row to the session, so the row commits or
    rolls back together with the change it describes. ``publish`` is called
    once the transaction committed and hands each event to the listeners.
    """

    def __init__(self) -> None:
        self._listeners: list[Listener] = []

    def subscribe(self, listener: Listener) -> None:
        self._listeners.append(listener)

    def stage(self, db: AsyncSession, event: Event) -> None:
        db.add(LogEvent(
            eventname=event.eventname,
            component=event.component,
            contextid=event.contextid,
            objecttable=event.objecttable,
            objectid=event.objectid,
            other=json.dumps(event.other) if event.other else None,
            userid=event.userid,
            timecreated=int(time.time()),
        ))

    def publish(self, events: list[Event]) -> None:
        for event in events:
            for listener in list(self._listeners):
                try:
                    listener(event)
                except Exception as e:
                    # Delivery problems belong to the listener
                    logger.error("Event listener failed for %s: %s", event.eventname, e)


def log_listener(event: Event) -> None:
    """Default listener — writes every event to the application log."""
    logger.info(
        "Event %s: context=%s object=%s other=%s",
        event.eventname, event.contextid, event.objectid, event.other,
    )
