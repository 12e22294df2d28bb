"""Business logic services — singleton registry."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from coursefiles.services.events import EventBus
    from coursefiles.services.strings import StringManager

logger = logging.getLogger(__name__)

_string_manager: StringManager | None = None
_event_bus: EventBus | None = None


async def init_services() -> None:
    """Create and wire up all service singletons."""
    global _string_manager, _event_bus

    from coursefiles.services.events import EventBus, log_listener
    from coursefiles.services.strings import StringManager

    _string_manager = StringManager()
    _event_bus = EventBus()
    _event_bus.subscribe(log_listener)
    logger.info("Services initialized (strings, event bus)")


async def shutdown_services() -> None:
    global _string_manager, _event_bus
    _string_manager = None
    _event_bus = None


def get_string_manager() -> StringManager:
    if _string_manager is None:
        raise RuntimeError("Services not initialized — call init_services() first")
    return _string_manager


def get_event_bus() -> EventBus:
    if _event_bus is None:
        raise RuntimeError("Services not initialized — call init_services() first")
    return _event_bus
