"""Synchronous in-process event bus keyed by exact event and listener class."""

from __future__ import annotations

import contextlib
import logging
import threading
from functools import lru_cache
from typing import Any, Callable

from listenerbus.config import BusSettings
from listenerbus.domain.dispatcher import ListenerDispatcher
from listenerbus.domain.errors import InvalidArgumentError, UnregisteredEventError
from listenerbus.domain.events import Event, EventListener, is_event_type
from listenerbus.domain.handlers import can_handle_event as _can_handle_event
from listenerbus.domain.models import DispatchReport
from listenerbus.repos.memory import DispatcherRepository
from listenerbus.services.discovery import find_event_handlers

logger = logging.getLogger(__name__)


class EventManager:
    """Registry of event types and the listeners interested in them.

    Event types are registered first. Registering a listener then scans its
    class once per registered event type for ``@event_handler`` methods and
    files the listener under a ``ListenerDispatcher`` for each event type it
    handles. ``dispatch`` calls every matching handler before returning.

    A listener registered before an event type will not receive that event
    type until it is registered again.
    """

    def __init__(self, settings: BusSettings | None = None) -> None:
        self.settings = settings or BusSettings.from_env()
        self._dispatchers = DispatcherRepository()
        self._lock: Any = (
            threading.RLock() if self.settings.thread_safe else contextlib.nullcontext()
        )

    # ------------------------------------------------------------------
    # Event types
    # ------------------------------------------------------------------

    def register_event(self, event_type: type[Event]) -> None:
        """Make ``event_type`` dispatchable. Registering twice is a no-op."""
        if event_type is None:
            raise InvalidArgumentError("Can not register a None event type")
        if not is_event_type(event_type):
            raise InvalidArgumentError(f"{event_type!r} is not an Event subclass")

        with self._lock:
            if self._dispatchers.add_event_type(event_type):
                logger.debug("Registered event type %s", event_type.__qualname__)

    def unregister_event(self, event_type: type[Event]) -> None:
        """Forget ``event_type`` and every listener filed under it."""
        if event_type is None:
            return

        with self._lock:
            if self._dispatchers.remove_event_type(event_type):
                logger.debug("Unregistered event type %s", event_type.__qualname__)

    def is_event_registered(self, event_type: type[Event]) -> bool:
        if not is_event_type(event_type):
            return False
        with self._lock:
            return self._dispatchers.has_event_type(event_type)

    def registered_events(self) -> list[type[Event]]:
        with self._lock:
            return self._dispatchers.event_types()

    # ------------------------------------------------------------------
    # Listeners
    # ------------------------------------------------------------------

    def register_listener(self, listener: EventListener) -> None:
        """File ``listener`` under every registered event type it has handlers for.

        Event types for which the listener's class declares no handler are
        skipped without error.
        """
        if listener is None:
            raise InvalidArgumentError("Can not register a None listener")
        if not isinstance(listener, EventListener):
            raise InvalidArgumentError(
                f"{type(listener).__qualname__} is not an EventListener"
            )

        listener_type = type(listener)
        with self._lock:
            for event_type in self._dispatchers.event_types():
                dispatcher = self._dispatchers.get(event_type, listener_type)
                if dispatcher is None:
                    handlers = find_event_handlers(event_type, listener_type)
                    if not handlers:
                        continue
                    dispatcher = ListenerDispatcher(
                        event_type,
                        listener_type,
                        handlers,
                        failure_log_level=self.settings.failure_log_level,
                    )
                    self._dispatchers.add(dispatcher)
                    logger.debug("Created %r", dispatcher)

                dispatcher.register_listener(listener)
                logger.debug(
                    "Registered %s for %s",
                    listener_type.__qualname__,
                    event_type.__qualname__,
                )

    def unregister_listener(self, listener: EventListener) -> None:
        """Remove the first listener equal to ``listener`` from each event type.

        Matching is by equality, not identity. Unknown listeners are ignored.
        """
        if listener is None:
            return

        listener_type = type(listener)
        with self._lock:
            for event_type in self._dispatchers.event_types():
                dispatcher = self._dispatchers.get(event_type, listener_type)
                if dispatcher is None:
                    continue
                dispatcher.unregister_listener(listener)
                logger.debug(
                    "Unregistered %s from %s",
                    listener_type.__qualname__,
                    event_type.__qualname__,
                )

    def dispatchers_for(self, event_type: type[Event]) -> list[ListenerDispatcher]:
        with self._lock:
            return self._dispatchers.list_for_event(event_type)

    def clear(self) -> None:
        """Remove every event type and listener (useful in tests)."""
        with self._lock:
            self._dispatchers.clear()

    # ------------------------------------------------------------------
    # Dispatch
    # ------------------------------------------------------------------

    def dispatch(self, event: Event) -> DispatchReport:
        """Deliver ``event`` to every handler registered for its exact type.

        Handler failures are logged and reported in the returned
        ``DispatchReport``; they never propagate to the caller.
        """
        if event is None:
            raise InvalidArgumentError("Can not dispatch a None event")

        event_type = type(event)
        with self._lock:
            if not self._dispatchers.has_event_type(event_type):
                raise UnregisteredEventError(
                    f"Event type {event_type.__qualname__} has not been registered"
                )
            dispatchers = self._dispatchers.list_for_event(event_type)

        logger.debug(
            "Dispatching %s to %d listener type(s)",
            event_type.__qualname__,
            len(dispatchers),
        )
        report = DispatchReport(event_type=event_type.__qualname__)
        for dispatcher in dispatchers:
            report = report.merge(dispatcher.dispatch(event))
        return report

    @staticmethod
    def can_handle_event(method: Callable[..., Any], event_type: type[Event]) -> bool:
        return _can_handle_event(method, event_type)


@lru_cache(maxsize=1)
def get_event_manager() -> EventManager:
    """Return the process-wide default EventManager, creating it on first use."""
    return EventManager()
