"""Delivery of one event type to every instance of one listener class."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import Any, Callable

from listenerbus.domain.errors import (
    EventTypeMismatchError,
    InvalidArgumentError,
    ListenerTypeMismatchError,
)
from listenerbus.domain.events import Event, EventListener
from listenerbus.domain.handlers import can_handle_event
from listenerbus.domain.models import DispatchReport, HandlerFailure

logger = logging.getLogger(__name__)


class ListenerDispatcher:
    """Holds the listeners of one class and the handlers they share for one event type.

    Listeners must be instances of exactly ``listener_type`` and events must
    be instances of exactly ``event_type``; anything else is rejected. The
    handler set is fixed at construction, after dropping any method that
    cannot handle ``event_type``.
    """

    def __init__(
        self,
        event_type: type[Event],
        listener_type: type[EventListener],
        handlers: Iterable[Callable[..., Any]],
        failure_log_level: int = logging.ERROR,
    ) -> None:
        if event_type is None or listener_type is None:
            raise InvalidArgumentError("event_type and listener_type are required")

        self._event_type = event_type
        self._listener_type = listener_type
        self._handlers: tuple[Callable[..., Any], ...] = tuple(
            h for h in handlers if can_handle_event(h, event_type)
        )
        self._listeners: list[EventListener] = []
        self._failure_log_level = failure_log_level

    def __repr__(self) -> str:
        return (
            f"ListenerDispatcher({self._event_type.__name__}, "
            f"{self._listener_type.__name__}, handlers={len(self._handlers)}, "
            f"listeners={len(self._listeners)})"
        )

    @property
    def event_type(self) -> type[Event]:
        return self._event_type

    @property
    def listener_type(self) -> type[EventListener]:
        return self._listener_type

    @property
    def handlers(self) -> tuple[Callable[..., Any], ...]:
        return self._handlers

    @property
    def listeners(self) -> tuple[EventListener, ...]:
        return tuple(self._listeners)

    def count_handling_methods(self) -> int:
        return len(self._handlers)

    def register_listener(self, listener: EventListener) -> None:
        """Append ``listener``; the same listener may be registered more than once."""
        if listener is None:
            raise InvalidArgumentError("Listener can not be None")

        if type(listener) is not self._listener_type:
            raise ListenerTypeMismatchError(
                f"Listener is a {type(listener).__qualname__} but this dispatcher "
                f"handles {self._listener_type.__qualname__}"
            )

        self._listeners.append(listener)

    def unregister_listener(self, listener: EventListener) -> None:
        """Remove the first registered listener equal to ``listener``, if any."""
        for index, registered in enumerate(self._listeners):
            if registered == listener:
                del self._listeners[index]
                return

    def dispatch(self, event: Event) -> DispatchReport:
        """Call every handler on every listener with ``event``.

        Listeners are visited in registration order. A handler that raises is
        logged and recorded in the report; the remaining handlers still run.
        """
        if event is None:
            raise InvalidArgumentError("Can not dispatch a None event")

        if type(event) is not self._event_type:
            raise EventTypeMismatchError(
                f"Dispatcher handles {self._event_type.__qualname__}, "
                f"not {type(event).__qualname__}"
            )

        invocations = 0
        failures: list[HandlerFailure] = []
        for listener in list(self._listeners):
            for handler in self._handlers:
                invocations += 1
                try:
                    handler(listener, event)
                except Exception as exc:
                    logger.log(
                        self._failure_log_level,
                        "Handler %s.%s failed for %s",
                        self._listener_type.__qualname__,
                        handler.__name__,
                        self._event_type.__qualname__,
                        exc_info=True,
                    )
                    failures.append(
                        HandlerFailure(
                            listener_type=self._listener_type.__qualname__,
                            handler=handler.__name__,
                            error_type=type(exc).__qualname__,
                            message=str(exc),
                        )
                    )

        return DispatchReport(
            event_type=self._event_type.__qualname__,
            invocations=invocations,
            failures=failures,
        )
