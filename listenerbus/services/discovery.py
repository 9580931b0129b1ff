"""Service for finding the handler methods a listener class declares."""

from __future__ import annotations

import inspect
from typing import Any, Callable

from listenerbus.domain.handlers import can_handle_event


def find_event_handlers(
    event_type: type, listener_type: type
) -> tuple[Callable[..., Any], ...]:
    """Return every function on ``listener_type`` that handles ``event_type``.

    Inherited methods are included. The result is ordered by method name; a
    function bound to several names in the class body appears once, under
    its first name.
    """
    handlers: list[Callable[..., Any]] = []
    for _, member in inspect.getmembers(listener_type, inspect.isfunction):
        if member in handlers:
            continue
        if can_handle_event(member, event_type):
            handlers.append(member)
    return tuple(handlers)
