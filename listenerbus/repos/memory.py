"""In-memory storage for registered event types and their dispatchers."""

from __future__ import annotations

from listenerbus.domain.dispatcher import ListenerDispatcher


class DispatcherRepository:
    """Dict-backed store mapping event type -> listener type -> dispatcher.

    An event type is present from ``add_event_type`` until ``remove_event_type``.
    Only dispatchers with at least one handler are expected to be added.
    """

    def __init__(self) -> None:
        self._store: dict[type, dict[type, ListenerDispatcher]] = {}

    def add_event_type(self, event_type: type) -> bool:
        """Create an empty entry; returns False if one already existed."""
        if event_type in self._store:
            return False
        self._store[event_type] = {}
        return True

    def remove_event_type(self, event_type: type) -> bool:
        return self._store.pop(event_type, None) is not None

    def has_event_type(self, event_type: type) -> bool:
        return event_type in self._store

    def event_types(self) -> list[type]:
        return list(self._store)

    def get(self, event_type: type, listener_type: type) -> ListenerDispatcher | None:
        return self._store.get(event_type, {}).get(listener_type)

    def add(self, dispatcher: ListenerDispatcher) -> None:
        self._store[dispatcher.event_type][dispatcher.listener_type] = dispatcher

    def list_for_event(self, event_type: type) -> list[ListenerDispatcher]:
        return list(self._store.get(event_type, {}).values())

    def clear(self) -> None:
        self._store.clear()
