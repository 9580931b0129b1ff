"""Base types for dispatchable events and the objects that receive them."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict


class Event(BaseModel):
    """Base class for every dispatchable event.

    Subclasses declare their payload as fields. Instances are frozen, so an
    event cannot change once it has been handed to the bus. Event types must
    be registered with the ``EventManager`` before they can be dispatched.
    """

    model_config = ConfigDict(frozen=True)


class EventListener:
    """Marker for classes whose ``@event_handler`` methods receive events."""


def is_event_type(candidate: object) -> bool:
    return isinstance(candidate, type) and issubclass(candidate, Event)
