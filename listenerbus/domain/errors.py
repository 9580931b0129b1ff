"""Exceptions raised by the listener bus."""


class ListenerBusError(Exception):
    """Base exception for the listener bus."""


class InvalidArgumentError(ListenerBusError, ValueError):
    """Raised when a required argument is missing or of the wrong kind."""


class UnregisteredEventError(InvalidArgumentError):
    """Raised when dispatching an event whose type was never registered."""


class ListenerTypeMismatchError(InvalidArgumentError):
    """Raised when a dispatcher is given a listener of another class."""


class EventTypeMismatchError(InvalidArgumentError):
    """Raised when a dispatcher is given an event of another class."""
