"""The ``@event_handler`` marker and the predicate that recognises handlers."""

from __future__ import annotations

import inspect
import types
import typing
from typing import Any, Callable, TypeVar

from pydantic import BaseModel, ConfigDict

from listenerbus.domain.errors import InvalidArgumentError
from listenerbus.domain.events import Event, is_event_type

F = TypeVar("F", bound=Callable[..., Any])

MARKER_ATTRIBUTE = "__listenerbus_handler__"

_POSITIONAL = (
    inspect.Parameter.POSITIONAL_ONLY,
    inspect.Parameter.POSITIONAL_OR_KEYWORD,
)


class HandlerMarker(BaseModel):
    """Attached to a handler function; ``event_type`` is set when given explicitly."""

    model_config = ConfigDict(frozen=True)

    event_type: type[Event] | None = None


def event_handler(target: Any = None) -> Any:
    """Mark a listener method as an event handler.

    Used bare, the handled event type is read from the annotation of the
    method's single parameter::

        class AuditTrail(EventListener):
            @event_handler
            def on_order_placed(self, event: OrderPlaced) -> None:
                ...

    The event type may also be given explicitly, in which case it takes
    precedence over any annotation::

            @event_handler(OrderPlaced)
            def on_order_placed(self, event) -> None:
                ...

    Methods without the marker are ignored when listeners are registered.
    """
    if inspect.isfunction(target):
        return _mark(target, None)

    if target is not None and not is_event_type(target):
        raise InvalidArgumentError(
            f"event_handler expects an Event subclass, got {target!r}"
        )

    def decorator(func: F) -> F:
        return _mark(func, target)

    return decorator


def _mark(func: F, event_type: type[Event] | None) -> F:
    setattr(func, MARKER_ATTRIBUTE, HandlerMarker(event_type=event_type))
    return func


def get_marker(method: Callable[..., Any]) -> HandlerMarker | None:
    marker = getattr(method, MARKER_ATTRIBUTE, None)
    return marker if isinstance(marker, HandlerMarker) else None


def _event_parameter(method: Callable[..., Any]) -> inspect.Parameter | None:
    """Return the single event parameter, or None if the arity is wrong.

    Plain functions looked up on a class still carry ``self``; bound methods
    do not.
    """
    try:
        signature = inspect.signature(method)
    except (TypeError, ValueError):
        return None

    params = list(signature.parameters.values())
    if not inspect.ismethod(method):
        params = params[1:]
    if len(params) != 1 or params[0].kind not in _POSITIONAL:
        return None
    return params[0]


def _resolve_annotation(method: Callable[..., Any], param: inspect.Parameter) -> Any:
    """Evaluate the event parameter's annotation alone, ignoring the others."""
    annotation = param.annotation
    if annotation is inspect.Parameter.empty:
        return None
    if not isinstance(annotation, str):
        return annotation

    shim = types.SimpleNamespace(__annotations__={param.name: annotation})
    namespace = getattr(inspect.unwrap(method), "__globals__", {})
    try:
        return typing.get_type_hints(shim, globalns=namespace)[param.name]
    except Exception:
        # annotation strings are arbitrary expressions; any failure means unresolved
        return None


def declared_event_type(method: Callable[..., Any]) -> Any:
    """The event type a marked handler declares, or None if it declares none."""
    marker = get_marker(method)
    if marker is None:
        return None

    param = _event_parameter(method)
    if param is None:
        return None

    if marker.event_type is not None:
        return marker.event_type

    return _resolve_annotation(method, param)


def can_handle_event(method: Callable[..., Any], event_type: Any) -> bool:
    """True if ``method`` is marked and takes exactly one ``event_type`` argument.

    The match is exact: a handler declared for a base event class does not
    receive subclasses, and vice versa.
    """
    if event_type is None:
        return False
    return declared_event_type(method) is event_type
