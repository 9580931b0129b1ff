"""Tests for the Event and EventListener base types."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from listenerbus.domain.events import Event, EventListener, is_event_type


class InvoicePaid(Event):
    invoice_id: str
    amount_cents: int


def test_events_are_immutable():
    """Assigning to a field of a constructed event fails."""
    event = InvoicePaid(invoice_id="inv-1", amount_cents=500)
    with pytest.raises(ValidationError):
        event.amount_cents = 0
    assert event.amount_cents == 500


def test_events_compare_by_value():
    assert InvoicePaid(invoice_id="inv-1", amount_cents=5) == InvoicePaid(
        invoice_id="inv-1", amount_cents=5
    )


def test_event_payload_is_validated():
    with pytest.raises(ValidationError):
        InvoicePaid(invoice_id="inv-1", amount_cents="lots")


def test_is_event_type():
    assert is_event_type(InvoicePaid) is True
    assert is_event_type(Event) is True
    assert is_event_type(EventListener) is False
    assert is_event_type(InvoicePaid(invoice_id="inv-1", amount_cents=1)) is False
    assert is_event_type(None) is False
