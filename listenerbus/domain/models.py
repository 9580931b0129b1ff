"""Result models returned from dispatch calls."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class HandlerFailure(BaseModel):
    """One handler invocation that raised during dispatch."""

    model_config = ConfigDict(frozen=True)

    listener_type: str
    handler: str
    error_type: str
    message: str


class DispatchReport(BaseModel):
    model_config = ConfigDict(frozen=True)

    event_type: str
    invocations: int = 0
    failures: list[HandlerFailure] = Field(default_factory=list)

    @property
    def succeeded(self) -> int:
        return self.invocations - len(self.failures)

    def merge(self, other: DispatchReport) -> DispatchReport:
        """Combine two reports for the same event type."""
        return DispatchReport(
            event_type=self.event_type,
            invocations=self.invocations + other.invocations,
            failures=[*self.failures, *other.failures],
        )
