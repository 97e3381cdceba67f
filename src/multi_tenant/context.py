"""Per-event context propagation using contextvars."""

from collections.abc import Generator
from contextlib import contextmanager
from contextvars import ContextVar
from dataclasses import dataclass

from multi_tenant.models import EventKind


@dataclass(frozen=True)
class EventContext:
    """Identity of the event being handled, for log correlation."""

    event: EventKind
    client_id: str
    team: str | None = None


# Context variable for the event currently being handled
_current_event: ContextVar[EventContext | None] = ContextVar("current_event", default=None)


def get_current_event() -> EventContext | None:
    """
    Get the current event context.

    Returns:
        The current EventContext, or None outside an event call.
    """
    return _current_event.get()


def get_current_team() -> str | None:
    """
    Get the team of the client whose event is being handled.

    Returns:
        The team, or None if unset or the client has no team.
    """
    ctx = _current_event.get()
    return ctx.team if ctx else None


@contextmanager
def event_context(ctx: EventContext) -> Generator[EventContext, None, None]:
    """
    Context manager scoping an EventContext to one event call.

    Usage:
        with event_context(EventContext(EventKind.SUBSCRIBE, "c1", "acme")):
            ...

    Args:
        ctx: The context for this call.

    Yields:
        The event context.
    """
    token = _current_event.set(ctx)
    try:
        yield ctx
    finally:
        _current_event.reset(token)
