"""
Carry the acting user through the call stack using contextvars.

PostgresClient reads this on every connection checkout and sets
app.current_user_id, which the invoicing tables' RLS policies filter on.
"""

from contextvars import ContextVar
from uuid import UUID
from contextlib import contextmanager

_current_user_id: ContextVar[UUID | None] = ContextVar("current_user_id", default=None)


def get_current_user_id() -> UUID:
    """
    Get current user ID from context.

    Raises RuntimeError if no user context is set. Reaching user-scoped
    data without one is a bug in the caller, not an empty result.
    """
    user_id = _current_user_id.get()
    if user_id is None:
        raise RuntimeError(
            "No user context set. Invoice data was read outside of an "
            "authenticated request or user_context() block."
        )
    return user_id


def set_current_user_id(user_id: UUID) -> None:
    """Set by UserContextMiddleware once the caller is resolved."""
    _current_user_id.set(user_id)


def clear_current_user_id() -> None:
    """Cleared in the middleware's finally block so context never leaks between requests."""
    _current_user_id.set(None)


@contextmanager
def user_context(user_id: UUID):
    """
    Temporarily act as a user outside a request.

    For tests and batch jobs such as nightly statement exports:

        with user_context(owner_id):
            results = invoice_service.summarize_many(invoice_ids)

    The previous user, if any, is restored on exit.
    """
    previous = _current_user_id.get()
    set_current_user_id(user_id)
    try:
        yield
    finally:
        if previous is None:
            clear_current_user_id()
        else:
            set_current_user_id(previous)
