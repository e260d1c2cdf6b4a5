"""
The contents of this file are property of Doorman Dev, LLC
Review the Apache License 2.0 for valid authorization of use
See https://github.com/apidoorman/doorman for more information
"""

from contextvars import ContextVar

correlation_id: ContextVar[str | None] = ContextVar('correlation_id', default=None)


def get_correlation_id() -> str | None:
    """
    Get the current correlation ID from context.
    """
    return correlation_id.get()


def set_correlation_id(value: str) -> None:
    """
    Set the correlation ID in the current context.
    """
    correlation_id.set(value)
