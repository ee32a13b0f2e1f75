"""Cancellation token for toggle calls.

Provides CancellationContext, a thread-safe flag shared between the caller
(e.g. the CLI SIGINT handler) and running toggle calls.

Safe Checkpoints (cancel honored here):
1. Entry of every diagnostic extraction - no build is started
2. Between files in the CLI

Unsafe Points (cancel NOT honored):
1. During the go build subprocess - it runs to completion once started
2. During line rewriting - would leave a half-edited buffer
"""

import logging
import threading

__all__ = [
    "CancellationContext",
]

logger = logging.getLogger(__name__)


class CancellationContext:
    """Thread-safe cancellation token.

    Uses threading.Event so that the token can be signaled from a signal
    handler or another thread while a toggle call runs.

    Usage:
        ctx = CancellationContext()

        # In worker:
        if ctx.is_cancelled:
            return []

        # From anywhere:
        ctx.request_cancel()

    Attributes:
        is_cancelled: Property that returns True if cancellation was requested.

    """

    def __init__(self) -> None:
        """Initialize CancellationContext with an unset event."""
        self._cancel_event = threading.Event()

    @property
    def is_cancelled(self) -> bool:
        """Check if cancellation was requested. Thread-safe.

        Returns:
            True if request_cancel() was called, False otherwise.

        """
        return self._cancel_event.is_set()

    def request_cancel(self) -> None:
        """Request cancellation. Thread-safe, idempotent."""
        logger.info("Cancellation requested")
        self._cancel_event.set()
