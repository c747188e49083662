"""Cooperative cancellation shared by the batch and streaming searches."""

import asyncio


class CancellationToken:
    """Flag a caller sets to stop a running search.

    Searches check the token between steps; work already in flight is left
    to finish and its results are discarded. A child token also reports
    cancellation once its parent is cancelled.
    """

    def __init__(self, parent: "CancellationToken | None" = None) -> None:
        self._event = asyncio.Event()
        self._parent = parent

    def cancel(self) -> None:
        """Request cancellation. Idempotent."""
        self._event.set()

    def child(self) -> "CancellationToken":
        """Token that can be cancelled on its own without touching this one."""
        return CancellationToken(parent=self)

    @property
    def is_cancelled(self) -> bool:
        """Whether cancellation was requested here or on a parent."""
        if self._event.is_set():
            return True
        return self._parent is not None and self._parent.is_cancelled
