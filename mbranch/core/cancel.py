"""Cooperative cancellation for the maintenance workflow."""

from __future__ import annotations

import threading
from dataclasses import dataclass

__all__ = ["CancelToken", "Cancelled"]


@dataclass(frozen=True, slots=True)
class Cancelled:
    """Outcome of a step abandoned because the invocation was cancelled.

    This is neither success nor failure: the workflow stops and the caller
    decides how to report it.

    Attributes:
        step: The command or step that was running when cancellation hit.
    """

    step: str


class CancelToken:
    """Shared flag checked before and while each blocking step runs.

    Safe to cancel from another thread or a signal handler.
    """

    def __init__(self) -> None:
        self._event = threading.Event()

    def cancel(self) -> None:
        self._event.set()

    @property
    def is_cancelled(self) -> bool:
        return self._event.is_set()
