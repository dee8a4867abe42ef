"""
Update broadcast to bound dependencies that want a periodic tick.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class UpdateReceiver(Protocol):
    """A dependency receiving ``on_update`` once per external tick."""

    def on_update(self) -> None: ...


class UpdateBroadcaster:
    """
    Ordered list of update receivers.

    Receivers are kept in the order they were added and each object is held
    at most once. Exceptions raised by a receiver propagate to the caller of
    ``broadcast``; receivers after it are not called for that tick.
    """

    def __init__(self) -> None:
        self._receivers: list[UpdateReceiver] = []

    def add(self, candidate: object) -> bool:
        """Add an object if it is an update receiver not yet registered."""
        if isinstance(candidate, type) or not isinstance(candidate, UpdateReceiver):
            return False
        if any(receiver is candidate for receiver in self._receivers):
            return False
        self._receivers.append(candidate)
        return True

    def broadcast(self) -> None:
        for receiver in list(self._receivers):
            receiver.on_update()
