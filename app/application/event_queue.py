"""Queue protocol: durable FIFO of event ids plus a dead-letter list, one pair per category."""

from typing import Optional, Protocol


class EventQueue(Protocol):
    """
    Messages are bare event ids; the queue holds no business data. Implementations raise
    QueueUnavailableError when the backend cannot be reached.
    """

    async def push(self, event_id: str) -> None:
        """Append event_id to the tail of the main queue."""
        ...

    async def pop(self, timeout: int = 0) -> Optional[str]:
        """Block until an id is available at the head. timeout 0 waits indefinitely; None on timeout."""
        ...

    async def push_dead_letter(self, event_id: str) -> None:
        """Append event_id to the dead-letter list."""
        ...

    async def depth(self) -> int:
        ...

    async def dead_letter_depth(self) -> int:
        ...

    async def ping(self) -> None:
        """Round-trip to the backend; raises QueueUnavailableError when it is unreachable."""
        ...
