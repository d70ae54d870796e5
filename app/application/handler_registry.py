"""Handler Registry: event type -> business handler. Populated once at startup by the composition root."""

import logging
from dataclasses import dataclass
from typing import Awaitable, Callable, Dict, Iterable, List, Optional, Tuple, Union

from app.domain.models.event import SnapshotEvent, ThinEventReference

logger = logging.getLogger(__name__)

HandlerInput = Union[SnapshotEvent, ThinEventReference]


@dataclass(frozen=True)
class HandlerResult:
    """Explicit success/failure signal from a business handler."""

    success: bool
    detail: Optional[str] = None

    @classmethod
    def ok(cls, detail: Optional[str] = None) -> "HandlerResult":
        return cls(success=True, detail=detail)

    @classmethod
    def failed(cls, detail: str) -> "HandlerResult":
        return cls(success=False, detail=detail)


# Handlers may return None, which counts as success.
EventHandler = Callable[[HandlerInput], Awaitable[Optional[HandlerResult]]]


class _HandlerNotFound:
    """Sentinel returned by dispatch when no handler is registered for an event type."""

    _instance: Optional["_HandlerNotFound"] = None

    def __new__(cls) -> "_HandlerNotFound":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "HANDLER_NOT_FOUND"

    def __bool__(self) -> bool:
        return False


HANDLER_NOT_FOUND = _HandlerNotFound()

DispatchOutcome = Union[HandlerResult, _HandlerNotFound]


class HandlerRegistry:
    """
    Type-keyed table of handlers. Last registration for a type wins. The registry does not
    care whether a handler takes a snapshot or a thin reference; the processor decides.
    Handler exceptions propagate to the caller.
    """

    def __init__(self, name: str = "default") -> None:
        self._name = name
        self._handlers: Dict[str, EventHandler] = {}

    @property
    def name(self) -> str:
        return self._name

    def register(self, event_type: str, handler: EventHandler) -> None:
        if event_type in self._handlers:
            logger.warning(
                "handler_replaced",
                extra={"registry": self._name, "event_type": event_type},
            )
        self._handlers[event_type] = handler

    def get(self, event_type: str) -> Optional[EventHandler]:
        return self._handlers.get(event_type)

    async def dispatch(self, event_type: str, payload: HandlerInput) -> DispatchOutcome:
        """Invoke the handler for event_type. Returns HANDLER_NOT_FOUND (not an error) when none is registered."""
        handler = self._handlers.get(event_type)
        if handler is None:
            return HANDLER_NOT_FOUND
        result = await handler(payload)
        if result is None:
            return HandlerResult.ok()
        return result

    def list_registered_types(self) -> List[str]:
        return sorted(self._handlers)

    def __contains__(self, event_type: object) -> bool:
        return event_type in self._handlers

    def __len__(self) -> int:
        return len(self._handlers)


def build_registry(
    handlers: Iterable[Tuple[str, EventHandler]],
    name: str = "default",
) -> HandlerRegistry:
    """Build a registry from a static list of (event_type, handler) pairs."""
    registry = HandlerRegistry(name=name)
    for event_type, handler in handlers:
        registry.register(event_type, handler)
    logger.info(
        "handler_registry_built",
        extra={"registry": name, "event_types": registry.list_registered_types()},
    )
    return registry
