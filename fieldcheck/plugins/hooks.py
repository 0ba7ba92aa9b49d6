"""
fieldcheck Hooks
================

Synchronous event hooks used to publish verdicts to the host.

Validation runs to completion inside a single host event, so handlers are
plain callables executed in priority order.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, List, Optional

from fieldcheck.utils.logger import get_logger

logger = get_logger("fieldcheck")

HookCallback = Callable[..., Any]


class HookPriority(Enum):
    """Hook execution priority (lower runs first)."""

    HIGHEST = 0
    HIGH = 25
    NORMAL = 50
    LOW = 75
    LOWEST = 100


@dataclass
class HookHandler:
    """
    Registered hook handler.

    Attributes:
        callback: Handler function
        priority: Execution priority
        once: Execute only once
        filter: Predicate receiving the trigger arguments
    """

    callback: HookCallback
    priority: int = HookPriority.NORMAL.value
    once: bool = False
    filter: Optional[Callable[..., bool]] = None
    _executed: bool = field(default=False, repr=False)

    def execute(self, *args: Any, **kwargs: Any) -> Any:
        if self.once and self._executed:
            return None

        if self.filter is not None and not self.filter(*args, **kwargs):
            return None

        self._executed = True
        return self.callback(*args, **kwargs)


class Hook:
    """
    Named hook.

    Example:
        on_invalidation = Hook("invalidation")

        @on_invalidation.handler()
        def report(fields, reason):
            print(reason, [f.name for f in fields])

        on_invalidation.trigger(failing, "email")
    """

    def __init__(self, name: str, description: str = ""):
        self.name = name
        self.description = description
        self._handlers: List[HookHandler] = []

    def add(
        self,
        callback: HookCallback,
        priority: int = HookPriority.NORMAL.value,
        once: bool = False,
        filter: Optional[Callable[..., bool]] = None,
    ) -> "Hook":
        """
        Add a handler.

        Handlers with equal priority run in registration order.

        Returns:
            Self for chaining
        """
        self._handlers.append(
            HookHandler(callback=callback, priority=priority, once=once, filter=filter)
        )
        self._handlers.sort(key=lambda h: h.priority)
        return self

    def handler(
        self,
        priority: int = HookPriority.NORMAL.value,
        once: bool = False,
    ) -> Callable[[HookCallback], HookCallback]:
        """Decorator form of ``add``."""
        def decorator(func: HookCallback) -> HookCallback:
            self.add(func, priority, once)
            return func
        return decorator

    def remove(self, callback: HookCallback) -> bool:
        for handler in self._handlers:
            if handler.callback == callback:
                self._handlers.remove(handler)
                return True
        return False

    def clear(self) -> None:
        self._handlers.clear()

    def trigger(self, *args: Any, **kwargs: Any) -> List[Any]:
        """
        Run every handler.

        A failing handler does not stop the others: its exception is logged
        and placed in the returned list in place of a result.

        Returns:
            Handler return values (or exceptions), in execution order
        """
        results: List[Any] = []

        for handler in list(self._handlers):
            try:
                results.append(handler.execute(*args, **kwargs))
            except Exception as e:
                logger.error("Hook handler failed", exception=e, hook=self.name)
                results.append(e)

        self._handlers = [h for h in self._handlers if not (h.once and h._executed)]

        return results

    def __len__(self) -> int:
        return len(self._handlers)

    def __bool__(self) -> bool:
        return True

    def __repr__(self) -> str:
        return f"<Hook {self.name!r} handlers={len(self._handlers)}>"
