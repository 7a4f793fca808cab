"""
Delayed reveal of scripted items.

A RevealTimeline schedules one independent timer per item on the running
event loop. Timers fire in the order of their delays, each one marks its
item as revealed and bumps the completed counter. Nothing un-reveals an
item; the only way to stop pending timers is cancel(), which the owner
calls on teardown.
"""

import asyncio
from dataclasses import dataclass
from typing import Callable, Generic, List, Optional, Sequence, TypeVar

T = TypeVar("T")


@dataclass(frozen=True)
class Scheduled(Generic[T]):
    item: T
    delay_ms: int


class RevealTimeline(Generic[T]):
    def __init__(
        self,
        entries: Sequence[Scheduled[T]],
        delay_scale: float = 1.0,
        on_reveal: Optional[Callable[[int, T], None]] = None,
    ):
        self.entries = list(entries)
        self.delay_scale = delay_scale
        self.on_reveal = on_reveal
        self._order: List[int] = []
        self._handles: List[asyncio.TimerHandle] = []
        self._done = asyncio.Event()
        self._started = False
        self._cancelled = False

    @property
    def total(self) -> int:
        return len(self.entries)

    @property
    def completed(self) -> int:
        return len(self._order)

    @property
    def is_complete(self) -> bool:
        return self.completed >= self.total

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    def start(self) -> None:
        if self._started:
            return
        self._started = True

        if not self.entries:
            self._done.set()
            return

        loop = asyncio.get_running_loop()
        for index, entry in enumerate(self.entries):
            delay = max(entry.delay_ms, 0) * self.delay_scale / 1000
            self._handles.append(loop.call_later(delay, self._fire, index))

    def cancel(self) -> None:
        self._cancelled = True
        for handle in self._handles:
            handle.cancel()
        self._handles.clear()

    def revealed(self) -> List[T]:
        """Items revealed so far, in the order they fired."""
        return [self.entries[i].item for i in self._order]

    async def wait(self) -> None:
        await self._done.wait()

    def _fire(self, index: int) -> None:
        if self._cancelled or index in self._order:
            return

        item = self.entries[index].item
        self._order.append(index)

        if self.on_reveal is not None:
            self.on_reveal(index, item)

        if self.is_complete:
            self._done.set()
