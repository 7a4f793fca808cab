import threading
import time
from typing import Callable, Optional


class UserIdGenerator:
    """
    Builds `user_<milliseconds>` identifiers from a clock that never goes
    backwards and never repeats, so two registrations in the same
    millisecond still get distinct ids.
    """

    def __init__(self, clock: Optional[Callable[[], float]] = None, prefix: str = "user_"):
        self._clock = clock or time.time
        self._prefix = prefix
        self._last = 0
        self._lock = threading.Lock()

    def next_millis(self) -> int:
        with self._lock:
            now = int(self._clock() * 1000)
            self._last = max(now, self._last + 1)
            return self._last

    def __call__(self) -> str:
        return f"{self._prefix}{self.next_millis()}"


generate_user_id = UserIdGenerator()
