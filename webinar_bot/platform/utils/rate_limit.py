from threading import Lock
from time import time
from typing import Dict, List

from fastapi import HTTPException, Request, status

from webinar_bot.platform.config import Settings


class SlidingWindowLimiter:
    def __init__(self, max_requests: int, window_seconds: int):
        self.max_requests = max_requests
        self.window_seconds = window_seconds
        self._requests: Dict[str, List[float]] = {}
        self._lock = Lock()

    def hit(self, key: str) -> None:
        now = time()
        with self._lock:
            cutoff = now - self.window_seconds
            timestamps = [ts for ts in self._requests.get(key, []) if ts > cutoff]
            if len(timestamps) >= self.max_requests:
                raise HTTPException(
                    status_code=status.HTTP_429_TOO_MANY_REQUESTS,
                    detail="Too many requests. Please slow down.",
                )
            timestamps.append(now)
            self._requests[key] = timestamps

    def reset(self) -> None:
        with self._lock:
            self._requests.clear()


def build_registration_limiter(settings: Settings) -> SlidingWindowLimiter:
    return SlidingWindowLimiter(
        max_requests=settings.REGISTRATION_RATE_LIMIT,
        window_seconds=settings.RATE_LIMIT_WINDOW_SECONDS,
    )


def limit_registrations(request: Request) -> None:
    client_ip = request.client.host if request.client else "testclient"
    request.app.state.registration_limiter.hit(f"register:{client_ip}")
