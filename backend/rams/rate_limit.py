"""Per-client request limiting for the AI-backed endpoints.

Counts are held in process memory, one fixed window per client key.
Expired windows are swept at most once per window length so the table
only holds clients seen recently. Limiting is off in development.
"""

import logging
import time
from dataclasses import dataclass

from rams.config import get_settings

logger = logging.getLogger(__name__)


@dataclass
class _Window:
    count: int
    reset_at: float


class RateLimiter:
    """Fixed-window limiter keyed by client address."""

    def __init__(self, max_requests: int, window_seconds: int) -> None:
        self.max_requests = max_requests
        self.window_seconds = window_seconds
        self._windows: dict[str, _Window] = {}
        self._next_sweep = 0.0

    def __len__(self) -> int:
        return len(self._windows)

    def check(self, key: str) -> bool:
        """Count a request for ``key``; False once its window is used up."""
        if get_settings().is_development:
            return True

        now = time.monotonic()
        if now >= self._next_sweep:
            self._sweep(now)

        window = self._windows.get(key)
        if window is None or now > window.reset_at:
            self._windows[key] = _Window(count=1, reset_at=now + self.window_seconds)
            return True
        if window.count >= self.max_requests:
            logger.info("Rate limit reached for %s", key)
            return False
        window.count += 1
        return True

    def _sweep(self, now: float) -> None:
        expired = [key for key, window in self._windows.items() if now > window.reset_at]
        for key in expired:
            del self._windows[key]
        self._next_sweep = now + self.window_seconds


# Shared instance for /validate-step
rate_limit_validate = RateLimiter(
    max_requests=get_settings().validate_rate_limit_per_hour,
    window_seconds=3600,
)
