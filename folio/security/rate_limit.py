#!/usr/bin/env python3
"""
rate_limit.py
-------------
Sliding-window attempt counting per client identifier.

A RateLimiter is an explicit instance: create one per process (or per
test) and pass it to whoever needs it. History is pruned lazily on each
check. The limiter is not thread-safe; a multi-threaded host must guard
it with its own lock.

Usage:
    limiter = RateLimiter(max_attempts=3, window_seconds=900)
    decision = limiter.check(ip_hash)
    if not decision.allowed:
        retry_after = decision.reset_at - time.time()
"""
# --- Annotations ---
from __future__ import annotations

# --- Standard library imports ---
import time
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional

# --- Local imports ---
from folio.configs import RATE_LIMIT


@dataclass(frozen=True)
class RateLimitDecision:
    """
    Outcome of one rate-limit check.

    Attributes:
        allowed: Whether the attempt was accepted (and recorded)
        remaining: Attempts left in the current window
        reset_at: Epoch seconds at which the window frees a slot
    """

    allowed: bool
    remaining: int
    reset_at: float


class RateLimiter:
    """In-memory sliding-window rate limiter."""

    def __init__(
        self,
        max_attempts: int = RATE_LIMIT.max_attempts,
        window_seconds: float = RATE_LIMIT.window_seconds,
        clock: Optional[Callable[[], float]] = None,
    ):
        """
        Initialize rate limiter.

        Args:
            max_attempts: Default attempts allowed per window
            window_seconds: Default window length
            clock: Returns the current epoch seconds (defaults to time.time)
        """
        self.max_attempts = max_attempts
        self.window_seconds = window_seconds
        self.clock = clock or time.time
        self._attempts: Dict[str, List[float]] = {}

    def _recent(self, identifier: str, window_seconds: float, now: float) -> List[float]:
        window_start = now - window_seconds
        recent = [t for t in self._attempts.get(identifier, []) if t > window_start]
        if recent:
            self._attempts[identifier] = recent
        else:
            self._attempts.pop(identifier, None)
        return recent

    def check(
        self,
        identifier: str,
        max_attempts: Optional[int] = None,
        window_seconds: Optional[float] = None,
    ) -> RateLimitDecision:
        """
        Count an attempt for `identifier` if the window allows it.

        A refused attempt is not recorded.

        Args:
            identifier: Client key (hashed IP, e-mail, ...)
            max_attempts: Override of the default allowance
            window_seconds: Override of the default window

        Returns:
            RateLimitDecision
        """
        limit = self.max_attempts if max_attempts is None else max_attempts
        window = self.window_seconds if window_seconds is None else window_seconds
        now = self.clock()
        recent = self._recent(identifier, window, now)

        used = len(recent)
        if used >= limit:
            reset_at = min(recent) + window if recent else now + window
            return RateLimitDecision(False, 0, reset_at)

        self._attempts[identifier] = [*recent, now]
        return RateLimitDecision(True, limit - used - 1, now + window)

    def attempt_count(self, identifier: str, window_seconds: Optional[float] = None) -> int:
        """Attempts recorded for `identifier` within the window."""
        window = self.window_seconds if window_seconds is None else window_seconds
        return len(self._recent(identifier, window, self.clock()))

    def clear(self, identifier: str) -> None:
        """Forget one identifier's history."""
        self._attempts.pop(identifier, None)

    def reset(self) -> None:
        """Forget every identifier."""
        self._attempts.clear()
