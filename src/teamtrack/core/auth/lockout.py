"""Brute-force lockout guard.

Failed attempts are counted per key (``login:<email>``, ``reset:<token>``,
``reset-ip:<ip>``). Once a key reaches the attempt limit it is locked for
the configured window; the counter restarts from zero afterwards.
Entries with no failure or lock inside the last window are dropped on
the next recorded failure, so one-off keys do not accumulate.

The table is shared by every request in the process, so all reads and
writes happen under a single lock. Construct one guard at startup and
inject it wherever a flow needs it.
"""

from __future__ import annotations

import threading
from dataclasses import dataclass
from datetime import datetime, timedelta

import structlog

from teamtrack.core.auth.config import LockoutConfig
from teamtrack.core.interfaces import Clock, system_clock

logger = structlog.get_logger()


def login_key(email: str) -> str:
    """Lockout key for password login by email."""
    return f"login:{email.strip().lower()}"


def reset_key(token: str | None, client_ip: str | None) -> str:
    """Lockout key for a password reset attempt.

    Keyed by the token when one is presented, otherwise by client IP.
    """
    if token:
        return f"reset:{token}"
    return f"reset-ip:{client_ip or 'unknown'}"


@dataclass
class LockoutEntry:
    """Failure state for one key."""

    key: str
    failure_count: int = 0
    locked_until: datetime | None = None
    last_failure_at: datetime | None = None

    def is_locked_at(self, now: datetime) -> bool:
        """Whether the lockout window is still running at ``now``."""
        return self.locked_until is not None and self.locked_until > now

    def is_stale_at(self, now: datetime, window: timedelta) -> bool:
        """Whether the entry no longer affects any decision at ``now``."""
        if self.is_locked_at(now):
            return False
        return self.last_failure_at is None or self.last_failure_at + window <= now


class LockoutGuard:
    """Tracks failed attempts and locks keys after too many.

    Usage:
        guard = LockoutGuard(LockoutConfig())
        if guard.is_locked(key):
            raise AccountLockedError(key)
        ...
        guard.register_failure(key)  # on failure
        guard.clear(key)             # on success
    """

    def __init__(self, config: LockoutConfig | None = None, clock: Clock = system_clock) -> None:
        """Initialize the guard.

        Args:
            config: Attempt limit and lockout window. Uses defaults if not provided.
            clock: Time source for lockout windows.
        """
        self.config = config or LockoutConfig()
        self._clock = clock
        self._entries: dict[str, LockoutEntry] = {}
        self._lock = threading.Lock()

    def is_locked(self, key: str) -> bool:
        """Check whether a key is currently locked.

        Entries whose window has passed count as unlocked without any cleanup.
        """
        with self._lock:
            entry = self._entries.get(key)
            return entry is not None and entry.is_locked_at(self._clock())

    def register_failure(self, key: str) -> None:
        """Record a failed attempt for a key.

        Does nothing while the key is locked, so blocked attempts cannot
        extend an active lockout. Reaching the attempt limit starts the
        lockout window and resets the counter.
        """
        with self._lock:
            now = self._clock()
            self._prune(now)
            entry = self._entries.get(key)
            if entry is None:
                entry = LockoutEntry(key=key)
                self._entries[key] = entry

            if entry.is_locked_at(now):
                return

            entry.failure_count += 1
            entry.last_failure_at = now
            if entry.failure_count >= self.config.max_attempts:
                entry.locked_until = now + self.config.window
                entry.failure_count = 0
                # Keys may embed a reset token; only the scope is logged
                logger.warning(
                    "lockout_triggered",
                    scope=key.split(":", 1)[0],
                    locked_until=entry.locked_until.isoformat(),
                )

    def clear(self, key: str) -> None:
        """Forget all failures for a key (after a successful attempt)."""
        with self._lock:
            self._entries.pop(key, None)

    def get_entry(self, key: str) -> LockoutEntry | None:
        """Get a copy of the entry for a key, if any."""
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None
            return LockoutEntry(
                key=entry.key,
                failure_count=entry.failure_count,
                locked_until=entry.locked_until,
                last_failure_at=entry.last_failure_at,
            )

    def reset(self) -> None:
        """Drop every entry."""
        with self._lock:
            self._entries.clear()

    def _prune(self, now: datetime) -> None:
        stale = [key for key, entry in self._entries.items() if entry.is_stale_at(now, self.config.window)]
        for key in stale:
            del self._entries[key]
