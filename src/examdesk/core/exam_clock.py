"""Exam clock.

Server-side view of the countdown the client shows while a student takes
a test. Nothing is scheduled: callers ask the clock about a given instant.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone

# Client switches the timer to its warning style below this many seconds
WARNING_THRESHOLD_SECONDS = 300


def parse_timestamp(value: str) -> datetime:
    """Parse an ISO 8601 timestamp, assuming UTC when no offset is given."""
    parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class ExamClock:
    """Countdown for one attempt."""

    started_at: datetime
    duration_minutes: int

    @classmethod
    def for_attempt(cls, started_at: str, duration_minutes: int) -> ExamClock:
        return cls(started_at=parse_timestamp(started_at), duration_minutes=duration_minutes)

    @property
    def deadline(self) -> datetime:
        return self.started_at + timedelta(minutes=self.duration_minutes)

    def remaining_seconds(self, now: datetime | None = None) -> int:
        """Whole seconds left, never negative."""
        now = now or utc_now()
        remaining = (self.deadline - now).total_seconds()
        return max(0, int(remaining))

    def is_expired(self, now: datetime | None = None, grace_seconds: int = 0) -> bool:
        now = now or utc_now()
        return now > self.deadline + timedelta(seconds=grace_seconds)

    def is_warning(self, now: datetime | None = None) -> bool:
        remaining = self.remaining_seconds(now)
        return 0 < remaining <= WARNING_THRESHOLD_SECONDS

    def format_remaining(self, now: datetime | None = None) -> str:
        """Remaining time as MM:SS (minutes may exceed 59)."""
        minutes, seconds = divmod(self.remaining_seconds(now), 60)
        return f"{minutes:02d}:{seconds:02d}"
