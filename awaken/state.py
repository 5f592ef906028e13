"""Shared alarm state: known meetings, live alarms and silenced ones."""

from __future__ import annotations

import enum
import logging
import threading
from collections.abc import Iterable
from datetime import datetime, timedelta

log = logging.getLogger(__name__)

NEVER_SEEN = datetime(2020, 1, 1)


class Action(enum.Enum):
    """What a check decided to do about the next meeting."""

    NONE = "none"
    NOTIFY = "notify"
    ALARM = "alarm"


class AlarmState:
    """Thread-safe record of meeting times, active alarms and user activity.

    All times are naive datetimes in UTC.
    """

    def __init__(self) -> None:
        self._lock = threading.RLock()
        self.dates: list[datetime] = []
        self.active: list[datetime] = []
        self.silenced: list[datetime] = []
        self.last_seen: datetime | None = None

    def set_dates(self, dates: Iterable[datetime]) -> None:
        """Replace the known meeting start times."""
        with self._lock:
            self.dates = list(dates)

    def upcoming(self, now: datetime) -> list[datetime]:
        """Return the meetings starting at or after now, earliest first."""
        with self._lock:
            return sorted(date for date in self.dates if date >= now)

    def next_meeting(
        self, now: datetime, notify_before: timedelta, since_last_seen: timedelta
    ) -> tuple[Action, datetime | None]:
        """Decide what to do about the next meeting; return the action and its date."""
        with self._lock:
            upcoming = self.upcoming(now)
            if not upcoming:
                return Action.NONE, None
            first = upcoming[0]
            log.info("%d upcoming events. Next: %s, in %s", len(upcoming), first, first - now)
            if first - now < notify_before:
                return self.conditional_alarm(first, now, since_last_seen), first
            return Action.NONE, first

    def conditional_alarm(
        self, date: datetime, now: datetime, since_last_seen: timedelta
    ) -> Action:
        """Notify a recently seen user, otherwise raise an alarm, each once per meeting."""
        with self._lock:
            seen = self.last_seen if self.last_seen is not None else NEVER_SEEN
            if seen + since_last_seen >= now:
                if date not in self.silenced:
                    self.silenced.append(date)
                    return Action.NOTIFY
                return Action.NONE
            if date not in self.active and date not in self.silenced:
                self.active.append(date)
                return Action.ALARM
            return Action.NONE

    def remove_passed(self, now: datetime) -> None:
        """Forget active and silenced alarms for meetings that have started."""
        with self._lock:
            self.active = [date for date in self.active if date >= now]
            self.silenced = [date for date in self.silenced if date >= now]

    def record_activity(self, now: datetime) -> None:
        """Note the user was seen and silence every active alarm."""
        with self._lock:
            self.last_seen = now
            self.silenced.extend(self.active)
            self.active.clear()

    def expire(self, date: datetime) -> bool:
        """Drop an active alarm; return whether it was still active."""
        with self._lock:
            if date in self.active:
                self.active.remove(date)
                return True
            return False

    def alarm_active(self) -> bool:
        """Return whether any alarm should be sounding."""
        with self._lock:
            return bool(self.active)