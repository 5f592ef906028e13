"""Reading event start times from iCalendar data."""

from __future__ import annotations

import re
from collections.abc import Iterator
from datetime import datetime, time

import requests

UNTIMED_EVENT_TIME = time(15, 30)
FETCH_TIMEOUT_SECONDS = 30.0

_DATE_TIME = re.compile(r"(\d{8}T\d{6})(Z?)")
_DATE = re.compile(r"\d{8}")


def parse_dtstart(value: str) -> datetime | None:
    """Parse a DTSTART value into a naive datetime, or None if it is not one.

    UTC values lose their zone; date-only values are anchored at 15:30.
    """
    value = value.strip()
    try:
        if match := _DATE_TIME.fullmatch(value):
            return datetime.strptime(match.group(1), "%Y%m%dT%H%M%S")
        if _DATE.fullmatch(value):
            day = datetime.strptime(value, "%Y%m%d").date()
            return datetime.combine(day, UNTIMED_EVENT_TIME)
    except ValueError:
        return None
    return None


def _unfold(text: str) -> Iterator[str]:
    current: str | None = None
    for raw in text.splitlines():
        if raw[:1] in (" ", "\t") and current is not None:
            current += raw[1:]
            continue
        if current is not None:
            yield current
        current = raw
    if current is not None:
        yield current


def _split(line: str) -> tuple[str, str]:
    in_quotes = False
    for pos, char in enumerate(line):
        if char == '"':
            in_quotes = not in_quotes
        elif char == ":" and not in_quotes:
            name = line[:pos].split(";", 1)[0].strip().upper()
            return name, line[pos + 1 :]
    raise ValueError(f"invalid content line: {line!r}")


def parse_event_starts(text: str) -> list[datetime]:
    """Return the start time of every event in the calendar text, in file order."""
    stack: list[str] = []
    starts: list[datetime] = []
    for line in _unfold(text):
        if not line.strip():
            continue
        name, value = _split(line)
        if name == "BEGIN":
            component = value.strip().upper()
            if not stack and component != "VCALENDAR":
                raise ValueError(f"expected VCALENDAR, found {component}")
            stack.append(component)
        elif name == "END":
            component = value.strip().upper()
            if not stack or stack[-1] != component:
                raise ValueError(f"unexpected END:{component}")
            stack.pop()
        elif not stack:
            raise ValueError(f"property {name} outside of a calendar")
        elif name == "DTSTART" and stack == ["VCALENDAR", "VEVENT"]:
            start = parse_dtstart(value)
            if start is not None:
                starts.append(start)
    if stack:
        raise ValueError(f"unterminated component {stack[-1]}")
    return starts


def fetch_calendar(link: str) -> list[datetime]:
    """Download a calendar and return its event start times."""
    response = requests.get(link, timeout=FETCH_TIMEOUT_SECONDS)
    return parse_event_starts(response.content.decode("utf-8", errors="replace"))