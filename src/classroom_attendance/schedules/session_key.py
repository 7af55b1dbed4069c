from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import date, datetime, time

from ..core.exceptions import NotFoundError

_DATE_PREFIX = re.compile(r"^(\d{4}-\d{2}-\d{2})-(.+)$")
_TIME_SUFFIX = re.compile(r"^(\d{1,2}:\d{2}(?::\d{2})?)$")


@dataclass(frozen=True)
class SessionKey:
    """Identifies one class meeting: the date, the room and the scheduled start.

    ``str(key)`` gives the compact ``YYYY-MM-DD-<room>-HH:MM`` form used by
    older clients. Parsing anchors the date at the front and the time after
    the last hyphen, so room numbers may contain hyphens themselves.
    """

    session_date: date
    room_number: str
    start_time: time

    def __str__(self) -> str:
        return f"{self.session_date.isoformat()}-{self.room_number}-{self.start_time.strftime('%H:%M')}"

    @classmethod
    def parse(cls, value: str) -> "SessionKey":
        raw = (value or "").strip()
        m = _DATE_PREFIX.match(raw)
        if not m:
            raise NotFoundError(f"Malformed session key: {value!r}")
        date_part, rest = m.groups()

        room_part, sep, time_part = rest.rpartition("-")
        if not sep or not room_part or not _TIME_SUFFIX.match(time_part):
            raise NotFoundError(f"Malformed session key: {value!r}")

        try:
            session_date = datetime.strptime(date_part, "%Y-%m-%d").date()
            fmt = "%H:%M:%S" if time_part.count(":") == 2 else "%H:%M"
            start_time = datetime.strptime(time_part, fmt).time()
        except ValueError:
            raise NotFoundError(f"Malformed session key: {value!r}")

        return cls(session_date=session_date, room_number=room_part, start_time=start_time)
