from datetime import datetime, timezone, tzinfo
from typing import Optional


def now_iso() -> str:
    # Same shape a browser's Date.toISOString() produces: millisecond precision, Z suffix
    now = datetime.now(timezone.utc)
    return now.isoformat(timespec='milliseconds').replace('+00:00', 'Z')


def parse_iso(value: str) -> datetime:
    s = (value or '').strip()
    if s.endswith('Z') or s.endswith('z'):
        s = s[:-1] + '+00:00'
    dt = datetime.fromisoformat(s)
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt


def format_date(value: str, tz: Optional[tzinfo] = None) -> str:
    """Render a stored timestamp for display, e.g. "October 19, 2026 at 3:05 PM".

    Converts to `tz` when given, otherwise to the machine's local timezone.
    """
    dt = parse_iso(value).astimezone(tz)
    hour = dt.hour % 12 or 12
    meridiem = 'AM' if dt.hour < 12 else 'PM'
    return f'{dt:%B} {dt.day}, {dt.year} at {hour}:{dt:%M} {meridiem}'
