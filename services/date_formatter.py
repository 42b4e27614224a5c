"""Date and time normalization helpers.

Forms and imports hand us dates in several textual shapes (``15.03.2024``,
``15/03/2024``, ``2024/03/15``, ISO date-times ...). Everything is normalised
to ``YYYY-MM-DD`` for storage and rendered back in Turkish conventions for
display. Unparseable input never raises: the formatters return ``""`` and
log the rejected value, so callers must read ``""`` as "could not parse".

Stored timestamps are naive UTC. Formatters that only need a calendar date
keep the date exactly as written, without timezone conversion.
"""

import re
from datetime import date, datetime, time, timedelta, timezone
from typing import Optional, Union

from core.logger import get_logger

logger = get_logger("services.date_formatter")

DateLike = Union[str, date, datetime, None]

_YEAR_FIRST = re.compile(r"^(\d{4})[./-](\d{2})[./-](\d{2})$")
_DAY_FIRST = re.compile(r"^(\d{2})[./-](\d{2})[./-](\d{4})$")
_DAY_FIRST_WITH_TIME = re.compile(r"^(\d{2})[./-](\d{2})[./-](\d{4})[ T](\d{1,2})[:.](\d{2})(?::(\d{2}))?$")
_TIME = re.compile(r"^(\d{1,2})[:.,-](\d{1,2})(?:[:.,-](\d{1,2}))?$")
_INPUT_TIME = re.compile(r"^\d{2}:\d{2}$")

TR_MONTHS = (
    "Ocak", "Şubat", "Mart", "Nisan", "Mayıs", "Haziran",
    "Temmuz", "Ağustos", "Eylül", "Ekim", "Kasım", "Aralık",
)

_DISPLAY_FORMATS = {
    "tr-TR": lambda d: f"{d.day:02d}.{d.month:02d}.{d.year}",
    "de-DE": lambda d: f"{d.day}.{d.month}.{d.year}",
    "en-GB": lambda d: f"{d.day:02d}/{d.month:02d}/{d.year}",
    "en-US": lambda d: f"{d.month}/{d.day}/{d.year}",
}

# (label, seconds) from the largest unit down; 1 month = 30 days, 1 year = 365.
_INTERVALS = (
    ("yıl", 31536000),
    ("ay", 2592000),
    ("hafta", 604800),
    ("gün", 86400),
    ("saat", 3600),
    ("dakika", 60),
)


def is_valid_date(year: int, month: int, day: int) -> bool:
    """Return True if year/month/day (month 1-12) is a real calendar date from 1900 on."""
    if year < 1900:
        return False
    try:
        date(year, month, day)
    except ValueError:
        return False
    return True


def _utcnow() -> datetime:
    return datetime.now(timezone.utc).replace(tzinfo=None)


def _parse_iso(text: str) -> Optional[datetime]:
    """ISO-8601 parse that also accepts a trailing ``Z``; tzinfo is preserved."""
    candidate = text[:-1] + "+00:00" if text[-1:] in ("Z", "z") else text
    try:
        return datetime.fromisoformat(candidate)
    except ValueError:
        return None


def _split_numeric_date(text: str):
    """Return (year, month, day) for the delimiter variants, or None."""
    match = _YEAR_FIRST.match(text)
    if match:
        year, month, day = (int(p) for p in match.groups())
        return year, month, day
    match = _DAY_FIRST.match(text)
    if match:
        day, month, year = (int(p) for p in match.groups())
        return year, month, day
    return None


def _to_date(value: DateLike) -> Optional[date]:
    """Calendar date of `value` as written, or None if it cannot be read."""
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value

    text = str(value).strip()
    if not text:
        return None

    parts = _split_numeric_date(text)
    if parts is not None:
        if not is_valid_date(*parts):
            logger.warning("Invalid calendar date: %s", text)
            return None
        return date(*parts)

    parsed = _parse_iso(text)
    if parsed is not None and parsed.year >= 1900:
        return parsed.date()

    logger.warning("Unrecognised date format: %s", text)
    return None


def _to_datetime(value: DateLike) -> Optional[datetime]:
    """Wall-clock datetime of `value` as written (tzinfo kept if present)."""
    if value is None:
        return None
    if isinstance(value, datetime):
        return value
    if isinstance(value, date):
        return datetime.combine(value, time())

    text = str(value).strip()
    if not text:
        return None

    match = _DAY_FIRST_WITH_TIME.match(text)
    if match:
        day, month, year, hour, minute, second = match.groups()
        try:
            return datetime(int(year), int(month), int(day), int(hour), int(minute), int(second or 0))
        except ValueError:
            logger.warning("Invalid date-time: %s", text)
            return None

    if _split_numeric_date(text) is not None:
        only_date = _to_date(text)
        return datetime.combine(only_date, time()) if only_date else None

    parsed = _parse_iso(text)
    if parsed is None:
        logger.warning("Unrecognised date-time format: %s", text)
    return parsed


def parse_datetime(value: DateLike) -> Optional[datetime]:
    """Parse `value` into a naive UTC datetime for storage, or None.

    Aware inputs are converted to UTC; naive inputs are taken as UTC.
    """
    parsed = _to_datetime(value)
    if parsed is None:
        return None
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(timezone.utc).replace(tzinfo=None)
    return parsed


def parse_date(value: DateLike) -> Optional[date]:
    """Parse `value` into a `date`, or None."""
    return _to_date(value)


def combine_date_and_time(date_value: DateLike, time_value: Optional[str]) -> Optional[datetime]:
    """Join a date and an ``HH:MM``-style time into one naive datetime."""
    day = _to_date(date_value)
    if day is None:
        return None
    if not time_value:
        return datetime.combine(day, time())
    hhmm = format_time(time_value)
    if not hhmm:
        return None
    hour, minute = (int(p) for p in hhmm.split(":"))
    return datetime.combine(day, time(hour, minute))


def format_date_for_input(value: DateLike) -> str:
    """Normalise any supported date representation to ``YYYY-MM-DD``.

    Returns:
        The canonical date string, or ``""`` for empty or unparseable input.
    """
    parsed = _to_date(value)
    return parsed.isoformat() if parsed else ""


def format_date_for_display(value: DateLike, locale: str = "tr-TR") -> str:
    """Render a date the way the given locale writes short dates.

    Unknown locales fall back to ``YYYY-MM-DD``.
    """
    parsed = _to_date(value)
    if parsed is None:
        return ""
    formatter = _DISPLAY_FORMATS.get(locale)
    if formatter is None:
        logger.debug("No display format for locale %s, using ISO", locale)
        return parsed.isoformat()
    return formatter(parsed)


def format_date(value: DateLike, now: Optional[datetime] = None) -> str:
    """Friendly date-time: ``Bugün, 14:30``, ``Yarın, 09:00`` or ``15 Mart 14:30``."""
    parsed = _to_datetime(value)
    if parsed is None:
        return ""
    now = now or datetime.now()
    clock = f"{parsed.hour:02d}:{parsed.minute:02d}"
    if parsed.date() == now.date():
        return f"Bugün, {clock}"
    if parsed.date() == (now + timedelta(days=1)).date():
        return f"Yarın, {clock}"
    return f"{parsed.day} {TR_MONTHS[parsed.month - 1]} {clock}"


def get_time_since(value: DateLike, now: Optional[datetime] = None) -> str:
    """Relative age such as ``5 dakika önce``.

    Naive values are taken as UTC, matching stored timestamps.
    """
    parsed = parse_datetime(value)
    if parsed is None:
        return ""
    now = now or _utcnow()
    if now.tzinfo is not None:
        now = now.astimezone(timezone.utc).replace(tzinfo=None)

    seconds = int((now - parsed).total_seconds())
    if seconds < 0:
        return "Gelecekte"
    if seconds < 60:
        return "Az önce"
    for label, span in _INTERVALS:
        count = seconds // span
        if count >= 1:
            return f"{count} {label} önce"
    return "Az önce"


def format_time(value: Union[str, datetime, time, None]) -> str:
    """Normalise ``HH:MM``, ``H.MM``, ``HH,MM`` or ``HH-MM`` (seconds optional) to ``HH:MM``."""
    if value is None or value == "":
        return ""
    if isinstance(value, (datetime, time)):
        return f"{value.hour:02d}:{value.minute:02d}"

    text = str(value).strip()
    match = _TIME.match(text)
    if match:
        hour, minute = int(match.group(1)), int(match.group(2))
        if not (0 <= hour <= 23 and 0 <= minute <= 59):
            logger.warning("Invalid time value: %s", text)
            return ""
        return f"{hour:02d}:{minute:02d}"

    parsed = _parse_iso(text)
    if parsed is not None:
        return f"{parsed.hour:02d}:{parsed.minute:02d}"

    logger.warning("Unrecognised time format: %s", text)
    return ""


def format_time_for_input(value: Union[str, datetime, None]) -> str:
    """Value for an ``<input type="time">``: strictly ``HH:MM``."""
    if not value:
        return ""
    if isinstance(value, datetime):
        return f"{value.hour:02d}:{value.minute:02d}"

    text = str(value).strip()
    if _INPUT_TIME.match(text):
        hours, minutes = (int(p) for p in text.split(":"))
        if 0 <= hours <= 23 and 0 <= minutes <= 59:
            return text
        return ""

    parsed = _parse_iso(text)
    if parsed is not None:
        return f"{parsed.hour:02d}:{parsed.minute:02d}"
    return ""


def format_date_time(value: DateLike) -> str:
    """Full Turkish date and time, e.g. ``15.03.2024 14:30:00``."""
    parsed = _to_datetime(value)
    if parsed is None:
        return ""
    return parsed.strftime("%d.%m.%Y %H:%M:%S")


def format_date_range(start: DateLike, end: DateLike) -> str:
    """``15.03.2024 - 30.03.2024``; empty if either end is unparseable."""
    first = format_date_for_display(start)
    last = format_date_for_display(end)
    if not first or not last:
        return ""
    return f"{first} - {last}"
