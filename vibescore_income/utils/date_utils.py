"""Date decoding and elapsed-time utilities"""

import re
from datetime import date, datetime, timezone
from typing import Any, Optional

DAYS_PER_MONTH = 30.4375
EPOCH_MS_THRESHOLD = 1e12
EPOCH_S_THRESHOLD = 1e9

_YEAR_MONTH = re.compile(r"^(\d{4})-(\d{1,2})$")
_YEAR_MONTH_DAY = re.compile(r"^(\d{4})-(\d{1,2})-(\d{1,2})$")


def _from_parts(year: Any, month: Any, day: Any) -> Optional[date]:
    try:
        return date(int(year), int(month), int(day))
    except (TypeError, ValueError, OverflowError):
        return None


def _from_epoch(seconds: float) -> Optional[date]:
    try:
        return datetime.fromtimestamp(seconds, tz=timezone.utc).date()
    except (OverflowError, OSError, ValueError):
        return None


def decode_date(value: Any) -> Optional[date]:
    """
    Decode a date from any supported representation.

    Supported shapes, checked in order:
    - date / datetime instances
    - ISO 8601 strings, then loose YYYY-M-D and YYYY-MM strings
    - epoch milliseconds (> 1e12) and epoch seconds (> 1e9)
    - objects exposing a callable ``to_date()``/``toDate()`` (Firestore-style timestamps)
    - mappings with ``seconds`` (+ optional ``nanoseconds``/``nanos``)
    - mappings with ``year``, ``month`` and ``day``

    Returns None for anything else instead of raising.
    """
    if value is None or isinstance(value, bool):
        return None

    if isinstance(value, datetime):
        return value.date()

    if isinstance(value, date):
        return value

    if isinstance(value, str):
        text = value.strip()
        if not text:
            return None
        try:
            return datetime.fromisoformat(text.replace("Z", "+00:00")).date()
        except ValueError:
            pass
        match = _YEAR_MONTH_DAY.match(text)
        if match:
            return _from_parts(*match.groups())
        match = _YEAR_MONTH.match(text)
        if match:
            return _from_parts(match.group(1), match.group(2), 1)
        return None

    if isinstance(value, (int, float)):
        if value != value or value in (float("inf"), float("-inf")):
            return None
        if value > EPOCH_MS_THRESHOLD:
            return _from_epoch(value / 1000)
        if value > EPOCH_S_THRESHOLD:
            return _from_epoch(value)
        return None

    for attr in ("to_date", "toDate"):
        converter = getattr(value, attr, None)
        if callable(converter):
            try:
                converted = converter()
            except Exception:
                return None
            return decode_date(converted) if isinstance(converted, (date, datetime)) else None

    if isinstance(value, dict):
        if "seconds" in value:
            try:
                seconds = float(value["seconds"])
                nanos = float(value.get("nanoseconds", value.get("nanos", 0)) or 0)
            except (TypeError, ValueError):
                seconds = None
            if seconds is not None and seconds == seconds:
                return _from_epoch(seconds + nanos / 1e9)
        if all(key in value for key in ("year", "month", "day")):
            return _from_parts(value["year"], value["month"], value["day"])

    return None


def month_anchor(value: Any) -> Optional[date]:
    """Calendar-month anchor (first day of the month) for any decodable value"""
    decoded = decode_date(value)
    if decoded is None:
        return None
    return decoded.replace(day=1)


def months_since(start: date, today: Optional[date] = None) -> float:
    """Elapsed months between start and today using an average month length"""
    today = today or date.today()
    return max(0.0, (today - start).days / DAYS_PER_MONTH)
