import math
from datetime import datetime, timezone
from typing import Optional


def utcnow():
    return datetime.now(timezone.utc)


def parse_timestamp(value) -> Optional[datetime]:
    """Parse an ISO-8601 date or datetime from the store into an aware UTC datetime"""
    if not value:
        return None
    if isinstance(value, datetime):
        parsed = value
    else:
        text = str(value).strip()
        if text.endswith('Z'):
            text = text[:-1] + '+00:00'
        try:
            parsed = datetime.fromisoformat(text)
        except ValueError:
            return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


def round_half_up(value) -> int:
    return int(math.floor(value + 0.5))


def format_relative_time(value, now=None) -> str:
    """'5m ago' style label; future values read as 'just now'"""
    moment = parse_timestamp(value)
    if moment is None:
        return ""

    now = now or utcnow()
    diff = (now - moment).total_seconds()
    if diff < 0:
        return "just now"

    seconds = int(diff)
    if seconds < 60:
        return f"{seconds}s ago"
    minutes = seconds // 60
    if minutes < 60:
        return f"{minutes}m ago"
    hours = minutes // 60
    if hours < 24:
        return f"{hours}h ago"
    days = hours // 24
    if days < 7:
        return f"{days}d ago"
    weeks = days // 7
    if weeks < 4:
        return f"{weeks}w ago"
    months = days // 30
    if months < 12:
        return f"{months}mo ago"
    return f"{days // 365}y ago"


def format_relative_future(value, now=None) -> str:
    """'in 5m' style label for upcoming runs; anything due or past due is 'now'"""
    moment = parse_timestamp(value)
    if moment is None:
        return ""

    now = now or utcnow()
    diff = (moment - now).total_seconds()
    if diff <= 0:
        return "now"

    seconds = int(diff)
    if seconds < 60:
        return f"in {seconds}s"
    minutes = seconds // 60
    if minutes < 60:
        return f"in {minutes}m"
    hours = minutes // 60
    if hours < 24:
        return f"in {hours}h"
    days = hours // 24
    if days < 7:
        return f"in {days}d"
    weeks = days // 7
    if weeks < 5:
        return f"in {weeks}w"
    months = days // 30
    if months < 12:
        return f"in {months}mo"
    return f"in {days // 365}y"


def _format(value, pattern, keep_raw):
    moment = parse_timestamp(value)
    if moment is None:
        return (value or "") if keep_raw else ""
    return pattern(moment)


def format_long_date(value) -> str:
    """Sat, Oct 17, 2026 (raw value if it doesn't parse)"""
    return _format(value, lambda d: f"{d.strftime('%a, %b')} {d.day:02d}, {d.year}", keep_raw=True)


def format_short_date(value) -> str:
    """Oct 17 (raw value if it doesn't parse)"""
    return _format(value, lambda d: f"{d.strftime('%b')} {d.day}", keep_raw=True)


def format_date(value, keep_raw=False) -> str:
    """Oct 17, 2026"""
    return _format(value, lambda d: f"{d.strftime('%b')} {d.day}, {d.year}", keep_raw=keep_raw)


def normalize_date_input(value) -> str:
    """Cut a stored date or timestamp down to what an <input type=date> accepts"""
    if not value:
        return ""
    value = str(value)
    return value[:10] if len(value) >= 10 else value
