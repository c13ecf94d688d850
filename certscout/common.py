import datetime as dt
import hashlib


def sha256_hex(data: bytes) -> str:
    return hashlib.sha256(data).hexdigest()


def as_utc(d: dt.datetime) -> dt.datetime:
    # cryptography < 42 hands back naive datetimes that are implicitly UTC
    if d.tzinfo is None:
        return d.replace(tzinfo=dt.timezone.utc)
    return d.astimezone(dt.timezone.utc)


def utc_now() -> dt.datetime:
    return dt.datetime.now(dt.timezone.utc)


def iso_utc(d: dt.datetime) -> str:
    return as_utc(d).isoformat().replace("+00:00", "Z")


def whole_days(delta: dt.timedelta) -> int:
    """Days in ``delta``, computed from hours and truncated toward zero."""
    hours = delta.total_seconds() / 3600
    return int(hours / 24)


_MONTH_ABBR = ("Jan", "Feb", "Mar", "Apr", "May", "Jun", "Jul", "Aug", "Sep", "Oct", "Nov", "Dec")


def human_date(d: dt.datetime) -> str:
    """``Jan 2, 2006`` style, no zero padding on the day. Independent of ``LC_TIME``."""
    d = as_utc(d)
    return f"{_MONTH_ABBR[d.month - 1]} {d.day}, {d.year}"
