from datetime import datetime, timedelta, timezone as dt_tz

ONE_DAY = timedelta(days=1)


def utc_now():
    return datetime.now(dt_tz.utc)


def days_between(later, earlier):
    """Fractional days from ``earlier`` to ``later``."""
    return (later - earlier) / ONE_DAY
