from datetime import date, datetime, timezone


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def day_key(day: date) -> str:
    """ISO date, used in per-day cache keys."""
    return day.isoformat()


def day_seed(day: date) -> int:
    """YYYYMMDD as an integer, e.g. 2026-10-18 -> 20261018."""
    return day.year * 10000 + day.month * 100 + day.day
