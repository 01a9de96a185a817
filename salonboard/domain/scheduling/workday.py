"""Work-day boundary - which business day a wall-clock moment belongs to"""

from datetime import date, datetime, timedelta

DEFAULT_CUTOFF_HOUR = 2


def work_day_of(now: datetime, cutoff_hour: int = DEFAULT_CUTOFF_HOUR) -> date:
    """Times strictly before the cutoff hour still belong to the previous calendar day"""
    if not 0 <= cutoff_hour <= 23:
        raise ValueError(f"cutoff_hour must be within 0-23, got {cutoff_hour}")
    if now.hour < cutoff_hour:
        return now.date() - timedelta(days=1)
    return now.date()


def is_viewing_today(selected: date, now: datetime, cutoff_hour: int = DEFAULT_CUTOFF_HOUR) -> bool:
    return work_day_of(now, cutoff_hour) == selected
