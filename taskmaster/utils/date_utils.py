"""
Centralized date/time utilities
All date/time operations should use functions from this module
"""

from datetime import datetime, timezone, timedelta
from typing import Optional
from taskmaster.config.constants import DUE_SOON_DAYS


def get_current_datetime() -> datetime:
    """
    Get current datetime in UTC
    
    Returns:
        Current timezone-aware datetime
    """
    return datetime.now(timezone.utc)


def ensure_aware(value: Optional[datetime]) -> Optional[datetime]:
    """
    Attach UTC to naive datetimes so they compare with stored ones
    
    Args:
        value: Datetime (naive or aware) or None
        
    Returns:
        Timezone-aware datetime or None
    """
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def is_overdue(due_date: Optional[datetime], status: str, now: Optional[datetime] = None) -> bool:
    """
    Check whether a task is overdue
    
    A task is overdue when it has a due date, is not done,
    and the due date is strictly before now.
    
    Args:
        due_date: Task due date (optional)
        status: Task status value
        now: Reference time (defaults to current time)
        
    Returns:
        True if overdue
    """
    if due_date is None or status == "done":
        return False
    now = now or get_current_datetime()
    return ensure_aware(due_date) < now


def is_due_soon(due_date: Optional[datetime], days: int = DUE_SOON_DAYS, now: Optional[datetime] = None) -> bool:
    """Check whether due_date falls after now and before now + days"""
    if due_date is None:
        return False
    now = now or get_current_datetime()
    due_date = ensure_aware(due_date)
    return now < due_date < now + timedelta(days=days)


def is_today(date: datetime, now: Optional[datetime] = None) -> bool:
    """
    Check whether date falls on the same calendar day as now
    
    Calendar days are taken in UTC, like every stored datetime, so the
    result does not depend on the local timezone of the machine.
    """
    now = now or get_current_datetime()
    return ensure_aware(date).astimezone(timezone.utc).date() == now.astimezone(timezone.utc).date()
