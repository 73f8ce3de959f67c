"""
Date parsing utilities for converting user date input to datetimes
"""

from datetime import datetime, timedelta, timezone
from typing import Optional
from taskmaster.utils.date_utils import get_current_datetime, ensure_aware


RELATIVE_DAYS = {
    "today": 0,
    "tomorrow": 1,
    "day after tomorrow": 2,
    "yesterday": -1,
}

TIME_FORMATS = [
    "%Y-%m-%d %H:%M:%S",  # 2025-11-08 10:00:00
    "%Y-%m-%d %H:%M",     # 2025-11-08 10:00
    "%d.%m.%Y %H:%M:%S",  # 08.11.2025 10:00:00
    "%d.%m.%Y %H:%M",     # 08.11.2025 10:00
]

DATE_FORMATS = [
    "%Y-%m-%d",
    "%d.%m.%Y",
    "%Y/%m/%d",
]


def parse_date(date_str: str) -> Optional[datetime]:
    """
    Parse user date input to a timezone-aware datetime
    
    Naive input is interpreted as UTC. Date-only input resolves to midnight.
    
    Args:
        date_str: Date string (e.g., "tomorrow", "2024-11-05", "2024-11-05T10:00:00+03:00", "08.11.2025 10:00")
        
    Returns:
        Timezone-aware datetime or None if the input cannot be parsed
    """
    if not date_str:
        return None
    
    original_date_str = date_str.strip()
    date_str_lower = original_date_str.lower()
    
    # Relative dates resolve to midnight UTC
    if date_str_lower in RELATIVE_DAYS:
        today = get_current_datetime().replace(hour=0, minute=0, second=0, microsecond=0)
        return today + timedelta(days=RELATIVE_DAYS[date_str_lower])
    
    # ISO format (with or without timezone)
    if "T" in original_date_str or "t" in original_date_str:
        try:
            parsed = datetime.fromisoformat(original_date_str.replace("Z", "+00:00"))
            return ensure_aware(parsed)
        except ValueError:
            pass
    
    for fmt in TIME_FORMATS:
        try:
            return datetime.strptime(original_date_str, fmt).replace(tzinfo=timezone.utc)
        except ValueError:
            continue
    
    for fmt in DATE_FORMATS:
        try:
            return datetime.strptime(original_date_str, fmt).replace(tzinfo=timezone.utc)
        except ValueError:
            continue
    
    # If can't parse, return None
    return None
