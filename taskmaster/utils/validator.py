"""
Task input validation

Validators raise ValidationError; the task manager converts it to a Failure.
"""

from datetime import datetime
from typing import Any, Optional
from taskmaster.config.constants import TITLE_MAX_LENGTH, DESCRIPTION_MAX_LENGTH
from taskmaster.utils.error_handler import ValidationError
from taskmaster.utils.date_parser import parse_date


def validate_title(title: Any) -> str:
    """
    Validate task title
    
    Args:
        title: Title value
        
    Returns:
        The title, unchanged
        
    Raises:
        ValidationError: If the title is empty or too long
    """
    if not isinstance(title, str) or not title.strip():
        raise ValidationError("Title must not be empty")
    
    if len(title) > TITLE_MAX_LENGTH:
        raise ValidationError(
            f"Title must not exceed {TITLE_MAX_LENGTH} characters (got {len(title)})"
        )
    
    return title


def validate_description(description: Optional[str]) -> Optional[str]:
    """Validate optional task description length"""
    if description is not None and len(description) > DESCRIPTION_MAX_LENGTH:
        raise ValidationError(
            f"Description must not exceed {DESCRIPTION_MAX_LENGTH} characters (got {len(description)})"
        )
    return description


def validate_date_string(date_str: Optional[str]) -> Optional[datetime]:
    """
    Validate user supplied date string
    
    Args:
        date_str: Date string (empty means no date)
        
    Returns:
        Parsed datetime or None for empty input
        
    Raises:
        ValidationError: If the string cannot be parsed
    """
    if not date_str or not date_str.strip():
        return None
    
    parsed = parse_date(date_str)
    if parsed is None:
        raise ValidationError(f"Invalid date format: '{date_str}'")
    return parsed
