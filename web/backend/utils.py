#!/usr/bin/env python3
"""
Utility functions for the web application.
"""

from enum import Enum
from typing import Optional, Any
from datetime import datetime


def safe_str(value: Optional[Any], default: str = "") -> str:
    """
    Safely convert value to string.

    Args:
        value: Value to convert. Enum members are rendered by value.
        default: Default value if value is None.

    Returns:
        String value.
    """
    if value is None:
        return default
    if isinstance(value, Enum):
        return str(value.value)
    return str(value)


def safe_datetime_iso(dt: Optional[datetime]) -> Optional[str]:
    """
    Safely convert datetime to ISO format string.

    Args:
        dt: Datetime object.

    Returns:
        ISO format string or None.
    """
    if dt is None:
        return None
    return dt.isoformat()
