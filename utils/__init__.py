"""
Utility modules for the export engine.
"""

from .formatting import (
    NO_DATA,
    NOT_PROVIDED,
    SENSITIVE_MARKER,
    display_value,
    format_flag,
    format_report_date,
)
from .config import Config

__all__ = [
    "NO_DATA",
    "NOT_PROVIDED",
    "SENSITIVE_MARKER",
    "display_value",
    "format_flag",
    "format_report_date",
    "Config",
]
