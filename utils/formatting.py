"""
Formatting utilities shared by the export formats.
"""

from datetime import date, datetime, timezone
from typing import Final, Optional, Union


NOT_PROVIDED: Final[str] = "(Not provided)"
SENSITIVE_MARKER: Final[str] = "[SENSITIVE]"
NO_DATA: Final[str] = "No data provided."


def format_flag(value: bool) -> str:
    """Render a boolean as Yes/No."""
    return "Yes" if value else "No"


def format_report_date(when: Optional[Union[datetime, date]] = None) -> str:
    """
    ISO date (YYYY-MM-DD) of a generation timestamp.

    Args:
        when: Generation time. Defaults to now (UTC).

    Returns:
        Date truncated to the day.
    """
    if when is None:
        when = datetime.now(timezone.utc)
    if isinstance(when, datetime):
        return when.date().isoformat()
    return when.isoformat()


def display_value(value: Optional[str], placeholder: str = NOT_PROVIDED) -> str:
    """Value as shown in text formats, or the placeholder when not provided."""
    return value if value is not None else placeholder
