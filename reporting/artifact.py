"""
Report artifacts and export errors.

An artifact is the complete, in-memory output of one export call: the
payload bytes plus the filename suggested to the delivery sink. Artifacts
are only constructed once a payload has been fully serialised, so a failed
export never yields a partial artifact.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from enum import Enum
from typing import Final, Optional, Union

from utils.formatting import format_report_date


# =============================================================================
# Constants
# =============================================================================

FILENAME_PREFIX: Final[str] = "info_collection"


# =============================================================================
# Enums
# =============================================================================


class ExportFormat(Enum):
    """Supported export formats. The value is the file extension."""

    CSV = "csv"
    MARKDOWN = "md"
    PDF = "pdf"

    @property
    def extension(self) -> str:
        return self.value

    @property
    def media_type(self) -> str:
        return {
            ExportFormat.CSV: "text/csv; charset=utf-8",
            ExportFormat.MARKDOWN: "text/markdown; charset=utf-8",
            ExportFormat.PDF: "application/pdf",
        }[self]

    @classmethod
    def parse(cls, name: Union[str, "ExportFormat"]) -> "ExportFormat":
        """Resolve a format from an extension or alias (csv, md, markdown, pdf)."""
        if isinstance(name, cls):
            return name
        aliases = {
            "csv": cls.CSV,
            "md": cls.MARKDOWN,
            "markdown": cls.MARKDOWN,
            "pdf": cls.PDF,
        }
        key = str(name).strip().lower()
        if key not in aliases:
            raise UnknownFormatError(str(name))
        return aliases[key]


# =============================================================================
# Exceptions
# =============================================================================


class ExportError(Exception):
    """Base class for export failures surfaced to the caller."""

    pass


class UnknownFormatError(ExportError, ValueError):
    """Raised when an unsupported export format is requested."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Unsupported export format: {name!r}")


class EncodingFailureError(ExportError):
    """Raised when a payload cannot be serialised to bytes."""

    def __init__(self, export_format: ExportFormat, reason: str):
        self.export_format = export_format
        self.reason = reason
        super().__init__(f"Could not encode {export_format.extension} export: {reason}")


class MissingSurfaceError(ExportError):
    """
    Raised when no print/display surface is available.

    Covers a surface that cannot be created (e.g. blocked by the
    environment) as well as one that fails or never signals it is ready.
    """

    pass


# =============================================================================
# Artifact
# =============================================================================


def generate_filename(export_format: ExportFormat, when: Optional[Union[datetime, date]] = None) -> str:
    """Filename of the form info_collection_<YYYY-MM-DD>.<ext>."""
    return f"{FILENAME_PREFIX}_{format_report_date(when)}.{export_format.extension}"


@dataclass(frozen=True)
class ReportArtifact:
    """The rendered output of one export operation."""

    export_format: ExportFormat
    filename: str
    payload: bytes
    field_count: int
    page_count: Optional[int] = None

    @property
    def media_type(self) -> str:
        return self.export_format.media_type

    @property
    def size_bytes(self) -> int:
        return len(self.payload)
