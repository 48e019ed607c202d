"""CSV exporter for disclosure submissions."""

from __future__ import annotations

import csv
import io
import logging
from datetime import datetime
from typing import Any, List, Mapping, Optional, Sequence

from core.disclosure import Field, NormalisedSubmission, SchemaCatalog, Section, normalise_submission
from utils.formatting import display_value, format_flag

from .artifact import EncodingFailureError, ExportFormat, ReportArtifact, generate_filename


logger = logging.getLogger(__name__)


COLUMNS: Sequence[str] = (
    "Category",
    "Field Key",
    "Question",
    "Is Sensitive",
    "Answer",
)

# utf-8-sig prepends the byte-order mark spreadsheet tools use to detect UTF-8
CSV_ENCODING = "utf-8-sig"


def _field_row(section: Section, field: Field, submission: NormalisedSubmission, placeholder: str) -> List[str]:
    return [
        section.title,
        field.key,
        field.label,
        format_flag(field.sensitive),
        display_value(submission.value_for(field.key), placeholder),
    ]


def build_csv_text(catalog: SchemaCatalog, submission: NormalisedSubmission, placeholder: str = "") -> str:
    """
    Build the CSV document as text.

    Every cell is quoted and embedded quotes are doubled. Newlines inside
    values are kept verbatim within their quoted cell.
    """
    buffer = io.StringIO()
    writer = csv.writer(buffer, quoting=csv.QUOTE_ALL, lineterminator="\n")
    writer.writerow(list(COLUMNS))
    for block in catalog.iter_blocks():
        for field in block.fields:
            writer.writerow(_field_row(block.section, field, submission, placeholder))
    return buffer.getvalue()


def render_csv(
    catalog: SchemaCatalog,
    submission: Optional[Mapping[str, Any]],
    generated_at: Optional[datetime] = None,
    placeholder: str = "",
) -> ReportArtifact:
    """Render a submission as a BOM-prefixed UTF-8 CSV artifact."""
    normalised = normalise_submission(catalog, submission)
    text = build_csv_text(catalog, normalised, placeholder)

    try:
        payload = text.encode(CSV_ENCODING)
    except UnicodeEncodeError as e:
        raise EncodingFailureError(ExportFormat.CSV, str(e)) from e

    artifact = ReportArtifact(
        export_format=ExportFormat.CSV,
        filename=generate_filename(ExportFormat.CSV, generated_at),
        payload=payload,
        field_count=catalog.rendered_field_count(),
    )
    logger.info("Rendered CSV export %s (%d rows)", artifact.filename, artifact.field_count)
    return artifact


__all__ = ["COLUMNS", "build_csv_text", "render_csv"]
