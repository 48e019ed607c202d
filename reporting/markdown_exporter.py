"""
Markdown exporter for disclosure submissions.

Document layout:
    # <report title>
    **Date:** <YYYY-MM-DD>
    ## <section title>            (one per non-empty section)
    ### <field label> `[SENSITIVE]` (marker only on sensitive fields)
    <value or (Not provided)>
    ---                            (closes each section)
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, List, Mapping, Optional

from core.disclosure import Field, NormalisedSubmission, SchemaCatalog, normalise_submission
from utils.formatting import NOT_PROVIDED, SENSITIVE_MARKER, display_value, format_report_date

from .artifact import EncodingFailureError, ExportFormat, ReportArtifact, generate_filename


logger = logging.getLogger(__name__)

DEFAULT_TITLE = "Info Collection Report"
SECTION_RULE = "---"


def field_heading(field: Field) -> str:
    """Subheading for a field; sensitive fields carry an inline-code marker."""
    marker = f" `{SENSITIVE_MARKER}`" if field.sensitive else ""
    return f"### {field.label}{marker}"


def _field_block(field: Field, submission: NormalisedSubmission) -> List[str]:
    return [
        field_heading(field),
        f"{display_value(submission.value_for(field.key), NOT_PROVIDED)}\n",
    ]


def build_markdown_text(
    catalog: SchemaCatalog,
    submission: NormalisedSubmission,
    generated_at: Optional[datetime] = None,
    title: str = DEFAULT_TITLE,
) -> str:
    """Build the Markdown document as text."""
    lines = [
        f"# {title}\n",
        f"**Date:** {format_report_date(generated_at)}\n",
    ]

    for block in catalog.iter_blocks():
        lines.append(f"## {block.section.title}\n")
        for field in block.fields:
            lines.extend(_field_block(field, submission))
        lines.append(f"{SECTION_RULE}\n")

    return "\n".join(lines) + "\n"


def render_markdown(
    catalog: SchemaCatalog,
    submission: Optional[Mapping[str, Any]],
    generated_at: Optional[datetime] = None,
    title: str = DEFAULT_TITLE,
) -> ReportArtifact:
    """Render a submission as a UTF-8 Markdown artifact."""
    normalised = normalise_submission(catalog, submission)
    text = build_markdown_text(catalog, normalised, generated_at, title)

    try:
        payload = text.encode("utf-8")
    except UnicodeEncodeError as e:
        raise EncodingFailureError(ExportFormat.MARKDOWN, str(e)) from e

    artifact = ReportArtifact(
        export_format=ExportFormat.MARKDOWN,
        filename=generate_filename(ExportFormat.MARKDOWN, generated_at),
        payload=payload,
        field_count=catalog.rendered_field_count(),
    )
    logger.info("Rendered Markdown export %s (%d fields)", artifact.filename, artifact.field_count)
    return artifact
