"""
Export Engine - one entry point for all three export formats.

Each export is a pure function of (catalog, submission) plus the
generation timestamp. The engine holds no per-export state, and every call
renders from its own normalised copy of the submission.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, Mapping, Optional, Union

from core.disclosure import SchemaCatalog, create_sample_catalog
from utils.config import Config

from .artifact import ExportFormat, ReportArtifact
from .csv_exporter import render_csv
from .markdown_exporter import render_markdown
from .pdf_generator import PaginatedReportGenerator


logger = logging.getLogger(__name__)


class ExportEngine:
    """
    Renders submissions against a fixed catalog.

    Usage:
        engine = ExportEngine(create_sample_catalog())
        artifact = engine.export("csv", submission)
    """

    def __init__(self, catalog: Optional[SchemaCatalog] = None, config: Optional[Config] = None):
        self.catalog = catalog if catalog is not None else create_sample_catalog()
        self.config = config if config is not None else Config()
        self.pdf_generator = PaginatedReportGenerator.from_config(self.config)

    def export(
        self,
        export_format: Union[str, ExportFormat],
        submission: Optional[Mapping[str, Any]],
        generated_at: Optional[datetime] = None,
    ) -> ReportArtifact:
        """
        Render a submission in the requested format.

        Args:
            export_format: ExportFormat or its name (csv, md, markdown, pdf)
            submission: Field key -> raw value; may be partial or empty
            generated_at: Generation time (defaults to now, UTC)

        Returns:
            The finished artifact

        Raises:
            UnknownFormatError: Unsupported format name
            EncodingFailureError: Payload could not be serialised
        """
        fmt = ExportFormat.parse(export_format)
        if generated_at is None:
            generated_at = datetime.now(timezone.utc)

        if fmt == ExportFormat.CSV:
            return self.export_csv(submission, generated_at)
        if fmt == ExportFormat.MARKDOWN:
            return self.export_markdown(submission, generated_at)
        return self.export_pdf(submission, generated_at)

    def export_csv(self, submission, generated_at: Optional[datetime] = None) -> ReportArtifact:
        return render_csv(
            self.catalog,
            submission,
            generated_at=generated_at,
            placeholder=self.config.csv_placeholder,
        )

    def export_markdown(self, submission, generated_at: Optional[datetime] = None) -> ReportArtifact:
        return render_markdown(
            self.catalog,
            submission,
            generated_at=generated_at,
            title=self.config.report_title,
        )

    def export_pdf(self, submission, generated_at: Optional[datetime] = None) -> ReportArtifact:
        return self.pdf_generator.render(self.catalog, submission, generated_at=generated_at)

    def export_all(
        self,
        submission: Optional[Mapping[str, Any]],
        generated_at: Optional[datetime] = None,
    ) -> list[ReportArtifact]:
        """Render every format with a shared timestamp."""
        if generated_at is None:
            generated_at = datetime.now(timezone.utc)
        artifacts = [self.export(fmt, submission, generated_at) for fmt in ExportFormat]
        logger.info("Rendered %d export formats", len(artifacts))
        return artifacts
