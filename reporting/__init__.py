"""
Reporting module for the disclosure export engine.

Renders a submission against the field catalog as CSV, Markdown or a
paginated PDF, and hands finished artifacts to a delivery sink.

Usage:
    from core.disclosure import create_sample_catalog, create_sample_submission
    from reporting import ExportEngine, FileDeliverySink

    engine = ExportEngine(create_sample_catalog())
    artifact = engine.export("pdf", create_sample_submission())
    FileDeliverySink("exports").deliver(artifact)
"""

from .artifact import (
    EncodingFailureError,
    ExportError,
    ExportFormat,
    MissingSurfaceError,
    ReportArtifact,
    UnknownFormatError,
    generate_filename,
)
from .csv_exporter import render_csv
from .markdown_exporter import render_markdown
from .pdf_generator import (
    BlockKind,
    LayoutBlock,
    PageLayout,
    PaginatedReportGenerator,
    render_pdf,
)
from .engine import ExportEngine
from .delivery import (
    DeliverySink,
    FileDeliverySink,
    PrintSink,
    PrintSurface,
    SystemPrintSurface,
    open_system_print_surface,
)

__all__ = [
    # Artifacts & errors
    "EncodingFailureError",
    "ExportError",
    "ExportFormat",
    "MissingSurfaceError",
    "ReportArtifact",
    "UnknownFormatError",
    "generate_filename",
    # Renderers
    "render_csv",
    "render_markdown",
    "render_pdf",
    "BlockKind",
    "LayoutBlock",
    "PageLayout",
    "PaginatedReportGenerator",
    # Engine
    "ExportEngine",
    # Delivery
    "DeliverySink",
    "FileDeliverySink",
    "PrintSink",
    "PrintSurface",
    "SystemPrintSurface",
    "open_system_print_surface",
]
