"""
FastAPI application for the disclosure export engine.

Serves the field catalog, section progress and the three export formats.
Exports are returned as file downloads; the PDF is served inline so the
browser can open its print dialog.
"""

import logging
import os
from typing import Any, Dict, Optional

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, Response
from pydantic import BaseModel

from core.disclosure import SchemaCatalog, calculate_section_progress, create_sample_catalog, is_submission_complete
from reporting import EncodingFailureError, ExportEngine, ExportFormat, UnknownFormatError
from utils.config import Config


logger = logging.getLogger(__name__)


# =============================================================================
# Environment Configuration
# =============================================================================

# CORS configuration
ALLOWED_ORIGINS = os.getenv("ALLOWED_ORIGINS", "").split(",") if os.getenv("ALLOWED_ORIGINS") else []


# =============================================================================
# API Request Models
# =============================================================================

class SubmissionRequest(BaseModel):
    """Request body carrying a (possibly partial) submission."""
    submission: Dict[str, Any] = {}


def create_app(catalog: Optional[SchemaCatalog] = None, config: Optional[Config] = None) -> FastAPI:
    """Create and configure the FastAPI application."""
    config = config or Config.load()
    engine = ExportEngine(catalog or create_sample_catalog(), config)

    app = FastAPI(
        title="Info Collection Export",
        description="Export engine for the candidate intake form",
        version="0.1.0",
        debug=config.debug,
    )

    # Healthcheck endpoints: synchronous, no IO
    @app.get("/", include_in_schema=False)
    def root():
        return {"status": "ok"}

    @app.get("/health", include_in_schema=False)
    def health():
        return {"status": "healthy"}

    if ALLOWED_ORIGINS:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=ALLOWED_ORIGINS,
            allow_credentials=True,
            allow_methods=["GET", "POST"],
            allow_headers=["*"],
        )

    @app.get("/api/catalog")
    def get_catalog():
        """Sections and fields in display order."""
        return engine.catalog.to_dict()

    @app.post("/api/progress")
    def get_progress(request_data: SubmissionRequest):
        """Required-field progress per section."""
        progress = calculate_section_progress(engine.catalog, request_data.submission)
        return JSONResponse({
            "sections": [p.to_dict() for p in progress],
            "complete": is_submission_complete(engine.catalog, request_data.submission),
        })

    @app.post("/api/export/{fmt}")
    def export_submission(fmt: str, request_data: SubmissionRequest):
        """
        Render the submission and return it as a file.

        Returns:
            - 200 with the artifact body and a Content-Disposition filename
            - 404 for an unknown format
            - 422 if the payload could not be encoded
        """
        try:
            export_format = ExportFormat.parse(fmt)
            artifact = engine.export(export_format, request_data.submission)
        except UnknownFormatError as e:
            raise HTTPException(status_code=404, detail=str(e))
        except EncodingFailureError as e:
            logger.error("Export failed: %s", e)
            raise HTTPException(status_code=422, detail=str(e))

        disposition = "inline" if export_format == ExportFormat.PDF else "attachment"
        headers = {
            "Content-Disposition": f'{disposition}; filename="{artifact.filename}"',
            "X-Field-Count": str(artifact.field_count),
        }
        if artifact.page_count is not None:
            headers["X-Page-Count"] = str(artifact.page_count)

        return Response(content=artifact.payload, media_type=artifact.media_type, headers=headers)

    return app
