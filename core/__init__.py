"""
Info Collection - Core Business Logic

This module provides the field catalog and submission handling behind the
export engine:
1. Catalog (sections and fields in display order)
2. Submission normalisation (blank values, unknown keys)
3. Section progress (required fields filled per section)
"""

from .disclosure import (
    EXAMPLE_DATA,
    CatalogError,
    Field,
    NormalisedSubmission,
    SchemaCatalog,
    Section,
    SectionBlock,
    SectionProgress,
    ValueType,
    calculate_section_progress,
    create_sample_catalog,
    create_sample_submission,
    is_blank,
    is_submission_complete,
    normalise_submission,
)

__all__ = [
    "EXAMPLE_DATA",
    "CatalogError",
    "Field",
    "NormalisedSubmission",
    "SchemaCatalog",
    "Section",
    "SectionBlock",
    "SectionProgress",
    "ValueType",
    "calculate_section_progress",
    "create_sample_catalog",
    "create_sample_submission",
    "is_blank",
    "is_submission_complete",
    "normalise_submission",
]
