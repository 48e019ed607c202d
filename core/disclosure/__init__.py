"""
Disclosure Catalog & Submission Module

Static section/field catalog for the candidate intake form and the
normalisation of raw submissions ahead of export.
"""

from core.disclosure.schema import (
    CatalogError,
    Field,
    NormalisedSubmission,
    SchemaCatalog,
    Section,
    SectionBlock,
    ValueType,
    is_blank,
    normalise_submission,
)
from core.disclosure.catalog import (
    EXAMPLE_DATA,
    FIELDS,
    SECTIONS,
    create_sample_catalog,
    create_sample_submission,
)
from core.disclosure.progress import (
    SectionProgress,
    calculate_section_progress,
    is_submission_complete,
)

__all__ = [
    # Schema
    "CatalogError",
    "Field",
    "NormalisedSubmission",
    "SchemaCatalog",
    "Section",
    "SectionBlock",
    "ValueType",
    "is_blank",
    "normalise_submission",
    # Default catalog
    "EXAMPLE_DATA",
    "FIELDS",
    "SECTIONS",
    "create_sample_catalog",
    "create_sample_submission",
    # Progress
    "SectionProgress",
    "calculate_section_progress",
    "is_submission_complete",
]
