"""
Disclosure Schema - Sections, Fields and Submissions

Defines the static field catalog that drives every export format, and the
normalisation applied to a raw submission before it is rendered.

Principles:
- Catalog order is display order (sections and fields)
- Every declared field is rendered, answered or not
- Missing, empty and whitespace-only values are all "not provided"
- Unknown submission keys are ignored, never fatal
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Final, Iterator, Mapping, Optional


logger = logging.getLogger(__name__)


# =============================================================================
# Enums
# =============================================================================


class ValueType(Enum):
    """Input type of a field, as captured by the form."""

    TEXT = "text"
    TEXTAREA = "textarea"  # Multiline free text
    NUMBER = "number"
    DATE = "date"
    SELECT = "select"  # Single choice from Field.options
    EMAIL = "email"
    TEL = "tel"


# =============================================================================
# Constants
# =============================================================================

MULTILINE_VALUE_TYPES: Final[tuple[ValueType, ...]] = (ValueType.TEXTAREA,)


# =============================================================================
# Exceptions
# =============================================================================


class CatalogError(ValueError):
    """Raised when a catalog definition is inconsistent."""

    def __init__(self, errors: list[str]):
        self.errors = errors
        super().__init__(f"Invalid catalog: {'; '.join(errors)}")


# =============================================================================
# Catalog Dataclasses
# =============================================================================


@dataclass(frozen=True)
class Section:
    """An ordered group of related fields."""

    id: str
    title: str
    description: str = ""

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "id": self.id,
            "title": self.title,
            "description": self.description,
        }


@dataclass(frozen=True)
class Field:
    """A single labelled data point belonging to one section."""

    key: str
    label: str
    section_id: str
    sensitive: bool = False
    optional: bool = False
    value_type: ValueType = ValueType.TEXT
    placeholder: Optional[str] = None
    options: tuple[str, ...] = ()

    @property
    def is_multiline(self) -> bool:
        return self.value_type in MULTILINE_VALUE_TYPES

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "key": self.key,
            "label": self.label,
            "section_id": self.section_id,
            "sensitive": self.sensitive,
            "optional": self.optional,
            "value_type": self.value_type.value,
            "placeholder": self.placeholder,
            "options": list(self.options),
        }


@dataclass(frozen=True)
class SectionBlock:
    """A non-empty section together with its fields, in catalog order."""

    section: Section
    fields: tuple[Field, ...]


@dataclass(frozen=True)
class SchemaCatalog:
    """
    Immutable, ordered catalog of sections and fields.

    Construction validates the catalog: section ids and field keys must be
    unique and every field must reference a declared section.
    """

    sections: tuple[Section, ...]
    fields: tuple[Field, ...]

    def __post_init__(self):
        # Accept lists from callers but store tuples
        object.__setattr__(self, "sections", tuple(self.sections))
        object.__setattr__(self, "fields", tuple(self.fields))

        errors = []
        section_ids = set()
        for section in self.sections:
            if section.id in section_ids:
                errors.append(f"duplicate section id '{section.id}'")
            section_ids.add(section.id)

        field_keys = set()
        for f in self.fields:
            if f.key in field_keys:
                errors.append(f"duplicate field key '{f.key}'")
            field_keys.add(f.key)
            if f.section_id not in section_ids:
                errors.append(f"field '{f.key}' references unknown section '{f.section_id}'")

        if errors:
            raise CatalogError(errors)

    @property
    def field_keys(self) -> frozenset[str]:
        return frozenset(f.key for f in self.fields)

    def get_field(self, key: str) -> Optional[Field]:
        for f in self.fields:
            if f.key == key:
                return f
        return None

    def fields_for(self, section_id: str) -> tuple[Field, ...]:
        """Fields of one section, in declared order."""
        return tuple(f for f in self.fields if f.section_id == section_id)

    def iter_blocks(self) -> Iterator[SectionBlock]:
        """Yield non-empty sections in catalog order. Empty sections are skipped."""
        for section in self.sections:
            section_fields = self.fields_for(section.id)
            if not section_fields:
                continue
            yield SectionBlock(section=section, fields=section_fields)

    def rendered_field_count(self) -> int:
        """Number of field entries every renderer emits for this catalog."""
        return sum(len(block.fields) for block in self.iter_blocks())

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "sections": [s.to_dict() for s in self.sections],
            "fields": [f.to_dict() for f in self.fields],
        }


# =============================================================================
# Submission Normalisation
# =============================================================================


@dataclass(frozen=True)
class NormalisedSubmission:
    """
    Per-export copy of a submission.

    values only holds provided answers; a key absent from values is
    "not provided". ignored_keys lists submission keys with no field in the
    catalog (schema mismatches).
    """

    values: dict[str, str] = field(default_factory=dict)
    ignored_keys: tuple[str, ...] = ()

    def value_for(self, key: str) -> Optional[str]:
        return self.values.get(key)

    def is_provided(self, key: str) -> bool:
        return key in self.values


def is_blank(value: Any) -> bool:
    """True for None, empty and whitespace-only values."""
    if value is None:
        return True
    return not str(value).strip()


def normalise_submission(
    catalog: SchemaCatalog,
    submission: Optional[Mapping[str, Any]],
) -> NormalisedSubmission:
    """
    Build an independent, normalised copy of a raw submission.

    Provided values are kept verbatim (no trimming) and coerced to str.
    Blank values are dropped. Keys unknown to the catalog are ignored
    and logged.
    """
    if submission is None:
        return NormalisedSubmission()

    known_keys = catalog.field_keys
    values: dict[str, str] = {}
    ignored = []

    for key, raw in submission.items():
        if key not in known_keys:
            ignored.append(key)
            continue
        if is_blank(raw):
            continue
        values[key] = str(raw)

    if ignored:
        logger.warning(
            "Ignoring %d submission key(s) with no catalog field: %s",
            len(ignored),
            ", ".join(sorted(ignored)),
        )

    return NormalisedSubmission(values=values, ignored_keys=tuple(ignored))
