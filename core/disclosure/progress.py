"""
Section progress for a submission.

Counts filled required fields per section, as shown in the form's sidebar.
Informational only: exports are never gated on these results.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping, Optional

from core.disclosure.schema import SchemaCatalog, is_blank


@dataclass(frozen=True)
class SectionProgress:
    """Required-field completion for one section."""

    section_id: str
    title: str
    filled: int
    total: int

    @property
    def complete(self) -> bool:
        return self.filled == self.total

    @property
    def percent(self) -> float:
        # A section with no required fields is trivially complete
        if self.total == 0:
            return 100.0
        return self.filled / self.total * 100

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "section_id": self.section_id,
            "title": self.title,
            "filled": self.filled,
            "total": self.total,
            "complete": self.complete,
        }


def calculate_section_progress(
    catalog: SchemaCatalog,
    submission: Optional[Mapping[str, Any]],
) -> list[SectionProgress]:
    """Progress for every catalog section, in catalog order."""
    submission = submission or {}
    progress = []
    for section in catalog.sections:
        required = [f for f in catalog.fields_for(section.id) if not f.optional]
        filled = sum(1 for f in required if not is_blank(submission.get(f.key)))
        progress.append(SectionProgress(
            section_id=section.id,
            title=section.title,
            filled=filled,
            total=len(required),
        ))
    return progress


def is_submission_complete(
    catalog: SchemaCatalog,
    submission: Optional[Mapping[str, Any]],
) -> bool:
    """True when every required field in every section is filled."""
    return all(p.complete for p in calculate_section_progress(catalog, submission))
