"""
Tests for the Markdown Exporter

Tests covering:
1. Title, date line and one heading per non-empty section
2. One subheading + value block per field
3. Sensitive marker does not alter the label
4. Not-provided placeholder
"""

from datetime import datetime

import pytest

from core.disclosure import Field, SchemaCatalog, Section, create_sample_catalog, create_sample_submission
from reporting.artifact import ExportFormat
from reporting.markdown_exporter import field_heading, render_markdown


GENERATED_AT = datetime(2024, 3, 9, 15, 30)


# =============================================================================
# Fixtures
# =============================================================================


@pytest.fixture
def contact_catalog():
    return SchemaCatalog(
        sections=[Section("contact", "Contact"), Section("unused", "Unused")],
        fields=[
            Field("email", "Email", "contact"),
            Field("phone", "Phone", "contact", optional=True),
        ],
    )


def render_text(catalog, submission, **kwargs) -> str:
    return render_markdown(catalog, submission, GENERATED_AT, **kwargs).payload.decode("utf-8")


# =============================================================================
# Test: Document Structure
# =============================================================================


class TestDocumentStructure:
    """Headings and blocks."""

    def test_contact_scenario(self, contact_catalog):
        text = render_text(contact_catalog, {"email": "a@b.com"})

        assert text == (
            "# Info Collection Report\n\n"
            "**Date:** 2024-03-09\n\n"
            "## Contact\n\n"
            "### Email\n"
            "a@b.com\n\n"
            "### Phone\n"
            "(Not provided)\n\n"
            "---\n\n"
        )

    def test_empty_section_produces_nothing(self, contact_catalog):
        text = render_text(contact_catalog, {})
        assert "Unused" not in text

    def test_one_heading_per_non_empty_section(self):
        catalog = create_sample_catalog()
        text = render_text(catalog, create_sample_submission())
        headings = [line for line in text.splitlines() if line.startswith("## ")]
        assert headings == [f"## {s.title}" for s in catalog.sections]

    def test_one_subheading_per_field(self):
        catalog = create_sample_catalog()
        text = render_text(catalog, {})
        subheadings = [line for line in text.splitlines() if line.startswith("### ")]
        assert len(subheadings) == len(catalog.fields)

    def test_section_rule_per_section(self):
        catalog = create_sample_catalog()
        text = render_text(catalog, {})
        assert text.splitlines().count("---") == len(catalog.sections)

    def test_custom_title(self, contact_catalog):
        text = render_text(contact_catalog, {}, title="Candidate Disclosure")
        assert text.startswith("# Candidate Disclosure\n")

    def test_no_sections(self):
        catalog = SchemaCatalog(sections=[Section("a", "A")], fields=[])
        text = render_text(catalog, {})
        assert text == "# Info Collection Report\n\n**Date:** 2024-03-09\n\n"

    def test_multiline_value_kept(self, contact_catalog):
        text = render_text(contact_catalog, {"email": "line one\nline two"})
        assert "### Email\nline one\nline two\n\n" in text


# =============================================================================
# Test: Field Markers
# =============================================================================


class TestFieldMarkers:
    """Sensitive and not-provided markers."""

    def test_sensitive_marker(self):
        f = Field("ssn", "Social Security Number", "contact", sensitive=True)
        assert field_heading(f) == "### Social Security Number `[SENSITIVE]`"

    def test_ordinary_heading(self):
        f = Field("email", "Email", "contact")
        assert field_heading(f) == "### Email"

    def test_marker_does_not_alter_label(self):
        f = Field("ssn", "SSN", "contact", sensitive=True)
        field_heading(f)
        assert f.label == "SSN"

    @pytest.mark.parametrize("value", [None, "", "   "])
    def test_placeholder_for_blank_values(self, contact_catalog, value):
        text = render_text(contact_catalog, {"email": value})
        assert "### Email\n(Not provided)\n" in text

    def test_artifact_metadata(self, contact_catalog):
        artifact = render_markdown(contact_catalog, {}, GENERATED_AT)
        assert artifact.filename == "info_collection_2024-03-09.md"
        assert artifact.export_format == ExportFormat.MARKDOWN
        assert artifact.field_count == 2
        assert artifact.page_count is None
