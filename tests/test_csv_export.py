"""
Tests for the CSV Exporter

Tests covering:
1. Header row and one data row per field
2. Quote escaping and embedded newlines survive a csv.reader round trip
3. Byte-order mark and filename
4. Not-provided values and ignored keys
5. Encoding failures produce no artifact
"""

import csv
import io
from datetime import datetime

import pytest

from core.disclosure import (
    Field,
    SchemaCatalog,
    Section,
    ValueType,
    create_sample_catalog,
    create_sample_submission,
    normalise_submission,
)
from reporting.artifact import EncodingFailureError, ExportFormat
from reporting.csv_exporter import COLUMNS, build_csv_text, render_csv


GENERATED_AT = datetime(2024, 3, 9, 15, 30)


# =============================================================================
# Fixtures
# =============================================================================


@pytest.fixture
def contact_catalog():
    """One section: required email, optional phone."""
    return SchemaCatalog(
        sections=[Section("contact", "Contact")],
        fields=[
            Field("email", "Email", "contact", value_type=ValueType.EMAIL),
            Field("phone", "Phone", "contact", optional=True, value_type=ValueType.TEL),
        ],
    )


@pytest.fixture
def notes_catalog():
    """Sensitive multiline field plus an empty section."""
    return SchemaCatalog(
        sections=[Section("empty", "Nothing Here"), Section("notes", "Notes")],
        fields=[
            Field("statement", "Statement", "notes", sensitive=True, value_type=ValueType.TEXTAREA),
            Field("comment", "Comment", "notes"),
        ],
    )


def parse_rows(payload: bytes) -> list:
    """Decode a CSV artifact payload with a standard csv reader."""
    text = payload.decode("utf-8-sig")
    return list(csv.reader(io.StringIO(text, newline="")))


# =============================================================================
# Test: Row Structure
# =============================================================================


class TestRowStructure:
    """Header plus exactly one row per field."""

    def test_contact_scenario(self, contact_catalog):
        artifact = render_csv(contact_catalog, {"email": "a@b.com"}, GENERATED_AT)
        rows = parse_rows(artifact.payload)

        assert rows[0] == list(COLUMNS)
        assert rows[1:] == [
            ["Contact", "email", "Email", "No", "a@b.com"],
            ["Contact", "phone", "Phone", "No", ""],
        ]

    def test_header_columns(self):
        assert list(COLUMNS) == ["Category", "Field Key", "Question", "Is Sensitive", "Answer"]

    def test_row_count_independent_of_answers(self, notes_catalog):
        empty = parse_rows(render_csv(notes_catalog, {}, GENERATED_AT).payload)
        full = parse_rows(render_csv(notes_catalog, {"statement": "x", "comment": "y"}, GENERATED_AT).payload)
        assert len(empty) == len(full) == 3

    def test_empty_section_emits_no_rows(self, notes_catalog):
        rows = parse_rows(render_csv(notes_catalog, {}, GENERATED_AT).payload)
        assert "Nothing Here" not in [r[0] for r in rows]

    def test_sensitive_flag(self, notes_catalog):
        rows = parse_rows(render_csv(notes_catalog, {}, GENERATED_AT).payload)
        assert rows[1][3] == "Yes"
        assert rows[2][3] == "No"

    def test_sample_catalog_row_count(self):
        catalog = create_sample_catalog()
        artifact = render_csv(catalog, create_sample_submission(), GENERATED_AT)
        rows = parse_rows(artifact.payload)
        assert len(rows) == 1 + len(catalog.fields)
        assert artifact.field_count == len(catalog.fields)

    def test_rows_follow_catalog_order(self):
        catalog = create_sample_catalog()
        rows = parse_rows(render_csv(catalog, {}, GENERATED_AT).payload)
        assert [r[1] for r in rows[1:]] == [f.key for f in catalog.fields]


# =============================================================================
# Test: Escaping
# =============================================================================


class TestEscaping:
    """Quoting rules and round trips."""

    def test_every_cell_quoted(self, contact_catalog):
        text = build_csv_text(contact_catalog, normalise_submission(contact_catalog, {"email": "a@b.com"}))
        for line in text.strip("\n").split("\n"):
            assert line.startswith('"') and line.endswith('"')

    def test_quotes_doubled(self, contact_catalog):
        text = build_csv_text(contact_catalog, normalise_submission(contact_catalog, {"email": 'He said "hi"'}))
        assert '"He said ""hi"""' in text

    def test_quote_round_trip(self, contact_catalog):
        rows = parse_rows(render_csv(contact_catalog, {"email": 'He said "hi"'}, GENERATED_AT).payload)
        assert rows[1][4] == 'He said "hi"'

    def test_newline_and_quote_round_trip(self, notes_catalog):
        value = 'First line\nSecond "quoted" line,\nthird, with commas'
        rows = parse_rows(render_csv(notes_catalog, {"statement": value}, GENERATED_AT).payload)
        assert len(rows) == 3
        assert rows[1][4] == value

    def test_newlines_kept_verbatim(self, notes_catalog):
        text = build_csv_text(notes_catalog, normalise_submission(notes_catalog, {"statement": "a\nb"}))
        assert '"a\nb"' in text


# =============================================================================
# Test: Encoding
# =============================================================================


class TestEncoding:
    """BOM, filename and failures."""

    def test_payload_starts_with_bom(self, contact_catalog):
        artifact = render_csv(contact_catalog, {}, GENERATED_AT)
        assert artifact.payload.startswith(b"\xef\xbb\xbf")

    def test_non_ascii_values(self, contact_catalog):
        rows = parse_rows(render_csv(contact_catalog, {"email": "张伟@例子.中国"}, GENERATED_AT).payload)
        assert rows[1][4] == "张伟@例子.中国"

    def test_filename(self, contact_catalog):
        artifact = render_csv(contact_catalog, {}, GENERATED_AT)
        assert artifact.filename == "info_collection_2024-03-09.csv"
        assert artifact.export_format == ExportFormat.CSV
        assert artifact.media_type.startswith("text/csv")

    def test_unencodable_value_raises(self, contact_catalog):
        with pytest.raises(EncodingFailureError) as exc_info:
            render_csv(contact_catalog, {"email": "broken \ud800 surrogate"}, GENERATED_AT)
        assert exc_info.value.export_format == ExportFormat.CSV

    def test_custom_placeholder(self, contact_catalog):
        artifact = render_csv(contact_catalog, {}, GENERATED_AT, placeholder="(Not provided)")
        rows = parse_rows(artifact.payload)
        assert rows[1][4] == "(Not provided)"
        assert rows[2][4] == "(Not provided)"

    def test_whitespace_value_uses_placeholder(self, contact_catalog):
        artifact = render_csv(contact_catalog, {"email": "   "}, GENERATED_AT, placeholder="-")
        assert parse_rows(artifact.payload)[1][4] == "-"

    def test_unknown_keys_ignored(self, contact_catalog):
        rows = parse_rows(render_csv(contact_catalog, {"fax": "123"}, GENERATED_AT).payload)
        assert len(rows) == 3
        assert "fax" not in [r[1] for r in rows]
