"""
Paginated PDF report for disclosure submissions.

Generates a printable, fixed-layout A4 report from a catalog and a
submission. Uses the ReportLab canvas directly so that page breaks are
decided by explicit cursor bookkeeping rather than by a flowable engine.

Rendering runs in two passes:
1. Layout: wrap text, measure every block and assign it to a page.
   Before a block is placed, the cursor minus the block height is checked
   against the bottom margin; on overflow a new page is started first.
2. Draw: paint the finished layout onto a canvas and serialise it.

Layout rules:
- Title block at the top of page 1
- Section headers are never left at the bottom of a page without their
  first field row
- Field rows: label column 40%, value column 60% of the content width
- Long values wrap at spaces; words wider than the column break by character
- Rows taller than a full page are split line by line across pages
- Chinese text falls back to the built-in STSong-Light CID face; text no
  available face can draw raises EncodingFailureError
- No non-empty sections: a single centered "No data provided." line
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from io import BytesIO
from typing import Any, Final, List, Mapping, Optional

from reportlab.lib import colors
from reportlab.lib.pagesizes import A4
from reportlab.lib.units import mm
from reportlab.lib.utils import simpleSplit
from reportlab.pdfbase import pdfmetrics
from reportlab.pdfbase.cidfonts import UnicodeCIDFont
from reportlab.pdfbase.ttfonts import TTFError, TTFont
from reportlab.pdfgen import canvas

from core.disclosure import Field, NormalisedSubmission, SchemaCatalog, Section, normalise_submission
from utils.config import Config
from utils.formatting import NO_DATA, NOT_PROVIDED, SENSITIVE_MARKER, format_report_date

from .artifact import EncodingFailureError, ExportFormat, ReportArtifact, generate_filename


logger = logging.getLogger(__name__)


# =============================================================================
# Constants
# =============================================================================

GENERATOR_VERSION: Final[str] = "1.0"

LABEL_WIDTH_RATIO: Final[float] = 0.4

# Built-in CID face for Chinese text; needs no font file
CJK_FONT_NAME: Final[str] = "STSong-Light"

# Text the standard Type 1 fonts can draw (WinAnsi)
BASE_FONT_ENCODING: Final[str] = "cp1252"
CJK_FONT_ENCODING: Final[str] = "gbk"

TITLE_FONT_SIZE: Final[float] = 18
META_FONT_SIZE: Final[float] = 9
SECTION_FONT_SIZE: Final[float] = 12
BODY_FONT_SIZE: Final[float] = 10
BODY_LEADING: Final[float] = 13
FOOTER_FONT_SIZE: Final[float] = 7

TITLE_BLOCK_HEIGHT: Final[float] = 20 * mm
SECTION_HEADER_HEIGHT: Final[float] = 9 * mm
SECTION_HEADER_BAR: Final[float] = 7 * mm
SECTION_GAP: Final[float] = 5 * mm
ROW_PADDING: Final[float] = 1.5 * mm
COLUMN_GUTTER: Final[float] = 3 * mm
NO_DATA_HEIGHT: Final[float] = 12 * mm


# =============================================================================
# Color Palette - print-friendly slate tones
# =============================================================================


class Palette:
    """Colours for the printable report."""

    TITLE = colors.HexColor("#0f172a")
    TEXT = colors.HexColor("#1e293b")
    META = colors.HexColor("#64748b")
    LABEL = colors.HexColor("#475569")
    SECTION_TEXT = colors.HexColor("#334155")
    SECTION_BG = colors.HexColor("#f1f5f9")
    RULE = colors.HexColor("#e2e8f0")

    SENSITIVE = colors.HexColor("#dc2626")
    EMPTY = colors.HexColor("#94a3b8")


# =============================================================================
# Layout Types
# =============================================================================


class BlockKind(Enum):
    """Kinds of block placed on a page."""

    TITLE = "title"
    SECTION_HEADER = "section_header"
    FIELD_ROW = "field_row"
    NO_DATA = "no_data"


@dataclass
class LayoutBlock:
    """
    A measured block and, once placed, its position.

    y is the top edge of the block in PDF coordinates (origin bottom-left).
    """

    kind: BlockKind
    height: float
    text: str = ""
    font: str = "Helvetica"
    value_font: str = "Helvetica"
    section_id: Optional[str] = None
    field_key: Optional[str] = None
    label_lines: List[str] = field(default_factory=list)
    value_lines: List[str] = field(default_factory=list)
    sensitive: bool = False
    provided: bool = True
    continued: bool = False
    y: float = 0.0

    @property
    def line_count(self) -> int:
        return max(len(self.label_lines), len(self.value_lines), 1)


@dataclass
class PageLayout:
    """Blocks assigned to pages, in drawing order."""

    pages: List[List[LayoutBlock]] = field(default_factory=lambda: [[]])

    @property
    def page_count(self) -> int:
        return len(self.pages)

    def blocks(self, kind: Optional[BlockKind] = None) -> List[LayoutBlock]:
        return [b for page in self.pages for b in page if kind is None or b.kind == kind]

    def field_keys(self) -> List[str]:
        """Keys of rendered fields, once each, in order (split rows count once)."""
        return [b.field_key for b in self.blocks(BlockKind.FIELD_ROW) if not b.continued]


class _Cursor:
    """Running vertical position on the current page."""

    def __init__(self, layout: PageLayout, top: float, bottom: float):
        self.layout = layout
        self.top = top
        self.bottom = bottom
        self.y = top

    @property
    def remaining(self) -> float:
        return self.y - self.bottom

    @property
    def capacity(self) -> float:
        return self.top - self.bottom

    @property
    def at_page_top(self) -> bool:
        return not self.layout.pages[-1]

    def fits(self, height: float) -> bool:
        return self.y - height >= self.bottom

    def new_page(self):
        self.layout.pages.append([])
        self.y = self.top

    def place(self, block: LayoutBlock):
        block.y = self.y
        self.y -= block.height
        self.layout.pages[-1].append(block)

    def skip(self, height: float):
        # Gaps never carry over to a fresh page
        self.y = max(self.y - height, self.bottom)


# =============================================================================
# Text Helpers
# =============================================================================


def _encodable(text: str, encoding: str) -> bool:
    try:
        text.encode(encoding)
    except UnicodeError:
        return False
    return True


def _break_long_line(line: str, font_name: str, width: float) -> List[str]:
    """Break a line with no usable spaces (URLs, IDs, Chinese text) greedily by character."""
    if pdfmetrics.stringWidth(line, font_name, BODY_FONT_SIZE) <= width:
        return [line]

    pieces = []
    current = ""
    for ch in line:
        if current and pdfmetrics.stringWidth(current + ch, font_name, BODY_FONT_SIZE) > width:
            pieces.append(current)
            current = ch
        else:
            current += ch
    pieces.append(current)
    return pieces


# =============================================================================
# Paginated Report Generator
# =============================================================================


class PaginatedReportGenerator:
    """
    Generates the printable PDF report.

    Usage:
        generator = PaginatedReportGenerator()
        artifact = generator.render(catalog, submission)
    """

    PAGE_WIDTH, PAGE_HEIGHT = A4
    MARGIN_LEFT = 18 * mm
    MARGIN_RIGHT = 18 * mm
    MARGIN_TOP = 18 * mm
    MARGIN_BOTTOM = 22 * mm

    def __init__(
        self,
        title: str = "Candidate Intake Form",
        font_name: str = "Helvetica",
        font_path: Optional[str] = None,
    ):
        self.title = title
        self.font_name = font_name
        self.font_path = font_path
        self._fonts_ready = False
        self._char_map: Optional[Mapping[int, int]] = None

    @classmethod
    def from_config(cls, config: Config) -> "PaginatedReportGenerator":
        return cls(
            title=config.print_title,
            font_name=config.pdf_font_name,
            font_path=config.pdf_font_path,
        )

    # =========================================================================
    # Geometry
    # =========================================================================

    @property
    def content_width(self) -> float:
        return self.PAGE_WIDTH - self.MARGIN_LEFT - self.MARGIN_RIGHT

    @property
    def label_width(self) -> float:
        return self.content_width * LABEL_WIDTH_RATIO

    @property
    def value_width(self) -> float:
        return self.content_width - self.label_width

    @property
    def content_top(self) -> float:
        return self.PAGE_HEIGHT - self.MARGIN_TOP

    # =========================================================================
    # Fonts
    # =========================================================================

    @property
    def bold_font(self) -> str:
        # Registered TTF fonts have no bold/italic variants
        return "Helvetica-Bold" if self.font_name == "Helvetica" else self.font_name

    @property
    def italic_font(self) -> str:
        return "Helvetica-Oblique" if self.font_name == "Helvetica" else self.font_name

    def _ensure_fonts(self):
        if self._fonts_ready:
            return
        if self.font_path:
            try:
                font = TTFont(self.font_name, self.font_path)
                pdfmetrics.registerFont(font)
            except (TTFError, OSError) as e:
                raise EncodingFailureError(
                    ExportFormat.PDF, f"font {self.font_path} could not be loaded: {e}"
                ) from e
            self._char_map = font.face.charToGlyph
            logger.debug("Registered PDF font %s from %s", self.font_name, self.font_path)
        else:
            pdfmetrics.registerFont(UnicodeCIDFont(CJK_FONT_NAME))
        self._fonts_ready = True

    def _font_for(self, text: str, preferred: str) -> str:
        """
        Pick a face that can draw every character of text.

        With a TrueType font, every character must have a glyph in it.
        Otherwise Latin text keeps the preferred standard face and Chinese
        text falls back to the built-in CID face.

        Raises:
            EncodingFailureError: No available face covers the text
        """
        if self._char_map is not None:
            missing = sorted({ch for ch in text if ch not in "\r\n" and ord(ch) not in self._char_map})
            if missing:
                raise EncodingFailureError(
                    ExportFormat.PDF,
                    f"font {self.font_name} has no glyphs for {''.join(missing[:10])!r}",
                )
            return preferred

        if _encodable(text, BASE_FONT_ENCODING):
            return preferred
        if _encodable(text, CJK_FONT_ENCODING):
            return CJK_FONT_NAME
        raise EncodingFailureError(ExportFormat.PDF, f"no available font can draw {text[:40]!r}")

    def _wrap(self, text: str, font_name: str, width: float) -> List[str]:
        """Wrap text to a column width, keeping explicit line breaks and blank lines."""
        lines = []
        for paragraph in text.replace("\r\n", "\n").split("\n"):
            for line in simpleSplit(paragraph, font_name, BODY_FONT_SIZE, width) or [""]:
                lines.extend(_break_long_line(line, font_name, width))
        return lines

    # =========================================================================
    # Measuring
    # =========================================================================

    def _row_height(self, line_count: int) -> float:
        return 2 * ROW_PADDING + line_count * BODY_LEADING

    def _measure_title(self) -> LayoutBlock:
        return LayoutBlock(
            kind=BlockKind.TITLE,
            height=TITLE_BLOCK_HEIGHT,
            text=self.title,
            font=self._font_for(self.title, self.bold_font),
        )

    def _measure_section(self, section: Section) -> LayoutBlock:
        return LayoutBlock(
            kind=BlockKind.SECTION_HEADER,
            height=SECTION_HEADER_HEIGHT,
            text=section.title,
            font=self._font_for(section.title, self.bold_font),
            section_id=section.id,
        )

    def _measure_field(self, f: Field, submission: NormalisedSubmission) -> LayoutBlock:
        label = f"{f.label} {SENSITIVE_MARKER}" if f.sensitive else f.label
        value = submission.value_for(f.key)
        provided = value is not None
        text = value if provided else NOT_PROVIDED

        label_font = self._font_for(label, self.bold_font)
        value_font = self._font_for(text, self.font_name if provided else self.italic_font)
        block = LayoutBlock(
            kind=BlockKind.FIELD_ROW,
            height=0.0,
            font=label_font,
            value_font=value_font,
            section_id=f.section_id,
            field_key=f.key,
            label_lines=self._wrap(label, label_font, self.label_width - COLUMN_GUTTER),
            value_lines=self._wrap(text, value_font, self.value_width),
            sensitive=f.sensitive,
            provided=provided,
        )
        block.height = self._row_height(block.line_count)
        return block

    # =========================================================================
    # Layout
    # =========================================================================

    def layout(
        self,
        catalog: SchemaCatalog,
        submission: Optional[Mapping[str, Any]],
    ) -> PageLayout:
        """Measure and paginate the report without drawing it."""
        self._ensure_fonts()
        normalised = normalise_submission(catalog, submission)
        layout = PageLayout()
        cursor = _Cursor(layout, top=self.content_top, bottom=self.MARGIN_BOTTOM)

        cursor.place(self._measure_title())

        blocks = list(catalog.iter_blocks())
        if not blocks:
            cursor.place(LayoutBlock(
                kind=BlockKind.NO_DATA, height=NO_DATA_HEIGHT, text=NO_DATA, font=self.font_name,
            ))
            return layout

        for block in blocks:
            header = self._measure_section(block.section)
            rows = [self._measure_field(f, normalised) for f in block.fields]

            # Keep the header with its first row, or with the first line of
            # that row when the pair cannot share any single page
            first = rows[0]
            if header.height + first.height <= cursor.capacity:
                keep_with_next = header.height + first.height
            else:
                keep_with_next = header.height + self._row_height(1)
            if not cursor.fits(keep_with_next) and not cursor.at_page_top:
                cursor.new_page()
            cursor.place(header)

            for index, row in enumerate(rows):
                self._place_row(cursor, row, attached=index == 0)

            cursor.skip(SECTION_GAP)

        return layout

    def _place_row(self, cursor: _Cursor, row: LayoutBlock, attached: bool = False):
        if cursor.fits(row.height):
            cursor.place(row)
            return

        # A row attached to its section header is split rather than moved
        if not attached and not cursor.at_page_top and row.height <= cursor.capacity:
            cursor.new_page()
            cursor.place(row)
            return

        # Taller than what is left of the page: split line by line
        label_lines, value_lines = row.label_lines, row.value_lines
        continued = False
        while label_lines or value_lines:
            available = int((cursor.remaining - 2 * ROW_PADDING) // BODY_LEADING)
            if available < 1:
                cursor.new_page()
                continue
            chunk = LayoutBlock(
                kind=BlockKind.FIELD_ROW,
                height=0.0,
                font=row.font,
                value_font=row.value_font,
                section_id=row.section_id,
                field_key=row.field_key,
                label_lines=label_lines[:available],
                value_lines=value_lines[:available],
                sensitive=row.sensitive,
                provided=row.provided,
                continued=continued,
            )
            chunk.height = self._row_height(chunk.line_count)
            cursor.place(chunk)
            label_lines, value_lines = label_lines[available:], value_lines[available:]
            continued = True
            if label_lines or value_lines:
                cursor.new_page()

    # =========================================================================
    # Rendering
    # =========================================================================

    def render(
        self,
        catalog: SchemaCatalog,
        submission: Optional[Mapping[str, Any]],
        generated_at: Optional[datetime] = None,
    ) -> ReportArtifact:
        """Lay out, draw and serialise the report into a PDF artifact."""
        layout = self.layout(catalog, submission)

        buffer = BytesIO()
        try:
            self._draw(layout, buffer, format_report_date(generated_at))
        except UnicodeError as e:
            raise EncodingFailureError(ExportFormat.PDF, str(e)) from e

        artifact = ReportArtifact(
            export_format=ExportFormat.PDF,
            filename=generate_filename(ExportFormat.PDF, generated_at),
            payload=buffer.getvalue(),
            field_count=catalog.rendered_field_count(),
            page_count=layout.page_count,
        )
        logger.info(
            "Rendered PDF export %s (%d fields, %d pages)",
            artifact.filename,
            artifact.field_count,
            artifact.page_count,
        )
        return artifact

    def _draw(self, layout: PageLayout, buffer: BytesIO, report_date: str):
        c = canvas.Canvas(buffer, pagesize=A4)
        c.setTitle(f"{self.title} - Export")
        c.setSubject("Info Collection Report")
        c.setCreator(f"PaginatedReportGenerator {GENERATOR_VERSION}")

        for page_number, page in enumerate(layout.pages, start=1):
            for block in page:
                if block.kind == BlockKind.TITLE:
                    self._draw_title(c, block, report_date)
                elif block.kind == BlockKind.SECTION_HEADER:
                    self._draw_section_header(c, block)
                elif block.kind == BlockKind.FIELD_ROW:
                    self._draw_field_row(c, block)
                else:
                    self._draw_no_data(c, block)
            self._draw_page_frame(c, page_number, layout.page_count)
            c.showPage()

        c.save()

    def _draw_title(self, c: canvas.Canvas, block: LayoutBlock, report_date: str):
        center = self.MARGIN_LEFT + self.content_width / 2

        c.setFillColor(Palette.TITLE)
        c.setFont(block.font, TITLE_FONT_SIZE)
        c.drawCentredString(center, block.y - TITLE_FONT_SIZE, block.text)

        c.setFillColor(Palette.META)
        c.setFont(self.font_name, META_FONT_SIZE)
        c.drawCentredString(
            center,
            block.y - TITLE_FONT_SIZE - 5 * mm,
            f"Generated Report • {report_date}",
        )

        rule_y = block.y - block.height + 3 * mm
        c.setStrokeColor(Palette.RULE)
        c.setLineWidth(1.5)
        c.line(self.MARGIN_LEFT, rule_y, self.PAGE_WIDTH - self.MARGIN_RIGHT, rule_y)

    def _draw_section_header(self, c: canvas.Canvas, block: LayoutBlock):
        bar_bottom = block.y - SECTION_HEADER_BAR
        c.setFillColor(Palette.SECTION_BG)
        c.roundRect(
            self.MARGIN_LEFT, bar_bottom, self.content_width, SECTION_HEADER_BAR,
            radius=1.5 * mm, stroke=0, fill=1,
        )
        c.setFillColor(Palette.SECTION_TEXT)
        c.setFont(block.font, SECTION_FONT_SIZE)
        c.drawString(self.MARGIN_LEFT + 3 * mm, bar_bottom + 2.2 * mm, block.text)

    def _draw_field_row(self, c: canvas.Canvas, block: LayoutBlock):
        first_baseline = block.y - ROW_PADDING - BODY_FONT_SIZE
        value_x = self.MARGIN_LEFT + self.label_width

        c.setFillColor(Palette.SENSITIVE if block.sensitive else Palette.LABEL)
        c.setFont(block.font, BODY_FONT_SIZE)
        for i, line in enumerate(block.label_lines):
            c.drawString(self.MARGIN_LEFT, first_baseline - i * BODY_LEADING, line)

        if block.provided:
            c.setFillColor(Palette.TEXT)
        else:
            c.setFillColor(Palette.EMPTY)
        c.setFont(block.value_font, BODY_FONT_SIZE)
        for i, line in enumerate(block.value_lines):
            c.drawString(value_x, first_baseline - i * BODY_LEADING, line)

        # Dotted separator under the row
        rule_y = block.y - block.height + 0.5
        c.saveState()
        c.setStrokeColor(Palette.RULE)
        c.setLineWidth(0.5)
        c.setDash(1, 2)
        c.line(self.MARGIN_LEFT, rule_y, self.PAGE_WIDTH - self.MARGIN_RIGHT, rule_y)
        c.restoreState()

    def _draw_no_data(self, c: canvas.Canvas, block: LayoutBlock):
        c.setFillColor(Palette.EMPTY)
        c.setFont(block.font, BODY_FONT_SIZE + 1)
        c.drawCentredString(
            self.MARGIN_LEFT + self.content_width / 2,
            block.y - block.height / 2,
            block.text,
        )

    def _draw_page_frame(self, c: canvas.Canvas, page_number: int, page_count: int):
        """Draw footer on every page."""
        c.saveState()
        c.setFillColor(Palette.META)

        c.setFont(self._font_for(self.title, self.font_name), FOOTER_FONT_SIZE)
        c.drawString(self.MARGIN_LEFT, self.MARGIN_BOTTOM - 10 * mm, self.title)
        c.setFont(self.font_name, FOOTER_FONT_SIZE)
        c.drawRightString(
            self.PAGE_WIDTH - self.MARGIN_RIGHT,
            self.MARGIN_BOTTOM - 10 * mm,
            f"Page {page_number} of {page_count}",
        )

        c.restoreState()


def render_pdf(
    catalog: SchemaCatalog,
    submission: Optional[Mapping[str, Any]],
    generated_at: Optional[datetime] = None,
) -> ReportArtifact:
    """Render with the default generator settings."""
    return PaginatedReportGenerator().render(catalog, submission, generated_at)
