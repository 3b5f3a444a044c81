import logging
from dataclasses import dataclass
from typing import Optional, Tuple

from notepdf.core.settings import ExportSettings
from notepdf.plugins.pdf_export.content import ImageElement

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PageGeometry:
    width: float
    height: float
    margin: float
    bottom_threshold: float = 30.0

    @property
    def usable_width(self) -> float:
        return self.width - 2 * self.margin

    @property
    def usable_height(self) -> float:
        return self.height - 2 * self.margin

    @property
    def break_line(self) -> float:
        """Deepest cursor position at which a new element may still start."""
        return self.height - self.bottom_threshold

    @classmethod
    def for_canvas(cls, pdf, settings: ExportSettings):
        return cls(
            width=pdf.page_width,
            height=pdf.page_height,
            margin=settings.margin,
            bottom_threshold=settings.bottom_threshold
        )


@dataclass
class PageCursor:
    y: float
    page: int = 1


@dataclass
class PlacementResult:
    height: float
    lines: int = 0
    # (width, height) of an embedded image in page units
    image_size: Optional[Tuple[float, float]] = None
    fallback: Optional[str] = None
    page_break: bool = False
    page: int = 1


class PageLayout:
    """
    Places the title and layout elements on a PdfCanvas, one after another,
    breaking pages when the cursor gets too close to the bottom.
    """

    def __init__(self, pdf, geometry: PageGeometry, settings: ExportSettings, image_loader):
        self.pdf = pdf
        self.geometry = geometry
        self.settings = settings
        self.image_loader = image_loader

    def new_cursor(self) -> PageCursor:
        return PageCursor(y=self.geometry.margin)

    def needs_page_break(self, cursor: PageCursor) -> bool:
        return cursor.y > self.geometry.break_line

    def place_title(self, title: str, cursor: PageCursor) -> PlacementResult:
        s = self.settings
        self.pdf.set_font_size(s.title_font_size)
        self.pdf.set_font_style('bold')
        lines = self.pdf.split_text_to_size(title, self.geometry.usable_width)
        self.pdf.text(lines, self.geometry.margin, cursor.y)

        height = len(lines) * s.title_line_height + s.title_spacing
        cursor.y += height
        return PlacementResult(height=height, lines=len(lines), page=cursor.page)

    def place_text(self, text: str, cursor: PageCursor) -> PlacementResult:
        s = self.settings
        self.pdf.set_font_size(s.text_font_size)
        self.pdf.set_font_style('normal')
        lines = self.pdf.split_text_to_size(text, self.geometry.usable_width)
        self.pdf.text(lines, self.geometry.margin, cursor.y)
        return PlacementResult(height=len(lines) * s.text_line_height, lines=len(lines))

    def place_image(self, source, alt_text, cursor: PageCursor) -> PlacementResult:
        return self.image_loader.load_and_place(
            self.pdf, source, alt_text,
            self.geometry.margin, cursor.y,
            self.geometry.usable_width
        )

    def place(self, element, cursor: PageCursor) -> PlacementResult:
        """Place one element and advance the cursor past it."""
        page_break = False
        if self.needs_page_break(cursor):
            self.pdf.add_page()
            cursor.y = self.geometry.margin
            cursor.page += 1
            page_break = True
            logger.debug(f"Page break before element, now on page {cursor.page}")

        if isinstance(element, ImageElement):
            result = self.place_image(element.source, element.alt_text, cursor)
            spacing = self.settings.image_spacing
        else:
            result = self.place_text(element.content, cursor)
            spacing = self.settings.text_spacing

        result.page_break = page_break
        result.page = cursor.page
        cursor.y += result.height + spacing
        return result
