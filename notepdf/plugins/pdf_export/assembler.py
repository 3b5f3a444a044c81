import logging
import re
from dataclasses import dataclass, field
from typing import List, Optional

from notepdf.core.pdf_canvas import PdfCanvas
from notepdf.core.settings import ExportSettings
from notepdf.plugins.pdf_export.images import ImageLoader
from notepdf.plugins.pdf_export.layout import PageGeometry, PageLayout, PlacementResult

logger = logging.getLogger(__name__)

UNSAFE_FILENAME_CHARS = re.compile(r'[^a-zA-Z0-9]')


def sanitize_stem(title: str) -> str:
    return UNSAFE_FILENAME_CHARS.sub('_', title).lower()


def sanitize_filename(title: str) -> str:
    """'My Notes!!' -> 'my_notes__.pdf'"""
    return f"{sanitize_stem(title)}.pdf"


@dataclass
class AssembledDocument:
    pdf: PdfCanvas
    filename: str
    title_placement: PlacementResult
    placements: List[PlacementResult] = field(default_factory=list)
    # Indices of elements that were moved to a fresh page
    page_breaks: List[int] = field(default_factory=list)

    @property
    def page_count(self) -> int:
        return self.pdf.page_count

    def to_bytes(self) -> bytes:
        return self.pdf.output()


class DocumentAssembler:
    """Lays out a title and a list of elements into a finished PDF document."""

    def __init__(self, settings: Optional[ExportSettings] = None, image_loader=None,
                 canvas_factory=PdfCanvas):
        self.settings = settings or ExportSettings()
        self.image_loader = image_loader or ImageLoader(self.settings)
        self.canvas_factory = canvas_factory

    def create_canvas(self):
        s = self.settings
        return self.canvas_factory(format=s.page_format, orientation=s.orientation, unit=s.unit)

    def assemble(self, title: str, elements) -> AssembledDocument:
        pdf = self.create_canvas()
        geometry = PageGeometry.for_canvas(pdf, self.settings)
        layout = PageLayout(pdf, geometry, self.settings, self.image_loader)

        cursor = layout.new_cursor()
        document = AssembledDocument(
            pdf=pdf,
            filename=sanitize_filename(title),
            title_placement=layout.place_title(title, cursor)
        )

        # Strictly sequential: each image is resolved before the next element is measured
        for index, element in enumerate(elements):
            result = layout.place(element, cursor)
            document.placements.append(result)
            if result.page_break:
                document.page_breaks.append(index)

        fallbacks = sum(1 for p in document.placements if p.fallback)
        logger.info(
            f"Assembled '{title}': {len(document.placements)} elements on "
            f"{document.page_count} page(s), {fallbacks} image fallback(s)"
        )
        return document
