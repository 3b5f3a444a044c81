"""
Thin page-oriented facade over the reportlab canvas.

Coordinates are expressed in document units (mm by default) with the origin
at the top-left corner of the page, and text is positioned by its baseline.
"""
import io
import logging
from pathlib import Path
from typing import List

from reportlab.lib.pagesizes import A3, A4, A5, LEGAL, LETTER, landscape, portrait
from reportlab.lib.units import cm, inch, mm
from reportlab.lib.utils import ImageReader, simpleSplit
from reportlab.pdfgen import canvas as pdf_canvas

logger = logging.getLogger(__name__)

PAGE_FORMATS = {
    'a3': A3,
    'a4': A4,
    'a5': A5,
    'letter': LETTER,
    'legal': LEGAL,
}

UNITS = {
    'pt': 1.0,
    'mm': mm,
    'cm': cm,
    'in': inch,
}

FONT_FAMILY = {
    'normal': 'Helvetica',
    'bold': 'Helvetica-Bold',
    'italic': 'Helvetica-Oblique',
    'bolditalic': 'Helvetica-BoldOblique',
}

IMAGE_FORMATS = {'JPEG', 'JPG', 'PNG', 'GIF', 'BMP', 'TIFF', 'WEBP'}

# Distance between consecutive baselines, relative to the font size
LINE_HEIGHT_FACTOR = 1.15


class PdfCanvas:
    """A single PDF document being drawn page by page."""

    def __init__(self, format: str = 'a4', orientation: str = 'portrait', unit: str = 'mm'):
        page_size = PAGE_FORMATS.get(format.lower())
        if page_size is None:
            raise ValueError(f"Unsupported page format '{format}'")
        if unit not in UNITS:
            raise ValueError(f"Unsupported unit '{unit}'")
        if orientation == 'landscape':
            page_size = landscape(page_size)
        elif orientation == 'portrait':
            page_size = portrait(page_size)
        else:
            raise ValueError(f"Unsupported orientation '{orientation}'")

        self._scale = UNITS[unit]
        self._page_size = page_size
        self._buffer = io.BytesIO()
        self._canvas = pdf_canvas.Canvas(self._buffer, pagesize=page_size)
        self._font_size = 16
        self._font_style = 'normal'
        self._finished = False
        self.page_count = 1

    # ---------------------------------------------------------------------
    # Geometry
    # ---------------------------------------------------------------------
    @property
    def page_width(self) -> float:
        return self._page_size[0] / self._scale

    @property
    def page_height(self) -> float:
        return self._page_size[1] / self._scale

    def _to_page(self, x, y):
        """Top-left document units -> bottom-left points."""
        return x * self._scale, self._page_size[1] - y * self._scale

    # ---------------------------------------------------------------------
    # Text
    # ---------------------------------------------------------------------
    @property
    def font_name(self) -> str:
        return FONT_FAMILY[self._font_style]

    @property
    def font_size(self) -> int:
        return self._font_size

    def set_font_size(self, size):
        if size <= 0:
            raise ValueError(f"Font size must be positive (got {size})")
        self._font_size = size

    def set_font_style(self, style):
        if style not in FONT_FAMILY:
            raise ValueError(f"Unsupported font style '{style}'")
        self._font_style = style

    def split_text_to_size(self, text: str, max_width: float) -> List[str]:
        """Wrap text to max_width using the current font. Explicit newlines are kept."""
        return simpleSplit(text, self.font_name, self._font_size, max_width * self._scale)

    def text(self, lines, x, y):
        """Draw one line or a list of lines; the first baseline sits at y."""
        self._check_open()
        if isinstance(lines, str):
            lines = [lines]

        leading = self._font_size * LINE_HEIGHT_FACTOR
        px, py = self._to_page(x, y)
        self._canvas.setFont(self.font_name, self._font_size)
        for i, line in enumerate(lines):
            self._canvas.drawString(px, py - i * leading, line)

    # ---------------------------------------------------------------------
    # Pages & images
    # ---------------------------------------------------------------------
    def add_page(self):
        self._check_open()
        self._canvas.showPage()
        self.page_count += 1
        logger.debug(f"PdfCanvas: started page {self.page_count}")

    def add_image(self, data: bytes, format: str, x, y, width, height):
        """
        Embed encoded raster bytes with their top-left corner at (x, y).

        Raises on an unknown format tag or when reportlab cannot read the data.
        """
        self._check_open()
        if format.upper() not in IMAGE_FORMATS:
            raise ValueError(f"Unsupported image format '{format}'")
        if width <= 0 or height <= 0:
            raise ValueError(f"Image size must be positive (got {width}x{height})")

        reader = ImageReader(io.BytesIO(data))
        # Forces decoding so malformed data fails here rather than at save time
        reader.getSize()

        px, py = self._to_page(x, y + height)
        self._canvas.drawImage(
            reader,
            px, py,
            width=width * self._scale,
            height=height * self._scale,
            mask='auto'
        )

    # ---------------------------------------------------------------------
    # Serialization
    # ---------------------------------------------------------------------
    def output(self) -> bytes:
        """Finish the document and return its bytes. Safe to call repeatedly."""
        if not self._finished:
            self._canvas.save()
            self._finished = True
            logger.info(f"PdfCanvas: Generated {self._buffer.getbuffer().nbytes} bytes over {self.page_count} page(s).")
        return self._buffer.getvalue()

    def save(self, path) -> Path:
        path = Path(path)
        path.write_bytes(self.output())
        return path

    def _check_open(self):
        if self._finished:
            raise RuntimeError("PDF document has already been serialized")
