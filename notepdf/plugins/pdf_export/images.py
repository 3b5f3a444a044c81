"""
Image loading and placement for the PDF export.

Images are resolved one at a time. Whatever goes wrong with a single image is
turned into a short italic note in the document instead of failing the export:

    [Image not found: alt]   the resource could not be fetched or decoded
    [Image: alt]             the PDF canvas rejected the decoded image
    [Image error: alt]       anything else, e.g. an unusable source
"""
import base64
import binascii
import io
import logging
import urllib.parse
import urllib.request
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Tuple

import requests
from PIL import Image, UnidentifiedImageError

from notepdf.core.pdf_canvas import IMAGE_FORMATS
from notepdf.core.settings import ExportSettings
from notepdf.plugins.pdf_export.layout import PlacementResult

logger = logging.getLogger(__name__)

DECODE_ERRORS = (UnidentifiedImageError, Image.DecompressionBombError, OSError, SyntaxError, ValueError)

# Pillow names for data that is embeddable under another tag
FORMAT_ALIASES = {
    'MPO': 'JPEG',
}

REQUEST_HEADERS = {
    'User-Agent': 'Mozilla/5.0 (compatible; notepdf/1.0; +https://pypi.org/project/notepdf/)'
}


class ImageLoadError(Exception):
    """The image could not be fetched or decoded."""


class ImageSourceError(ValueError):
    """The image source cannot be loaded at all (empty or unsupported)."""


@dataclass
class LoadedImage:
    data: bytes
    format: str
    width: int
    height: int


def decode_data_uri(uri: str) -> bytes:
    """Return the payload of a data: URI."""
    try:
        header, payload = uri.split(',', 1)
    except ValueError:
        raise ImageLoadError("Malformed data URI: missing ','")

    if header.lower().endswith(';base64'):
        try:
            # Some producers wrap or pad sloppily
            payload = ''.join(payload.split())
            return base64.b64decode(payload, validate=True)
        except (binascii.Error, ValueError) as e:
            raise ImageLoadError(f"Invalid base64 image data: {e}")
    return urllib.parse.unquote_to_bytes(payload)


def fit_image_size(natural_width, natural_height, max_width,
                   scale=0.1, max_height=100.0) -> Tuple[float, float]:
    """
    Scale natural pixel dimensions to page units.

    The width is natural_width * scale, capped at max_width; if the resulting
    height exceeds max_height the height is capped and the width recomputed.
    Aspect ratio is always preserved.
    """
    if natural_width <= 0 or natural_height <= 0:
        raise ValueError(f"Invalid image dimensions {natural_width}x{natural_height}")

    aspect_ratio = natural_width / natural_height
    width = min(max_width, natural_width * scale)
    height = width / aspect_ratio

    if height > max_height:
        height = max_height
        width = height * aspect_ratio

    return width, height


class ImageLoader:
    """Fetches images and places them (or a fallback line) on a PdfCanvas."""

    def __init__(self, settings: Optional[ExportSettings] = None, session=None, base_dir=None):
        self.settings = settings or ExportSettings()
        # requests.Session or anything with a compatible get(); defaults to the requests module
        self.session = session
        self.base_dir = Path(base_dir) if base_dir else None

    # ---------------------------------------------------------------------
    # Loading
    # ---------------------------------------------------------------------
    def load(self, source: str) -> LoadedImage:
        """
        Resolve a source into embeddable bytes.

        Data URIs are used as they are unless the canvas cannot take their
        format, in which case they become PNG; everything else is fetched and
        re-encoded as JPEG at the configured quality.

        Raises:
            ImageSourceError: empty source or unsupported URL scheme.
            ImageLoadError: fetch, decode or encode failure.
        """
        if not source or not source.strip():
            raise ImageSourceError("Image has no source")
        source = source.strip()

        if source.startswith('data:'):
            return self._decode(decode_data_uri(source), source='data URI')

        raw = self._fetch(source)
        return self._reencode(raw, source)

    def _fetch(self, source: str) -> bytes:
        parsed = urllib.parse.urlparse(source)
        scheme = parsed.scheme.lower()

        if scheme in ('http', 'https'):
            client = self.session or requests
            try:
                response = client.get(
                    source,
                    headers=REQUEST_HEADERS,
                    timeout=self.settings.request_timeout
                )
                response.raise_for_status()
            except requests.RequestException as e:
                raise ImageLoadError(f"Failed to load image {source}: {e}")
            return response.content

        if scheme == 'file':
            path = Path(urllib.request.url2pathname(parsed.path))
        elif scheme == '' or len(scheme) == 1:
            # Plain path (a single letter "scheme" is a Windows drive)
            path = Path(source)
            if not path.is_absolute() and self.base_dir is not None:
                path = self.base_dir / path
        else:
            raise ImageSourceError(f"Unsupported image source scheme '{scheme}'")

        try:
            return path.read_bytes()
        except OSError as e:
            raise ImageLoadError(f"Failed to read image {path}: {e}")

    def _decode(self, data: bytes, source: str) -> LoadedImage:
        try:
            with Image.open(io.BytesIO(data)) as img:
                img.verify()
            # verify() leaves the image unusable; reopen for the real size
            with Image.open(io.BytesIO(data)) as img:
                width, height = img.size
                fmt = img.format or 'PNG'
                fmt = FORMAT_ALIASES.get(fmt, fmt)
                if fmt not in IMAGE_FORMATS:
                    # Decodable but not embeddable as-is (ICO, PPM...): hand over a PNG
                    logger.debug(f"Converting {fmt} image from {source} to PNG")
                    buffer = io.BytesIO()
                    img.convert('RGBA').save(buffer, format='PNG')
                    data, fmt = buffer.getvalue(), 'PNG'
        except DECODE_ERRORS as e:
            raise ImageLoadError(f"Cannot decode image from {source}: {e}")
        return LoadedImage(data=data, format=fmt, width=width, height=height)

    def _reencode(self, raw: bytes, source: str) -> LoadedImage:
        try:
            with Image.open(io.BytesIO(raw)) as img:
                img.load()
                width, height = img.size
                buffer = io.BytesIO()
                img.convert('RGB').save(buffer, format='JPEG', quality=self.settings.jpeg_quality)
        except DECODE_ERRORS as e:
            raise ImageLoadError(f"Cannot decode image from {source}: {e}")
        return LoadedImage(data=buffer.getvalue(), format='JPEG', width=width, height=height)

    # ---------------------------------------------------------------------
    # Placement
    # ---------------------------------------------------------------------
    def load_and_place(self, pdf, source, alt_text, x, y, max_width) -> PlacementResult:
        """
        Draw the image at (x, y), or a fallback line if it cannot be drawn.

        Never raises for problems with the image itself.
        """
        try:
            try:
                image = self.load(source)
            except ImageLoadError as e:
                logger.warning(f"Image not found ({alt_text}): {e}")
                return self._place_fallback(pdf, f"[Image not found: {alt_text}]", x, y, max_width)

            width, height = fit_image_size(
                image.width, image.height, max_width,
                scale=self.settings.image_scale,
                max_height=self.settings.max_image_height
            )

            try:
                pdf.add_image(image.data, image.format, x, y, width, height)
            except Exception as e:
                logger.error(f"Error adding image to PDF ({alt_text}): {e}")
                return self._place_fallback(pdf, f"[Image: {alt_text}]", x, y, max_width)

            logger.debug(f"Placed {image.width}x{image.height}px image as {width:.1f}x{height:.1f} at y={y:.1f}")
            return PlacementResult(height=height, image_size=(width, height))

        except Exception as e:
            logger.error(f"Error loading image ({alt_text}): {e}")
            return self._place_fallback(pdf, f"[Image error: {alt_text}]", x, y, max_width)

    def _place_fallback(self, pdf, message, x, y, max_width) -> PlacementResult:
        pdf.set_font_size(self.settings.fallback_font_size)
        pdf.set_font_style('italic')
        lines = pdf.split_text_to_size(message, max_width)
        pdf.text(lines, x, y)
        return PlacementResult(
            height=len(lines) * self.settings.fallback_line_height,
            lines=len(lines),
            fallback=message
        )
