"""
Turns note markup into the flat list of text runs and images that gets laid
out on PDF pages.

Only the top-level nodes of the note are looked at. A nested container
contributes its flattened text followed by every image found inside it.
"""
import logging
import urllib.parse
from dataclasses import dataclass
from typing import List, Optional, Union

from bs4 import BeautifulSoup, NavigableString, Tag
from bs4.element import PreformattedString

logger = logging.getLogger(__name__)

DEFAULT_ALT_TEXT = "Image"


@dataclass(frozen=True)
class TextElement:
    content: str


@dataclass(frozen=True)
class ImageElement:
    source: str
    alt_text: str = DEFAULT_ALT_TEXT


LayoutElement = Union[TextElement, ImageElement]


def resolve_source(src, base_url=None):
    """Resolve an <img> src the way a browser's img.src would."""
    src = (src or "").strip()
    if not src or not base_url or src.startswith('data:'):
        return src
    return urllib.parse.urljoin(base_url, src)


def _image_element(img: Tag, base_url) -> ImageElement:
    return ImageElement(
        source=resolve_source(img.get('src'), base_url),
        alt_text=img.get('alt') or DEFAULT_ALT_TEXT,
    )


def parse_content(markup: Optional[str], base_url: Optional[str] = None) -> List[LayoutElement]:
    """
    Parse note markup into layout elements in reading order.

    Args:
        markup: HTML fragment of the note body.
        base_url: Optional base used to resolve relative image sources.

    Returns:
        List of TextElement / ImageElement. Empty for empty markup.
    """
    elements: List[LayoutElement] = []
    if not markup:
        return elements

    # html.parser keeps the fragment as-is (no <html>/<body> wrapper)
    soup = BeautifulSoup(markup, 'html.parser')
    # A full document contributes only what is inside its <body>
    root = soup.body or soup

    for child in root.contents:
        if isinstance(child, NavigableString):
            # Comments, doctypes, CDATA... are not text nodes
            if isinstance(child, PreformattedString):
                continue
            text = child.strip()
            if text:
                elements.append(TextElement(content=text))
        elif isinstance(child, Tag):
            if child.name == 'img':
                elements.append(_image_element(child, base_url))
                continue

            text = child.get_text().strip()
            if text:
                elements.append(TextElement(content=text))

            for img in child.find_all('img'):
                elements.append(_image_element(img, base_url))

    logger.debug(f"Parsed {len(elements)} layout elements from {len(markup)} chars of markup")
    return elements
