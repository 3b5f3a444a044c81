import pytest

from notepdf.core.settings import ExportSettings
from notepdf.plugins.pdf_export.assembler import DocumentAssembler, sanitize_filename, sanitize_stem
from notepdf.plugins.pdf_export.content import ImageElement, TextElement
from tests.fakes import RecordingCanvas


@pytest.mark.parametrize("title, expected", [
    ("My Notes!!", "my_notes__.pdf"),
    ("Untitled Note", "untitled_note.pdf"),
    ("2024 Q3 Plan", "2024_q3_plan.pdf"),
    ("a/b\\c", "a_b_c.pdf"),
    ("Café", "caf_.pdf"),
])
def test_filename_from_title(title, expected):
    assert sanitize_filename(title) == expected


def test_sanitized_stem_is_stable():
    stem = sanitize_stem("Weekly Sync: Notes & Actions")
    assert sanitize_stem(stem) == stem


def recording_assembler(loader=None, **settings):
    return DocumentAssembler(ExportSettings(**settings), image_loader=loader, canvas_factory=RecordingCanvas)


def test_title_only_document():
    document = recording_assembler().assemble("Empty", [])

    assert document.filename == "empty.pdf"
    assert document.page_count == 1
    assert document.placements == []
    assert document.pdf.texts[0]["lines"] == ["Empty"]


def test_page_breaks_follow_cursor_positions():
    # Title ends at 40; each one-line paragraph advances 12 and the break line is 267
    elements = [TextElement(f"line {i}") for i in range(45)]

    document = recording_assembler().assemble("Many", elements)

    assert document.page_breaks == [19, 40]
    assert document.page_count == 3
    texts = document.pdf.texts[1:]
    assert texts[19]["y"] == 20
    assert texts[19]["page"] == 2
    assert texts[40]["page"] == 3


def test_elements_are_placed_in_order():
    class Loader:
        def __init__(self):
            self.sources = []

        def load_and_place(self, pdf, source, alt_text, x, y, max_width):
            from notepdf.plugins.pdf_export.layout import PlacementResult
            self.sources.append(source)
            return PlacementResult(height=30, image_size=(60, 30))

    loader = Loader()
    elements = [TextElement("a"), ImageElement("1.png"), TextElement("b"), ImageElement("2.png")]

    document = recording_assembler(loader).assemble("Ordered", elements)

    assert loader.sources == ["1.png", "2.png"]
    assert [p.height for p in document.placements] == [7, 30, 7, 30]
    assert [t["lines"] for t in document.pdf.texts[1:]] == [["a"], ["b"]]


def test_canvas_created_from_settings():
    created = {}

    def factory(**kwargs):
        created.update(kwargs)
        return RecordingCanvas(**kwargs)

    assembler = DocumentAssembler(ExportSettings(page_format="letter", orientation="landscape"),
                                  canvas_factory=factory)
    assembler.assemble("x", [])

    assert created == {"format": "letter", "orientation": "landscape", "unit": "mm"}


def test_to_bytes_returns_canvas_output():
    document = recording_assembler().assemble("x", [TextElement("y")])
    assert document.to_bytes() == b"%PDF-recorded"
