# Test doubles shared by the test-suite.
import io

from PIL import Image

from notepdf.core.host import HostApplication, Note, NotifyType

A4_WIDTH_MM = 210.0
A4_HEIGHT_MM = 297.0


def make_image_bytes(width=400, height=200, format="PNG", color=(200, 30, 30)):
    buffer = io.BytesIO()
    mode = "RGBA" if format == "PNG" else "RGB"
    Image.new(mode, (width, height), color).save(buffer, format=format)
    return buffer.getvalue()


class FakeHost(HostApplication):
    """In-memory host holding at most one current note."""

    def __init__(self, note=None, content="", output_dir=".", content_error=None):
        self.note = note
        self.contents = {note.uuid: content} if note else {}
        self.output_dir = output_dir
        self.content_error = content_error
        self.messages = []
        self.saved = []

    def get_current_note(self):
        return self.note

    def get_note_content(self, note_id):
        if self.content_error:
            raise self.content_error
        return self.contents[note_id]

    def notify(self, message, type=NotifyType.INFO):
        self.messages.append((message, NotifyType(type)))

    def save_file(self, filename, data):
        path = super().save_file(filename, data)
        self.saved.append(path)
        return path


def note(name="My Notes!!", uuid="note-1"):
    return Note(uuid=uuid, name=name)


class RecordingCanvas:
    """
    Stand-in for PdfCanvas that records drawing calls.

    Text wraps only at explicit newlines so line counts are predictable.
    """

    def __init__(self, format="a4", orientation="portrait", unit="mm", fail_images=False):
        self.page_width = A4_WIDTH_MM
        self.page_height = A4_HEIGHT_MM
        self.page_count = 1
        self.font_size = 16
        self.font_style = "normal"
        self.fail_images = fail_images
        self.texts = []
        self.images = []

    def set_font_size(self, size):
        self.font_size = size

    def set_font_style(self, style):
        self.font_style = style

    def split_text_to_size(self, text, max_width):
        return text.split("\n")

    def text(self, lines, x, y):
        self.texts.append({
            "lines": list(lines), "x": x, "y": y, "page": self.page_count,
            "size": self.font_size, "style": self.font_style,
        })

    def add_page(self):
        self.page_count += 1

    def add_image(self, data, format, x, y, width, height):
        if self.fail_images:
            raise ValueError("corrupt image data")
        self.images.append({
            "format": format, "x": x, "y": y, "width": width, "height": height,
            "page": self.page_count,
        })

    def output(self):
        return b"%PDF-recorded"
