import logging
from pathlib import Path

from notepdf.core.host import HostApplication, Note, NotifyType

logger = logging.getLogger(__name__)

NOTIFY_LEVELS = {
    NotifyType.INFO: logging.INFO,
    NotifyType.SUCCESS: logging.INFO,
    NotifyType.ERROR: logging.ERROR,
}


class LocalNoteHost(HostApplication):
    """
    Host backed by an HTML file on disk, for exporting outside a note app.
    The file's path doubles as the note id.
    """

    def __init__(self, note_path=None, title=None, output_dir="."):
        self.note_path = Path(note_path) if note_path else None
        self.title = title
        self.output_dir = Path(output_dir)
        self.messages = []

    @property
    def base_url(self):
        """file:// URL of the note's folder, for resolving relative image paths."""
        if self.note_path is None:
            return None
        return self.note_path.resolve().parent.as_uri() + "/"

    def get_current_note(self):
        if self.note_path is None:
            return None
        return Note(uuid=str(self.note_path), name=self.title or self.note_path.stem)

    def get_note_content(self, note_id):
        logger.info(f"Reading {note_id}...")
        with open(note_id, "r", encoding="utf-8") as f:
            return f.read()

    def notify(self, message, type=NotifyType.INFO):
        type = NotifyType(type)
        self.messages.append((message, type))
        logger.log(NOTIFY_LEVELS[type], message)
