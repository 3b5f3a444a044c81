import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Optional

logger = logging.getLogger(__name__)

UNTITLED_NOTE = "Untitled Note"


class NotifyType(str, Enum):
    INFO = "info"
    SUCCESS = "success"
    ERROR = "error"


@dataclass(frozen=True)
class Note:
    """A note as handed out by the host. Content is fetched separately."""
    uuid: str
    name: Optional[str] = None

    @property
    def title(self) -> str:
        return self.name or UNTITLED_NOTE


class HostApplication(ABC):
    """
    Services a plugin may use from the note-taking application that loads it.
    """

    output_dir = Path(".")

    @abstractmethod
    def get_current_note(self) -> Optional[Note]:
        """Return the note the user is looking at, or None."""

    @abstractmethod
    def get_note_content(self, note_id: str) -> str:
        """Return the HTML markup of a note."""

    @abstractmethod
    def notify(self, message: str, type: NotifyType = NotifyType.INFO):
        """Show a message to the user."""

    def save_file(self, filename: str, data: bytes) -> Path:
        """Store a generated file for the user and return where it went."""
        target_dir = Path(self.output_dir)
        target_dir.mkdir(parents=True, exist_ok=True)
        path = target_dir / filename
        path.write_bytes(data)
        logger.info(f"Saved {len(data)} bytes to {path}")
        return path
