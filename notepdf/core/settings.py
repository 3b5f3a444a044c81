import json
import logging
import sys
from dataclasses import asdict, dataclass, fields
from pathlib import Path

logger = logging.getLogger(__name__)

CONFIG_FILENAME = "notepdf.json"


@dataclass
class ExportSettings:
    """Page geometry, typography and image policy for one export."""

    page_format: str = "a4"
    orientation: str = "portrait"
    unit: str = "mm"
    margin: float = 20.0
    # A page break is inserted when the cursor is deeper than this above the page bottom.
    bottom_threshold: float = 30.0

    title_font_size: int = 20
    title_line_height: float = 10.0
    title_spacing: float = 10.0

    text_font_size: int = 12
    text_line_height: float = 7.0
    text_spacing: float = 5.0

    fallback_font_size: int = 10
    fallback_line_height: float = 5.0

    # Images are assumed to be supplied at roughly 10x their display size.
    image_scale: float = 0.1
    max_image_height: float = 100.0
    image_spacing: float = 10.0
    jpeg_quality: int = 80
    request_timeout: float = 10.0

    @classmethod
    def from_dict(cls, data):
        """Build settings from a plain dict, ignoring unknown keys."""
        if not isinstance(data, dict):
            raise ValueError(f"Settings must be a JSON object, got {type(data).__name__}")

        known = {f.name: f for f in fields(cls)}
        values = {}
        for key, value in data.items():
            if key not in known:
                logger.warning(f"Ignoring unknown export setting '{key}'")
                continue
            values[key] = value

        settings = cls(**values)
        settings.validate()
        return settings

    def to_dict(self):
        return asdict(self)

    def validate(self):
        if self.margin < 0:
            raise ValueError(f"margin must not be negative (got {self.margin})")
        if self.image_scale <= 0:
            raise ValueError(f"image_scale must be positive (got {self.image_scale})")
        if self.max_image_height <= 0:
            raise ValueError(f"max_image_height must be positive (got {self.max_image_height})")
        if not 1 <= self.jpeg_quality <= 100:
            raise ValueError(f"jpeg_quality must be between 1 and 100 (got {self.jpeg_quality})")


class SettingsStore:
    _instance = None

    def __init__(self, config_path=None):
        if config_path is not None:
            self.config_path = Path(config_path)
        elif getattr(sys, 'frozen', False):
            # Next to the executable when bundled
            self.config_path = Path(sys.executable).parent / CONFIG_FILENAME
        else:
            self.config_path = Path(CONFIG_FILENAME).resolve()

    @staticmethod
    def get_instance():
        if SettingsStore._instance is None:
            SettingsStore._instance = SettingsStore()
            logger.info(f"SettingsStore: Created NEW instance for {SettingsStore._instance.config_path}")
        return SettingsStore._instance

    def load(self):
        """Return the stored settings, or defaults if the file is missing or broken."""
        if not self.config_path.exists():
            logger.debug(f"No settings file at {self.config_path}, using defaults")
            return ExportSettings()

        try:
            with open(self.config_path, 'r', encoding='utf-8') as f:
                data = json.load(f)
            return ExportSettings.from_dict(data)
        except (OSError, ValueError, TypeError) as e:
            logger.error(f"Error reading export settings from {self.config_path}: {e}")
            return ExportSettings()

    def save(self, settings):
        """Persist settings. Returns True on success."""
        try:
            self.config_path.parent.mkdir(parents=True, exist_ok=True)
            with open(self.config_path, 'w', encoding='utf-8') as f:
                json.dump(settings.to_dict(), f, indent=4)
            return True
        except OSError as e:
            logger.error(f"Error saving export settings: {e}")
            return False
