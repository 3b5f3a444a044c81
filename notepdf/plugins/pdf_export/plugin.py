import logging
from pathlib import Path
from typing import Optional

from notepdf.core.host import UNTITLED_NOTE, HostApplication, NotifyType
from notepdf.core.plugin_interface import PluginInterface
from notepdf.core.settings import ExportSettings, SettingsStore
from notepdf.features.registry import Feature, FeatureState, FeatureType
from notepdf.plugins.pdf_export.assembler import DocumentAssembler
from notepdf.plugins.pdf_export.content import parse_content

logger = logging.getLogger(__name__)

PLUGIN_METADATA = {
    'name': 'PDF Export with Images',
    'version': '1.0.0',
    'description': 'Exports the current note to a paginated PDF, keeping its text and inline images.',
    'author': 'notepdf',
    'category': 'export',
    'icon': 'fa-file-pdf',
}

EXPORT_ACTION_LABEL = "Export to PDF"


def export_pdf(content_html: str, title: str = UNTITLED_NOTE, settings: Optional[ExportSettings] = None,
               base_url: Optional[str] = None) -> bytes:
    """
    Export note markup to PDF without going through a host.
    Returns bytes.
    """
    elements = parse_content(content_html, base_url=base_url)
    document = DocumentAssembler(settings).assemble(title, elements)
    return document.to_bytes()


class PdfExportPlugin(PluginInterface):
    """
    Adds an "Export to PDF" action to notes.

    The host application is injected at construction; every export reads the
    current note through it and hands the finished file back to it.
    """

    def __init__(self, app: HostApplication, settings: Optional[ExportSettings] = None,
                 assembler: Optional[DocumentAssembler] = None, base_url: Optional[str] = None):
        self.app = app
        self.settings = settings or SettingsStore.get_instance().load()
        self.assembler = assembler or DocumentAssembler(self.settings)
        self.base_url = base_url

    def get_meta(self):
        return {key: PLUGIN_METADATA[key] for key in ('name', 'version', 'description', 'author')}

    def initialize(self, registry):
        logger.info("PDF Export Plugin initialized")

    def shutdown(self):
        logger.info("PDF Export Plugin shutting down")

    def get_features(self):
        return [
            Feature(
                "pdf_export_note",
                handler=self.export_to_pdf,
                feature_type=FeatureType.NOTE_ACTION,
                state=FeatureState.STANDARD,
                meta={"label": EXPORT_ACTION_LABEL}
            ),
            Feature(
                "pdf_export",
                handler=export_pdf,
                feature_type=FeatureType.EXPORT_HANDLER,
                state=FeatureState.STANDARD,
                meta={
                    "extension": "pdf",
                    "label": "PDF Document (.pdf)",
                    "version": PLUGIN_METADATA['version']
                }
            ),
        ]

    def export_to_pdf(self) -> Optional[Path]:
        """
        Export the host's current note. Never raises; the outcome is reported
        to the user through app.notify. Returns the saved file path on success.
        """
        try:
            note = self.app.get_current_note()
            if not note:
                self.app.notify("No note selected", NotifyType.INFO)
                return None

            self.app.notify("Generating PDF...", NotifyType.INFO)

            content = self.app.get_note_content(note.uuid)
            return self.generate_pdf(content, note.title)

        except Exception as e:
            logger.exception(f"PDF export error: {e}")
            self.app.notify(f"Failed to export PDF: {e}", NotifyType.ERROR)
            return None

    def generate_pdf(self, content: str, title: str) -> Path:
        elements = parse_content(content, base_url=self.base_url)
        document = self.assembler.assemble(title, elements)

        path = self.app.save_file(document.filename, document.to_bytes())

        self.app.notify("PDF exported successfully!", NotifyType.SUCCESS)
        return path
