import argparse
import logging
import sys
from pathlib import Path

# Add project root to sys.path
PROJECT_ROOT = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from notepdf.core.local_host import LocalNoteHost
from notepdf.core.registry import PluginRegistry
from notepdf.core.settings import SettingsStore
from notepdf.plugins.pdf_export.plugin import EXPORT_ACTION_LABEL, PdfExportPlugin


def main(argv=None):
    parser = argparse.ArgumentParser(description="Export an HTML note to PDF.")
    parser.add_argument("note", help="Path to the note's HTML file.")
    parser.add_argument("--title", help="Document title (defaults to the file name).")
    parser.add_argument("--output-dir", default=".", help="Folder the PDF is written to.")
    parser.add_argument("--config", help="Path to a notepdf.json settings file.")
    parser.add_argument("-v", "--verbose", action="store_true", help="Log debug output.")
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format='%(levelname)s: %(message)s',
        stream=sys.stdout
    )

    store = SettingsStore(args.config) if args.config else SettingsStore.get_instance()
    host = LocalNoteHost(args.note, title=args.title, output_dir=args.output_dir)

    registry = PluginRegistry()
    registry.register(PdfExportPlugin(host, settings=store.load(), base_url=host.base_url))

    saved = registry.run_note_action(EXPORT_ACTION_LABEL)
    if saved is None:
        return 1
    print(f"SUCCESS: {saved}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
