"""Application entry point.

This module provides the main() function that initializes the Qt application
and displays the ImageViewer window.

Usage:
    iview [image] [--debug]

    # Or as a module:
    python -m IView.app photo.jpg

    # Or from Python:
    from IView import main
    main()

Startup shows the image given on the command line; without one it shows
the clipboard image, and without that it asks for a file. If nothing can be
shown the application exits.
"""

import argparse
import logging
import sys
from pathlib import Path

from PySide6.QtWidgets import QApplication
from PySide6.QtCore import QTimer

from .core.settings import load_settings
from .logging_setup import setup_logging
from .ui.viewer import ImageViewer

log = logging.getLogger(__name__)


def parse_args(argv):
    parser = argparse.ArgumentParser(prog="iview", description="IView - simple image viewer")
    parser.add_argument("image", nargs="?", default="", help="Image file to show")
    parser.add_argument("--debug", action="store_true", help="Enable debug logging")
    return parser.parse_args(argv)


def _start(viewer: ImageViewer, image: str) -> None:
    if image and Path(image).is_file() and viewer.open_path(image):
        return
    if image:
        log.warning("Cannot show %s", image)
    if viewer.paste_from_clipboard():
        return
    viewer.open_file_dialog()
    if not viewer.session.has_image:
        log.info("No image to show, exiting")
        viewer.close()


def main(argv=None):
    """Run the image viewer application.

    Args:
        argv: Command-line arguments without the program name (defaults to sys.argv[1:])

    Returns:
        Exit code from QApplication.exec()
    """
    args = parse_args(sys.argv[1:] if argv is None else argv)
    setup_logging(args.debug)

    app = QApplication(sys.argv[:1])
    app.setApplicationName("IView")
    app.setOrganizationName("IView")

    settings = load_settings()
    w = ImageViewer(settings)
    w.show()
    # Let the window get its real frame geometry before the first fit
    QTimer.singleShot(0, lambda: _start(w, args.image))
    return app.exec()


if __name__ == "__main__":
    sys.exit(main())
