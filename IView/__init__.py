"""IView - A simple, fast image viewer.

This package provides a Qt-based single-window image viewer with the
following features:

Core Features:
    - Opening a single image and cycling through the images of its folder
    - Sorting the folder by name, extension, date or size
    - Automatic fit of each new image to the screen
    - Stepwise zoom (+/- and Ctrl+wheel) anchored at the cursor
    - Rotation in quarter turns, EXIF orientation applied at load

Color Correction:
    - Gamma, contrast and brightness through a per-channel lookup table
    - Red/green/blue channel toggles and inversion

Other:
    - Save as JPEG/WebP (with quality options), PNG, TIFF, GIF, BMP
    - Copy to / paste from the clipboard
    - Image information (EXIF date, camera, GPS with map link)
    - Settings persisted as JSON between sessions

Package Structure:
    - core/: UI-independent logic (LUT, collection, viewport, session, settings, I/O)
    - ui/: UI components (viewer, widgets, dialogs)

Quick Start:
    from IView import main
    main()

Dependencies:
    - PySide6: Qt for Python
    - numpy: Pixel buffers and lookup tables
    - opencv-python: Decoding and rotation
    - Pillow: GIF decoding and save-as
    - exifread: EXIF orientation and metadata
"""

from .app import main
from .ui import ImageViewer, HelpDialog, ColorDialog, InfoDialog
from .core import ViewSession, numpy_to_qimage, load_image, is_image_file, get_image_info

__version__ = "0.1.0"
__all__ = [
    "main",
    "ImageViewer",
    "HelpDialog",
    "ColorDialog",
    "InfoDialog",
    "ViewSession",
    "numpy_to_qimage",
    "load_image",
    "is_image_file",
    "get_image_info",
]
