"""Image viewer package with modular components.

This package provides the main ImageViewer window split into logical components:
- viewer.py: Main ImageViewer class coordinating all components
- menu_builder.py: Menu and keyboard shortcut setup
- zoom_manager.py: Applying layout results to the window and scroll area
- color_manager.py: Color correction, channel and rotation commands
- status_updater.py: Title and status bar update logic
"""

from .viewer import ImageViewer

__all__ = ["ImageViewer"]
