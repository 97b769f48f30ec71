"""UI components package."""

from .viewer import ImageViewer
from .widgets import ImageLabel
from .dialogs import HelpDialog, ColorDialog, InfoDialog, SaveOptionsDialog

__all__ = [
    "ImageViewer",
    "ImageLabel",
    "HelpDialog",
    "ColorDialog",
    "InfoDialog",
    "SaveOptionsDialog",
]
