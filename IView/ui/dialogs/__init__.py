"""Dialogs package."""

from .help_dialog import HelpDialog
from .color_dialog import ColorDialog
from .info_dialog import InfoDialog
from .save_dialog import SaveOptionsDialog

__all__ = ["HelpDialog", "ColorDialog", "InfoDialog", "SaveOptionsDialog"]
