"""Help dialog showing keyboard shortcuts."""

from PySide6.QtWidgets import QDialog, QTextEdit, QVBoxLayout


class HelpDialog(QDialog):
    """Dialog showing keyboard shortcuts and usage help.

    Displays a read-only text widget with all available keyboard
    shortcuts.
    """

    def __init__(self, parent=None):
        super().__init__(parent)
        self.setWindowTitle("Help / Keyboard shortcuts")
        self.resize(560, 520)

        text = QTextEdit(self)
        text.setReadOnly(True)

        content = (
            "IView help\n"
            "================================\n\n"
            "[File]\n"
            "  O      : Open image\n"
            "  R      : Reopen current image\n"
            "  S      : Save as...\n"
            "  Alt+C  : Copy image to clipboard\n"
            "  Alt+V  : Paste image from clipboard\n"
            "  I      : Image information\n"
            "  F1     : This help\n"
            "  Esc    : Close dialog / exit\n\n"
            "[Navigation]\n"
            "  N / B  : Next / previous image in folder\n\n"
            "[View]\n"
            "  + / - / Ctrl+wheel : Zoom in / out\n"
            "  C      : Color correction (gamma, contrast, brightness)\n"
            "  Ctrl+R / Ctrl+G / Ctrl+B : Toggle red / green / blue channel\n"
            "  Ctrl+I : Invert colors\n"
            "  Ctrl+Right / Ctrl+Up / Ctrl+Left : Rotate 90 / 180 / 270 degrees\n"
            "  Ctrl+Down : Reset rotation\n\n"
        )
        text.setPlainText(content)

        layout = QVBoxLayout(self)
        layout.addWidget(text)
