"""Save-as options dialog for lossy formats."""

from PySide6.QtWidgets import QDialog, QFormLayout, QSpinBox, QCheckBox, QDialogButtonBox, QVBoxLayout

from ...core.image_io import JpegOptions, WebpOptions, SaveOptions


class SaveOptionsDialog(QDialog):
    """Edits JPEG quality, or WebP quality and lossless mode.

    Only constructed for option variants that have something to tune;
    ``PlainOptions`` formats are saved without asking.
    """

    def __init__(self, options: SaveOptions, parent=None):
        super().__init__(parent)
        self.setWindowTitle("Save options")
        self._options = options

        form = QFormLayout()
        self.quality_spin = QSpinBox()
        self.quality_spin.setRange(1, 100)
        self.quality_spin.setValue(options.quality)
        form.addRow("Quality:", self.quality_spin)

        self.lossless_check = None
        if isinstance(options, WebpOptions):
            self.lossless_check = QCheckBox("Lossless")
            self.lossless_check.setChecked(options.lossless)
            self.lossless_check.toggled.connect(lambda on: self.quality_spin.setEnabled(not on))
            self.quality_spin.setEnabled(not options.lossless)
            form.addRow("", self.lossless_check)

        buttons = QDialogButtonBox(QDialogButtonBox.Ok | QDialogButtonBox.Cancel)
        buttons.accepted.connect(self.accept)
        buttons.rejected.connect(self.reject)

        layout = QVBoxLayout(self)
        layout.addLayout(form)
        layout.addWidget(buttons)

    def options(self) -> SaveOptions:
        """Return the options as edited."""
        if isinstance(self._options, WebpOptions):
            return WebpOptions(quality=self.quality_spin.value(), lossless=self.lossless_check.isChecked())
        return JpegOptions(quality=self.quality_spin.value())
