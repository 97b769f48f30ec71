"""Image information dialog (file data and EXIF summary)."""

from PySide6.QtCore import Qt, QUrl
from PySide6.QtGui import QDesktopServices
from PySide6.QtWidgets import QDialog, QFormLayout, QLabel, QPushButton, QVBoxLayout, QDialogButtonBox

_LABELS = (
    ("Name", "Name"),
    ("Size", "Image size"),
    ("FileSize", "File size"),
    ("FileTime", "File time"),
    ("Created", "Taken"),
    ("Machine", "Camera"),
    ("GeoLocation", "GPS"),
)


class InfoDialog(QDialog):
    """Shows the dictionary returned by ``get_image_info``.

    A "Show on map" button opens the GPS position in the browser when the
    image carries one.
    """

    def __init__(self, info: dict, parent=None):
        super().__init__(parent)
        self.setWindowTitle("Image information")
        self.info = info

        form = QFormLayout()
        for key, caption in _LABELS:
            if key in info:
                value = QLabel(info[key])
                value.setTextInteractionFlags(Qt.TextSelectableByMouse)
                form.addRow(f"{caption}:", value)

        layout = QVBoxLayout(self)
        layout.addLayout(form)

        if "Map" in info:
            map_btn = QPushButton("Show on map")
            map_btn.clicked.connect(self.open_map)
            layout.addWidget(map_btn)

        buttons = QDialogButtonBox(QDialogButtonBox.Close)
        buttons.rejected.connect(self.reject)
        layout.addWidget(buttons)

    def open_map(self):
        QDesktopServices.openUrl(QUrl(self.info["Map"]))
