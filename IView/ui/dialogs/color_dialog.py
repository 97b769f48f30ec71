"""Color correction dialog (gamma, contrast, brightness)."""

from PySide6.QtCore import Qt, Signal
from PySide6.QtWidgets import (
    QDialog,
    QVBoxLayout,
    QHBoxLayout,
    QLabel,
    QSlider,
    QDoubleSpinBox,
    QPushButton,
)

from ...core.constants import BRIGHTNESS_RANGE, CONTRAST_RANGE, GAMMA_RANGE

# Slider positions per unit value
_SLIDER_RESOLUTION = 100


class ColorDialog(QDialog):
    """Modeless dialog editing the continuous color correction values.

    Emits:
        values_changed(float, float, float): (gamma, contrast, brightness)
    """

    values_changed = Signal(float, float, float)

    SLIDER_STYLESHEET = """
        QSlider::groove:horizontal { background: #ddd; height: 6px; border-radius: 3px; }
        QSlider::handle:horizontal { background: #666; width: 16px; margin: -5px 0; border-radius: 8px; }
        QSlider::handle:horizontal:hover { background: #444; }
    """

    def __init__(self, parent=None, gamma=1.0, contrast=0.0, brightness=0.0):
        super().__init__(parent)
        self.setWindowTitle("Color correction")
        self.resize(420, 240)

        layout = QVBoxLayout(self)
        layout.setSpacing(14)
        self.gamma_slider, self.gamma_spin = self._build_row(layout, "Gamma", GAMMA_RANGE, gamma)
        self.contrast_slider, self.contrast_spin = self._build_row(layout, "Contrast", CONTRAST_RANGE, contrast)
        self.brightness_slider, self.brightness_spin = self._build_row(
            layout, "Brightness", BRIGHTNESS_RANGE, brightness
        )

        reset_btn = QPushButton("Reset")
        reset_btn.clicked.connect(self.reset)
        btn_layout = QHBoxLayout()
        btn_layout.addStretch()
        btn_layout.addWidget(reset_btn)
        layout.addLayout(btn_layout)

    def _build_row(self, layout, caption, value_range, initial):
        row = QHBoxLayout()
        row.setSpacing(10)

        label = QLabel(caption)
        label.setStyleSheet("font-weight: bold; font-size: 10pt; min-width: 80px;")
        row.addWidget(label)

        slider = QSlider(Qt.Horizontal)
        slider.setRange(int(value_range[0] * _SLIDER_RESOLUTION), int(value_range[1] * _SLIDER_RESOLUTION))
        slider.setStyleSheet(self.SLIDER_STYLESHEET)
        row.addWidget(slider, 1)

        spin = QDoubleSpinBox()
        spin.setDecimals(2)
        spin.setSingleStep(0.01)
        spin.setRange(value_range[0], value_range[1])
        row.addWidget(spin)

        slider.blockSignals(True)
        spin.blockSignals(True)
        slider.setValue(int(round(initial * _SLIDER_RESOLUTION)))
        spin.setValue(initial)
        slider.blockSignals(False)
        spin.blockSignals(False)

        slider.valueChanged.connect(lambda v, s=spin: self._on_slider_changed(v, s))
        spin.valueChanged.connect(lambda v, s=slider: self._on_spin_changed(v, s))

        layout.addLayout(row)
        return slider, spin

    def _on_slider_changed(self, value, spin):
        spin.blockSignals(True)
        spin.setValue(value / _SLIDER_RESOLUTION)
        spin.blockSignals(False)
        self._emit()

    def _on_spin_changed(self, value, slider):
        slider.blockSignals(True)
        slider.setValue(int(round(value * _SLIDER_RESOLUTION)))
        slider.blockSignals(False)
        self._emit()

    def _emit(self):
        self.values_changed.emit(*self.get_values())

    def get_values(self):
        """Return (gamma, contrast, brightness)."""
        return self.gamma_spin.value(), self.contrast_spin.value(), self.brightness_spin.value()

    def set_values(self, gamma, contrast, brightness):
        """Update the controls without emitting ``values_changed``."""
        for spin, slider, value in (
            (self.gamma_spin, self.gamma_slider, gamma),
            (self.contrast_spin, self.contrast_slider, contrast),
            (self.brightness_spin, self.brightness_slider, brightness),
        ):
            spin.blockSignals(True)
            slider.blockSignals(True)
            spin.setValue(value)
            slider.setValue(int(round(value * _SLIDER_RESOLUTION)))
            spin.blockSignals(False)
            slider.blockSignals(False)

    def reset(self):
        self.set_values(1.0, 0.0, 0.0)
        self._emit()
