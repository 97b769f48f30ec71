"""Widget components."""

from .image_label import ImageLabel

__all__ = ["ImageLabel"]
