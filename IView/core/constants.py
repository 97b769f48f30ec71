"""Application-wide constants for IView.

This module contains shared constants used across the application.
"""

# Magnification limits
MIN_MAGNIFICATION = 0.1
MAX_MAGNIFICATION = 10.0

# Discrete zoom step (keyboard +/- or Ctrl+wheel), before scaling with magnification
ZOOM_STEP = 0.05

# Allowance around the image content for scroll bars and window padding
CHROME_MARGIN = (17.0, 40.0)

# Extra height reserved for the title bar when measuring the window frame
TITLE_ALLOWANCE = 20.0

# Window placement offsets (centered / pinned top-left)
CENTER_POSITION_OFFSET = (8.0, 10.0)
TOP_LEFT_POSITION = (-8.0, 0.0)

# Color correction ranges (dialog sliders)
GAMMA_RANGE = (0.1, 3.0)
CONTRAST_RANGE = (-1.0, 1.0)
BRIGHTNESS_RANGE = (-1.0, 1.0)

# Gamma is floored here before evaluating the curve
MIN_GAMMA = 0.01

# Supported image file extensions (lowercase, without dot)
SUPPORTED_EXTENSIONS = ("bmp", "jpg", "jpeg", "png", "tif", "gif", "webp")
