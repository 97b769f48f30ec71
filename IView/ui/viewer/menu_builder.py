"""Menu and keyboard shortcut configuration for ImageViewer.

This module handles the creation of all menus and window-level
keyboard shortcuts for the image viewer.
"""

from PySide6.QtGui import QAction, QActionGroup
from PySide6.QtCore import Qt

from ...core.image_collection import SortKey

_SORT_LABELS = (
    (SortKey.NAME, "By name"),
    (SortKey.EXTENSION, "By extension"),
    (SortKey.DATE, "By date"),
    (SortKey.SIZE, "By size"),
)


def _window_action(viewer, text, shortcut, slot):
    action = QAction(text, viewer, shortcut=shortcut)
    action.setShortcutContext(Qt.WindowShortcut)
    action.triggered.connect(slot)
    viewer.addAction(action)
    return action


def create_menus(viewer):
    """Create all menus and keyboard shortcuts for the viewer.

    Args:
        viewer: ImageViewer instance
    """
    menubar = viewer.menuBar()

    # File menu
    file_menu = menubar.addMenu("File")
    file_menu.addAction(_window_action(viewer, "Open...", "O", viewer.open_file_dialog))
    file_menu.addAction(_window_action(viewer, "Reopen", "R", viewer.reopen))
    file_menu.addAction(_window_action(viewer, "Save as...", "S", viewer.save_as))
    file_menu.addSeparator()
    file_menu.addAction(_window_action(viewer, "Copy image", "Alt+C", viewer.copy_to_clipboard))
    file_menu.addAction(_window_action(viewer, "Paste image", "Alt+V", viewer.paste_from_clipboard))
    file_menu.addSeparator()
    file_menu.addAction(_window_action(viewer, "Image information", "I", viewer.show_info_dialog))
    file_menu.addSeparator()
    file_menu.addAction(QAction("Exit", viewer, triggered=viewer.close))

    # Navigation
    viewer.next_image_action = _window_action(viewer, "Next image", "N", viewer.next_image)
    viewer.prev_image_action = _window_action(viewer, "Previous image", "B", viewer.prev_image)
    nav_menu = menubar.addMenu("Image")
    nav_menu.addAction(viewer.next_image_action)
    nav_menu.addAction(viewer.prev_image_action)
    nav_menu.addSeparator()

    sort_menu = nav_menu.addMenu("Sort")
    viewer.sort_group = QActionGroup(viewer)
    viewer.sort_group.setExclusive(True)
    viewer.sort_actions = {}
    for key, label in _SORT_LABELS:
        action = QAction(label, viewer, checkable=True)
        action.setChecked(viewer.session.settings.sort_key == key)
        action.triggered.connect(lambda checked=False, k=key: viewer.set_sort_key(k))
        viewer.sort_group.addAction(action)
        sort_menu.addAction(action)
        viewer.sort_actions[key] = action

    # View menu
    view_menu = menubar.addMenu("View")
    view_menu.addAction(_window_action(viewer, "Zoom in", "+", lambda: viewer.zoom_step(1)))
    view_menu.addAction(_window_action(viewer, "Zoom out", "-", lambda: viewer.zoom_step(-1)))
    # '+' without Shift on US layouts
    _window_action(viewer, "Zoom in", "=", lambda: viewer.zoom_step(1))
    view_menu.addSeparator()
    view_menu.addAction(_window_action(viewer, "Color correction...", "C", viewer.show_color_dialog))

    color = viewer.color_manager
    channels_menu = view_menu.addMenu("Channels")
    channels_menu.addAction(_window_action(viewer, "Red", "Ctrl+R", lambda: color.toggle_channel("r")))
    channels_menu.addAction(_window_action(viewer, "Green", "Ctrl+G", lambda: color.toggle_channel("g")))
    channels_menu.addAction(_window_action(viewer, "Blue", "Ctrl+B", lambda: color.toggle_channel("b")))
    view_menu.addAction(_window_action(viewer, "Invert", "Ctrl+I", color.toggle_invert))

    rotate_menu = view_menu.addMenu("Rotate")
    rotate_menu.addAction(_window_action(viewer, "90°", "Ctrl+Right", lambda: color.rotate(90)))
    rotate_menu.addAction(_window_action(viewer, "180°", "Ctrl+Up", lambda: color.rotate(180)))
    rotate_menu.addAction(_window_action(viewer, "270°", "Ctrl+Left", lambda: color.rotate(270)))
    rotate_menu.addAction(_window_action(viewer, "Reset", "Ctrl+Down", color.reset_rotation))

    # Options menu
    settings = viewer.session.settings
    options_menu = menubar.addMenu("Options")
    viewer.center_action = QAction("Center window", viewer, checkable=True, checked=settings.center)
    viewer.center_action.toggled.connect(viewer.set_center)
    viewer.fit_open_action = QAction("Fit at open", viewer, checkable=True, checked=settings.fit_open)
    viewer.fit_open_action.toggled.connect(lambda on: setattr(settings, "fit_open", on))
    viewer.refit_reopen_action = QAction("Refit at reopen", viewer, checkable=True, checked=settings.refit_reopen)
    viewer.refit_reopen_action.toggled.connect(lambda on: setattr(settings, "refit_reopen", on))
    options_menu.addAction(viewer.center_action)
    options_menu.addAction(viewer.fit_open_action)
    options_menu.addAction(viewer.refit_reopen_action)

    # Help menu
    help_menu = menubar.addMenu("Help")
    help_menu.addAction(_window_action(viewer, "Keyboard shortcuts", "F1", viewer.help_dialog.show))
