# notifications.py
# -*- coding: utf-8 -*-
import logging
import re
import sys

from PySide6.QtCore import Qt, QTimer
from PySide6.QtWidgets import QApplication, QHBoxLayout, QLabel, QStyle, QWidget

import config

NOTIFICATION_QSS = """
QWidget#SaveLoadNotification {
    background-color: #2b2b2b;
    border: 1px solid #555555;
    border-radius: 6px;
}
QLabel {
    color: #f0f0f0;
    font-size: 10pt;
}
"""


class NotificationPopup(QWidget):
    """Frameless always-on-top popup that closes itself after a few seconds."""

    def __init__(self, title, message, success, parent=None, duration_ms=config.NOTIFICATION_DURATION_MS):
        super().__init__(parent)
        self.duration_ms = duration_ms
        self.setObjectName("SaveLoadNotification")

        # No frame, no taskbar entry, stays above the game window
        self.setWindowFlags(
            Qt.WindowType.FramelessWindowHint |
            Qt.WindowType.Tool |
            Qt.WindowType.WindowStaysOnTopHint
        )
        self.setAttribute(Qt.WidgetAttribute.WA_DeleteOnClose)

        layout = QHBoxLayout(self)
        layout.setContentsMargins(15, 10, 15, 10)

        icon_label = QLabel()
        style = QApplication.instance().style()
        if success:
            icon = style.standardIcon(QStyle.StandardPixmap.SP_DialogApplyButton)
        else:
            icon = style.standardIcon(QStyle.StandardPixmap.SP_MessageBoxCritical)
        if not icon.isNull():
            icon_label.setPixmap(icon.pixmap(32, 32))
        layout.addWidget(icon_label)

        self.message_label = QLabel(f"<b>{title}</b><br>{message}")
        self.message_label.setWordWrap(True)
        layout.addWidget(self.message_label, stretch=1)

        self.close_timer = QTimer(self)
        self.close_timer.setSingleShot(True)
        self.close_timer.timeout.connect(self.close)
        self.close_timer.start(self.duration_ms)

    def mousePressEvent(self, event):
        """Closes the notification on click."""
        if event.button() == Qt.MouseButton.LeftButton:
            self.close()
        super().mousePressEvent(event)

    def enterEvent(self, event):
        self.close_timer.stop()
        super().enterEvent(event)

    def leaveEvent(self, event):
        self.close_timer.start(self.duration_ms)
        super().leaveEvent(event)


def show_notification(success, message, title=None, duration_ms=config.NOTIFICATION_DURATION_MS):
    """
    Shows the result of an operation in a popup, blocking until it closes.

    Meant for launches without a console (shortcuts, Stream Deck buttons).
    The popup closes itself after `duration_ms`, unless the mouse is over it,
    or when clicked.
    """
    title = title or ("GTA V SaveLoad" if success else "GTA V SaveLoad - Error")
    clean_message = re.sub(r'\n+', '<br>', message.strip())

    app = QApplication.instance()
    created_app = False
    if app is None:
        app = QApplication(sys.argv[:1] or ["gtav-saveload"])
        created_app = True

    popup = NotificationPopup(title, clean_message, success, duration_ms=duration_ms)
    popup.setStyleSheet(NOTIFICATION_QSS)
    popup.adjustSize()

    primary_screen = QApplication.primaryScreen()
    if primary_screen:
        screen_geometry = primary_screen.availableGeometry()
        margin = 15
        popup.move(screen_geometry.right() - popup.width() - margin,
                   screen_geometry.bottom() - popup.height() - margin)
    else:
        logging.warning("Primary screen not found, notification shown at default position.")

    if created_app:
        # WA_DeleteOnClose: destroyed fires once the popup is closed, by timer or click
        popup.destroyed.connect(app.quit)

    popup.show()

    if created_app:
        app.exec()
