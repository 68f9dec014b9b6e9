"""Tests for the result popup shown by --notify."""

import time

import pytest

pytest.importorskip("PySide6")


def test_popup_returns_once_closed(monkeypatch):
    monkeypatch.setenv("QT_QPA_PLATFORM", "offscreen")
    import notifications

    started = time.monotonic()
    notifications.show_notification(True, "Saved slot 'alpha'.", duration_ms=50)

    # Returns with the popup, well before the default display time
    assert time.monotonic() - started < 3
