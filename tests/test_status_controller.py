from __future__ import annotations

from rich.text import Text

from waveplay.theme import DEFAULT_THEME
from waveplay.ui.status_controller import HINT_SEPARATOR, StatusController, render_hints


def test_show_message_default_timeouts() -> None:
    controller = StatusController(now=lambda: 10.0)
    controller.show_message("Warn", level="warn")
    assert controller._message is not None
    assert controller._message.until == 16.0
    controller.show_message("Error", level="error")
    assert controller._message is not None
    assert controller._message.until == 16.0
    controller.show_message("Info", level="info")
    assert controller._message is not None
    assert controller._message.until == 13.0


def test_show_message_timeout_zero_persists() -> None:
    controller = StatusController(now=lambda: 0.0)
    controller.show_message("Hello", timeout=0)
    assert controller._message is not None
    assert controller._message.until is None
    assert "Hello" in controller.render_line(80).plain


def test_render_line_applies_styles() -> None:
    controller = StatusController(now=lambda: 0.0)
    controller.show_message("Warn", level="warn", timeout=5.0)
    line = controller.render_line(40)
    assert isinstance(line, Text)
    assert line.plain == "Warn"
    assert line.style == DEFAULT_THEME.warn
    controller.show_message("Error", level="error", timeout=5.0)
    assert controller.render_line(40).style == DEFAULT_THEME.error


def test_message_expiration_falls_back_to_hints() -> None:
    now_value = [0.0]
    controller = StatusController(now=lambda: now_value[0])
    controller.show_message("Hello", timeout=1.0)
    assert "Hello" in controller.render_line(120).plain
    now_value[0] = 2.0
    line = controller.render_line(120).plain
    assert "Hello" not in line
    assert line.startswith("q:quit")
    assert controller.message is None


def test_clear_message_resets_state() -> None:
    controller = StatusController(now=lambda: 0.0)
    controller.show_message("Hello", timeout=5.0)
    controller.clear_message()
    assert controller.message is None


def test_render_line_truncates_to_width() -> None:
    controller = StatusController(now=lambda: 0.0)
    controller.show_message("x" * 50, timeout=0)
    assert controller.render_line(10).plain == "xxxxxxx..."
    assert len(controller.render_line(12).plain) == 12


def test_render_hints_joins_pairs() -> None:
    assert render_hints([("q", "quit"), ("+/-", "volume")]) == (
        f"q:quit{HINT_SEPARATOR}+/-:volume"
    )
