"""Textual terminal handle for the player controller."""

from __future__ import annotations

import logging
import queue
from typing import Any, Callable, Optional

try:
    from textual.app import App, ComposeResult
    from textual import events
    from textual.message import Message
    from textual.widgets import Static
    from textual.worker import Worker
    from rich.console import RenderableType
except Exception as exc:  # pragma: no cover - depends on environment
    raise RuntimeError(
        "Textual is required for the TUI. Install the 'textual' dependency."
    ) from exc

from waveplay.controller import QUIT_KEY, PlayerController
from waveplay.logging_setup import set_console_level
from waveplay.ui.frame import Frame

logger = logging.getLogger(__name__)


class PlayerApp(App):
    """Full-screen view driven by a PlayerController running on a worker thread.

    The controller pulls input through ``poll_input`` and pushes screens
    through ``draw``; both are safe to call from the worker thread.
    """

    CSS = """
    Screen {
        overflow: hidden;
    }
    #view {
        width: 100%;
        height: 100%;
    }
    """
    TITLE = "WavePlay"

    class FrameReady(Message):
        def __init__(self, renderable: RenderableType) -> None:
            super().__init__()
            self.renderable = renderable

    class ControllerFinished(Message):
        pass

    def __init__(self, controller: PlayerController, **kwargs: Any) -> None:
        super().__init__(**kwargs)
        self._controller = controller
        self._keys: queue.Queue[str] = queue.Queue()
        self._worker: Optional[Worker[None]] = None
        self.frames_drawn = 0

    def compose(self) -> ComposeResult:
        yield Static(id="view")

    def on_mount(self) -> None:
        self._worker = self.run_worker(
            self._run_controller, thread=True, exclusive=True, name="controller"
        )

    def on_unmount(self) -> None:
        # Unblock the controller loop if the app shuts down first.
        self._controller.running = False
        self._keys.put(QUIT_KEY)

    def _run_controller(self) -> None:
        try:
            self._controller.run(self)
        except Exception:
            logger.exception("Controller loop failed")
        finally:
            self.post_message(self.ControllerFinished())

    # --- Terminal handle ---
    def draw(self, render: Callable[[Frame], None]) -> None:
        if not self.is_running:
            return
        width, height = self.size
        frame = Frame(width, height)
        render(frame)
        self.post_message(self.FrameReady(frame.compose()))

    def poll_input(self, timeout: float) -> Optional[str]:
        worker = self._worker
        if worker is not None and worker.is_cancelled:
            return QUIT_KEY
        try:
            return self._keys.get(timeout=max(0.0, timeout))
        except queue.Empty:
            return None

    # --- Message handlers ---
    def on_key(self, event: events.Key) -> None:
        self._keys.put(event.key)
        event.stop()

    def on_player_app_frame_ready(self, message: "PlayerApp.FrameReady") -> None:
        self.query_one("#view", Static).update(message.renderable)
        self.frames_drawn += 1

    def on_player_app_controller_finished(
        self, message: "PlayerApp.ControllerFinished"
    ) -> None:
        del message
        self.exit()


def run_tui(controller: PlayerController) -> int:
    """Run the TUI and return an exit code."""
    logger.info("TUI start tracks=%d", len(controller.tracks))
    try:
        set_console_level(logging.WARNING)
    except Exception:
        logger.exception("Failed to set console log level for TUI")
    app = PlayerApp(controller)
    app.run()
    logger.info("TUI exit")
    return 0
