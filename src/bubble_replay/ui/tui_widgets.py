from __future__ import annotations

from typing import TYPE_CHECKING, cast

from textual.app import ComposeResult
from textual.containers import Horizontal
from textual.css.query import NoMatches
from textual.widgets import Button, Static

if TYPE_CHECKING:
    from bubble_replay.tui import BubbleReplayApp


class BarsView(Static):
    """Bar chart of the current frame."""


class TransportControls(Static):
    """Back / Play / Forward / Reset buttons driven by playback state."""

    def _app(self) -> "BubbleReplayApp":
        return cast("BubbleReplayApp", self.app)

    def compose(self) -> ComposeResult:
        with Horizontal(id="transport_controls"):
            yield Button("<<", id="transport_back", classes="transport_button")
            yield Button("Play", id="transport_playpause", classes="transport_button")
            yield Button(">>", id="transport_forward", classes="transport_button")
            yield Button("Reset", id="transport_reset", classes="transport_button")

    def on_mount(self) -> None:
        self.refresh_state()

    def on_button_pressed(self, event: Button.Pressed) -> None:
        control_id = event.button.id
        app = self._app()
        if control_id == "transport_back":
            app.action_step_back()
        elif control_id == "transport_playpause":
            app.action_toggle_playback()
        elif control_id == "transport_forward":
            app.action_step_forward()
        elif control_id == "transport_reset":
            app.action_reset()
        event.stop()
        self.refresh_state()

    def refresh_state(self) -> None:
        try:
            play_button = self.query_one("#transport_playpause", Button)
            back_button = self.query_one("#transport_back", Button)
            forward_button = self.query_one("#transport_forward", Button)
            reset_button = self.query_one("#transport_reset", Button)
        except NoMatches:
            return
        controller = self._app().controller
        has_history = controller.total_frames > 0
        play_button.label = "Pause" if controller.is_running else "Play"
        play_button.disabled = not has_history
        back_button.disabled = not has_history or controller.at_start
        forward_button.disabled = not has_history or controller.at_end
        reset_button.disabled = not has_history or controller.at_start
