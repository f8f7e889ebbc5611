"""Textual-based TUI for Bubble Replay."""

from __future__ import annotations

import asyncio
import logging
import random
import time
from typing import Any, Callable, Optional, Sequence

try:
    from rich.text import Text
    from textual import events
    from textual.app import App, ComposeResult
    from textual.binding import Binding
    from textual.containers import Container, Horizontal, Vertical
    from textual.timer import Timer
    from textual.widgets import Header, Static
except Exception as exc:  # pragma: no cover - depends on environment
    raise RuntimeError(
        "Textual is required for the TUI. Install the 'textual' dependency."
    ) from exc

from bubble_replay.config import AppConfig, clamp_size, load_config, save_config
from bubble_replay.history import Frame, SortMode, generate_sequence
from bubble_replay.logging_setup import set_console_level
from bubble_replay.playback import AudioSink, PlaybackController, clamp_speed
from bubble_replay.ui.bar_rendering import render_bars
from bubble_replay.ui.formatters import (
    frame_caption,
    mode_label,
    render_level_bar,
    step_counter_text,
)
from bubble_replay.ui.help_modal import HelpModal
from bubble_replay.ui.status_controller import StatusController
from bubble_replay.ui.tui_types import PlaybackSnapshot, StatusMessage
from bubble_replay.ui.tui_widgets import BarsView, TransportControls

logger = logging.getLogger(__name__)

SIZE_STEP = 5
SPEED_STEP = 10
WAVE_STEP_SECONDS = 0.05


class StatusBar(Static):
    """Status bar widget."""

    def __init__(self, controller: StatusController, **kwargs: Any) -> None:
        super().__init__(**kwargs)
        self._controller = controller

    def render(self) -> Text:
        return self._controller.render_line(max(1, self.size.width))


class BubbleReplayApp(App):
    """Bubble sort replay: renders frames, owns the timer, plays cues."""

    TITLE = "Bubble Replay"
    CSS = """
    #root { height: 1fr; }
    #bars_panel { height: 1fr; border: round #5fc9d6; }
    #bars { height: 1fr; }
    #caption { height: 1; padding: 0 1; }
    #info_row { height: 1; padding: 0 1; }
    #info_row Static { width: auto; margin-right: 2; }
    #transport_controls { height: 3; align-horizontal: center; }
    .transport_button { min-width: 9; margin: 0 1; }
    #status_bar { height: 1; padding: 0 1; background: $panel; }
    #help_modal { width: 64; height: auto; max-height: 90%; border: round #5fc9d6; }
    #help_modal { background: $surface; padding: 1 2; }
    HelpModal { align: center middle; }
    #help_footer { height: 3; }
    #help_hint { width: 1fr; }
    """

    # --- Keybindings ---
    BINDINGS = [
        Binding("space", "toggle_playback", "Play/Pause"),
        Binding("left", "step_back", "Step back"),
        Binding("right", "step_forward", "Step forward"),
        Binding("r", "reset", "Reset"),
        Binding("[", "speed_down", "Speed -10"),
        Binding("]", "speed_up", "Speed +10"),
        Binding("n", "new_array", "New array"),
        Binding("-", "size_down", "Size -5"),
        Binding("+", "size_up", "Size +5"),
        Binding("m", "toggle_mode", "Mode"),
        Binding("a", "toggle_mute", "Mute"),
        Binding("?", "show_help", "Help"),
        Binding("f1", "show_help", "Help"),
        Binding("q", "quit_app", "Quit"),
    ]

    # --- Lifecycle ---
    def __init__(
        self,
        *,
        config: Optional[AppConfig] = None,
        values: Optional[Sequence[int]] = None,
        audio_sink: Optional[AudioSink] = None,
        seed: Optional[int] = None,
        now: Callable[[], float] = time.monotonic,
    ) -> None:
        super().__init__()
        self._config = config or load_config()
        self._rng = random.Random(seed)
        self._now = now
        self._array_size = (
            clamp_size(len(values)) if values else self._config.array_size
        )
        self._values: list[int] = (
            list(values)
            if values
            else generate_sequence(self._array_size, rng=self._rng)
        )
        self._sort_mode = (
            SortMode.EARLY_EXIT if self._config.early_exit else SortMode.PLAIN
        )
        self._muted = self._config.muted
        self._audio = audio_sink
        if audio_sink is not None:
            self._apply_mute()
        self._status_controller = StatusController(self._now)
        self._shown_frame: Optional[Frame] = None
        self._playback_state: PlaybackSnapshot = (0, 0, True, True)
        self._wave_upto: Optional[int] = None
        self._wave_timer: Optional[Timer] = None
        self._bars: Optional[BarsView] = None
        self._caption: Optional[Static] = None
        self._counter: Optional[Static] = None
        self._mode_text: Optional[Static] = None
        self._speed_text: Optional[Static] = None
        self._sound_text: Optional[Static] = None
        self._status_bar: Optional[StatusBar] = None
        self._transport: Optional[TransportControls] = None
        self.controller = PlaybackController(
            self,
            render_sink=self,
            audio_sink=audio_sink,
            observer=self,
            speed=self._config.speed,
        )

    def compose(self) -> ComposeResult:
        yield Header(show_clock=False)
        with Container(id="root"):
            with Vertical(id="bars_panel") as panel:
                panel.border_title = "Bars"
                yield BarsView(id="bars")
            yield Static("", id="caption", markup=False)
            with Horizontal(id="info_row"):
                yield Static("", id="step_counter", markup=False)
                yield Static("", id="mode_text", markup=False)
                yield Static("", id="speed_text", markup=False)
                yield Static("", id="sound_text", markup=False)
            yield TransportControls(id="transport")
        yield StatusBar(self._status_controller, id="status_bar")

    async def on_mount(self) -> None:
        self._bars = self.query_one("#bars", BarsView)
        self._caption = self.query_one("#caption", Static)
        self._counter = self.query_one("#step_counter", Static)
        self._mode_text = self.query_one("#mode_text", Static)
        self._speed_text = self.query_one("#speed_text", Static)
        self._sound_text = self.query_one("#sound_text", Static)
        self._status_bar = self.query_one("#status_bar", StatusBar)
        self._transport = self.query_one("#transport", TransportControls)
        self._install_asyncio_exception_handler()
        self._load_history()
        self.set_interval(0.25, self._refresh_status)
        if self._audio is None:
            self._set_message("Sound unavailable: install VLC", level="warn")
        logger.info(
            "TUI mounted size=%s mode=%s", len(self._values), self._sort_mode.value
        )

    def on_unmount(self) -> None:
        self.controller.pause()
        self._stop_wave()
        closer = getattr(self._audio, "close", None)
        if callable(closer):
            closer()
        logger.info("TUI shutdown")

    def on_resize(self, event: events.Resize) -> None:
        del event
        self._refresh_bars()

    # --- Render sink / state observer ---
    def render_frame(self, frame: Frame) -> None:
        self._stop_wave()
        self._shown_frame = frame
        self._refresh_bars()
        if self._caption is not None:
            self._caption.update(frame_caption(frame))

    def signal_run_complete(self) -> None:
        self._set_message("Sorted!")
        if not self._shown_frame or not self._shown_frame.sequence:
            return
        self._stop_wave()
        self._wave_upto = 0
        self._wave_timer = self.set_interval(WAVE_STEP_SECONDS, self._wave_tick)
        self._refresh_bars()

    def on_playback_state(
        self, cursor: int, total: int, at_start: bool, at_end: bool
    ) -> None:
        self._playback_state = (cursor, total, at_start, at_end)
        if self.controller.is_running:
            self._status_controller.set_context("running")
        elif at_start:
            self._status_controller.set_context("idle")
        else:
            self._status_controller.set_context("paused")
        self._refresh_info()

    # --- Internal helpers ---
    def _install_asyncio_exception_handler(self) -> None:
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            return

        def handler(_loop: asyncio.AbstractEventLoop, context: dict) -> None:
            exc = context.get("exception")
            if exc:
                logger.exception("Asyncio exception", exc_info=exc)
            else:
                logger.error("Asyncio error: %s", context.get("message"))

        loop.set_exception_handler(handler)

    def _load_history(self) -> None:
        self.controller.load(self._values, self._sort_mode)

    def _set_message(
        self,
        text: str,
        *,
        level: str = "info",
        timeout: Optional[float] = None,
    ) -> None:
        self._status_controller.show_message(text, level=level, timeout=timeout)
        self._refresh_status()

    @property
    def status_message(self) -> Optional[StatusMessage]:
        return self._status_controller.message

    def _save_config(self) -> None:
        self._config = AppConfig(
            array_size=self._array_size,
            early_exit=self._sort_mode is SortMode.EARLY_EXIT,
            speed=self.controller.speed,
            muted=self._muted,
            volume=self._config.volume,
        )
        try:
            save_config(self._config)
        except OSError:
            logger.exception("Failed to save config")
            self._set_message("Could not save settings", level="warn")

    def _apply_mute(self) -> None:
        setter = getattr(self._audio, "set_muted", None)
        if callable(setter):
            setter(self._muted)

    def _refresh_bars(self) -> None:
        if self._bars is None:
            return
        size = self._bars.content_size
        text = render_bars(
            self._shown_frame, size.width, size.height, wave_upto=self._wave_upto
        )
        self._bars.update(text)

    def _refresh_info(self) -> None:
        cursor, total, _at_start, _at_end = self._playback_state
        if self._counter is not None:
            self._counter.update(step_counter_text(cursor, total))
        if self._mode_text is not None:
            self._mode_text.update(f"Mode: {mode_label(self._sort_mode)}")
        if self._speed_text is not None:
            speed = self.controller.speed
            self._speed_text.update(
                f"Speed: {render_level_bar(12, speed / 100)} {speed:3d}"
            )
        if self._sound_text is not None:
            self._sound_text.update(self._sound_label())
        if self._transport is not None:
            self._transport.refresh_state()

    def _sound_label(self) -> str:
        if self._audio is None:
            return "Sound: unavailable"
        return "Sound: off" if self._muted else "Sound: on"

    def _refresh_status(self) -> None:
        if self._status_bar is not None:
            self._status_bar.refresh()

    def _wave_tick(self) -> None:
        if self._wave_upto is None or self._shown_frame is None:
            self._stop_wave()
            return
        self._wave_upto += 1
        if self._wave_upto >= len(self._shown_frame.sequence):
            self._stop_wave()
        self._refresh_bars()

    def _stop_wave(self) -> None:
        if self._wave_timer is not None:
            self._wave_timer.stop()
            self._wave_timer = None
        self._wave_upto = None

    def _regenerate(self, message: str) -> None:
        self._values = generate_sequence(self._array_size, rng=self._rng)
        self._load_history()
        self._set_message(message)

    # --- Actions ---
    def action_toggle_playback(self) -> None:
        self.controller.toggle()
        self._set_message("Playing" if self.controller.is_running else "Paused")

    def action_step_back(self) -> None:
        self.controller.step_back()

    def action_step_forward(self) -> None:
        self.controller.step_forward()

    def action_reset(self) -> None:
        self.controller.reset()
        self._set_message("Reset")

    def action_speed_down(self) -> None:
        self._apply_speed(self.controller.speed - SPEED_STEP)

    def action_speed_up(self) -> None:
        self._apply_speed(self.controller.speed + SPEED_STEP)

    def _apply_speed(self, speed: int) -> None:
        self.controller.set_speed(clamp_speed(speed))
        self._set_message(f"Speed {self.controller.speed}")
        self._save_config()
        self._refresh_info()

    def action_new_array(self) -> None:
        self._regenerate(f"New array of {self._array_size}")

    def action_size_down(self) -> None:
        self._apply_size(self._array_size - SIZE_STEP)

    def action_size_up(self) -> None:
        self._apply_size(self._array_size + SIZE_STEP)

    def _apply_size(self, size: int) -> None:
        clamped = clamp_size(size)
        if clamped == self._array_size and clamped == len(self._values):
            self._set_message(f"Size stays at {clamped}", level="warn")
            return
        self._array_size = clamped
        self._save_config()
        self._regenerate(f"New array of {clamped}")

    def action_toggle_mode(self) -> None:
        if self._sort_mode is SortMode.PLAIN:
            self._sort_mode = SortMode.EARLY_EXIT
        else:
            self._sort_mode = SortMode.PLAIN
        self._load_history()
        self._set_message(f"Mode: {mode_label(self._sort_mode)}")
        self._save_config()

    def action_toggle_mute(self) -> None:
        self._muted = not self._muted
        self._apply_mute()
        self._set_message("Muted" if self._muted else "Sound on")
        self._save_config()
        self._refresh_info()

    def action_show_help(self) -> None:
        self.push_screen(HelpModal(self.BINDINGS))

    def action_quit_app(self) -> None:
        self.controller.pause()
        self.exit()


# Public entrypoints
def run_tui(
    *,
    config: AppConfig,
    values: Optional[Sequence[int]] = None,
    audio_sink: Optional[AudioSink] = None,
    seed: Optional[int] = None,
) -> int:
    """Run the TUI and return an exit code."""
    logger.info(
        "TUI start size=%s early_exit=%s", config.array_size, config.early_exit
    )
    set_console_level(logging.WARNING)
    app = BubbleReplayApp(
        config=config, values=values, audio_sink=audio_sink, seed=seed
    )
    app.run()
    logger.info("TUI exit")
    return 0
