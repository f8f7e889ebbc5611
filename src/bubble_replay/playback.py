"""Playback controller that steps through a recorded sort history."""

from __future__ import annotations

from enum import Enum
import logging
from typing import Callable, Iterable, Optional, Protocol

from bubble_replay.history import (
    Frame,
    FrameKind,
    History,
    SortMode,
    generate_history,
)

logger = logging.getLogger(__name__)

MAX_DELAY_MS = 500.0
MIN_DELAY_MS = 1.0
MIN_SPEED = 1
MAX_SPEED = 100


class TimerHandle(Protocol):
    def stop(self) -> None: ...


class Scheduler(Protocol):
    """Anything offering Textual's ``set_timer`` contract."""

    def set_timer(
        self, delay: float, callback: Callable[[], object]
    ) -> TimerHandle: ...


class RenderSink(Protocol):
    def render_frame(self, frame: Frame) -> None: ...

    def signal_run_complete(self) -> None: ...


class AudioSink(Protocol):
    def initialize(self) -> None: ...

    def play_compare_tone(self) -> None: ...

    def play_swap_tone(self) -> None: ...

    def play_sorted_chime(self) -> None: ...


class StateObserver(Protocol):
    def on_playback_state(
        self, cursor: int, total: int, at_start: bool, at_end: bool
    ) -> None: ...


class NullRenderSink:
    def render_frame(self, frame: Frame) -> None:
        del frame

    def signal_run_complete(self) -> None:
        return None


class NullAudioSink:
    def initialize(self) -> None:
        return None

    def play_compare_tone(self) -> None:
        return None

    def play_swap_tone(self) -> None:
        return None

    def play_sorted_chime(self) -> None:
        return None


class NullStateObserver:
    def on_playback_state(
        self, cursor: int, total: int, at_start: bool, at_end: bool
    ) -> None:
        del cursor, total, at_start, at_end


class PlaybackPhase(str, Enum):
    IDLE = "idle"
    READY = "ready"
    RUNNING = "running"
    PAUSED = "paused"


def clamp_speed(dial: int) -> int:
    return max(MIN_SPEED, min(MAX_SPEED, int(dial)))


def delay_for_speed(dial: int) -> float:
    """Return the wait in milliseconds between auto-advances."""
    speed = clamp_speed(dial)
    return MAX_DELAY_MS - (speed / 100) * (MAX_DELAY_MS - MIN_DELAY_MS)


class PlaybackController:
    """Cursor, run flag and timer for one loaded history.

    All state changes happen either in a user-triggered operation or in the
    scheduled ``advance`` callback. Every operation cancels the pending timer
    before touching the cursor, so at most one timeline is ever live.
    """

    def __init__(
        self,
        scheduler: Scheduler,
        render_sink: Optional[RenderSink] = None,
        audio_sink: Optional[AudioSink] = None,
        observer: Optional[StateObserver] = None,
        *,
        speed: int = 50,
        generator: Callable[[Iterable[int], SortMode], History] = generate_history,
    ) -> None:
        self._scheduler = scheduler
        self._render: RenderSink = render_sink or NullRenderSink()
        self._audio: AudioSink = audio_sink or NullAudioSink()
        self._observer: StateObserver = observer or NullStateObserver()
        self._audio_failed = False
        self._generator = generator
        self._history: History = ()
        self._mode = SortMode.PLAIN
        self._cursor = 0
        self._running = False
        self._speed = clamp_speed(speed)
        self._timer: Optional[TimerHandle] = None

    # --- State ---
    @property
    def history(self) -> History:
        return self._history

    @property
    def mode(self) -> SortMode:
        return self._mode

    @property
    def cursor(self) -> int:
        return self._cursor

    @property
    def current_frame(self) -> Optional[Frame]:
        if not self._history:
            return None
        return self._history[self._cursor]

    @property
    def total_frames(self) -> int:
        return len(self._history)

    @property
    def is_running(self) -> bool:
        return self._running

    @property
    def speed(self) -> int:
        return self._speed

    @property
    def at_start(self) -> bool:
        return self._cursor == 0

    @property
    def at_end(self) -> bool:
        return self._cursor >= len(self._history) - 1

    @property
    def phase(self) -> PlaybackPhase:
        if not self._history:
            return PlaybackPhase.IDLE
        if self._running:
            return PlaybackPhase.RUNNING
        if self._cursor == 0:
            return PlaybackPhase.READY
        return PlaybackPhase.PAUSED

    # --- Operations ---
    def load(self, values: Iterable[int], mode: SortMode = SortMode.PLAIN) -> None:
        """Generate a new history and rewind to its first frame."""
        self.pause()
        self._mode = SortMode(mode)
        self._history = self._generator(list(values), self._mode)
        self._cursor = 0
        logger.info(
            "History loaded mode=%s frames=%s", self._mode.value, len(self._history)
        )
        self._show_current()
        self._notify()

    def play(self) -> None:
        if not self._history:
            return
        self._cancel_timer()
        if self.at_end:
            self._cursor = 0
        if not self._audio_failed:
            try:
                self._audio.initialize()
            except Exception:
                # Cues stay off for the rest of the session.
                self._audio_failed = True
                logger.exception("Audio initialization failed")
        self._running = True
        logger.info("Playback started at step %s", self._cursor)
        self._schedule_next(MIN_DELAY_MS)
        self._notify()

    def pause(self) -> None:
        was_running = self._running
        self._running = False
        self._cancel_timer()
        if was_running:
            logger.info("Playback paused at step %s", self._cursor)
            self._notify()

    def toggle(self) -> None:
        if self._running:
            self.pause()
        else:
            self.play()

    def step_forward(self) -> None:
        self.pause()
        if self._history and not self.at_end:
            self._cursor += 1
            self._show_current()
        self._notify()

    def step_back(self) -> None:
        self.pause()
        if self._history and self._cursor > 0:
            self._cursor -= 1
            self._show_current()
        self._notify()

    def reset(self) -> None:
        self.pause()
        if not self._history:
            return
        self._cursor = 0
        self._show_current()
        self._notify()

    def set_speed(self, dial: int) -> None:
        self._speed = clamp_speed(dial)
        logger.debug("Speed set to %s", self._speed)

    def advance(self) -> None:
        """Scheduled unit of work while running."""
        self._timer = None
        if not self._running or not self._history:
            return
        if self.at_end:
            self._running = False
            logger.info("Playback complete frames=%s", len(self._history))
            try:
                self._render.signal_run_complete()
            except Exception:
                logger.exception("Render sink failed on completion")
            self._notify()
            return
        self._cursor += 1
        frame = self._history[self._cursor]
        self._show_current()
        self._play_cue(frame)
        self._schedule_next(delay_for_speed(self._speed))
        self._notify()

    # --- Internals ---
    def _schedule_next(self, delay_ms: float) -> None:
        self._cancel_timer()
        self._timer = self._scheduler.set_timer(delay_ms / 1000.0, self.advance)

    def _cancel_timer(self) -> None:
        if self._timer is not None:
            self._timer.stop()
            self._timer = None

    def _show_current(self) -> None:
        frame = self.current_frame
        if frame is None:
            return
        try:
            self._render.render_frame(frame)
        except Exception:
            logger.exception("Render sink failed at step %s", self._cursor)

    def _play_cue(self, frame: Frame) -> None:
        if self._audio_failed:
            return
        try:
            if frame.kind is FrameKind.COMPARISON:
                self._audio.play_compare_tone()
            elif frame.kind is FrameKind.SWAP:
                self._audio.play_swap_tone()
            elif frame.kind is FrameKind.FINALIZED:
                self._audio.play_sorted_chime()
        except Exception:
            logger.exception("Audio sink failed for %s", frame.kind.value)

    def _notify(self) -> None:
        if not self._history:
            return
        try:
            self._observer.on_playback_state(
                self._cursor, len(self._history), self.at_start, self.at_end
            )
        except Exception:
            logger.exception("State observer failed")
