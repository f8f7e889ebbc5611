"""Status line controller for the TUI."""

from __future__ import annotations

from typing import Callable, Optional

from rich.text import Text

from bubble_replay.ui.formatters import truncate_line
from bubble_replay.ui.tui_types import StatusMessage

_DEFAULT_TIMEOUTS = {"info": 3.0, "warn": 6.0, "error": 6.0}
_LEVEL_STYLES = {"warn": "#ffcc66", "error": "#ff5f52"}

_HINTS = {
    "running": "Space: pause  ←/→: step  [/]: speed  ?: help",
    "paused": "Space: resume  ←/→: step  R: reset  ?: help",
    "idle": "Space: play  N: new array  M: mode  ?: help",
}


class StatusController:
    """Transient message plus a context hint when no message is live."""

    def __init__(self, now: Callable[[], float]) -> None:
        self._now = now
        self._message: Optional[StatusMessage] = None
        self._context = "idle"

    def show_message(
        self,
        text: str,
        *,
        level: str = "info",
        timeout: Optional[float] = None,
    ) -> None:
        if timeout is None:
            timeout = _DEFAULT_TIMEOUTS.get(level, 3.0)
        until = None if timeout == 0 else self._now() + max(0.0, timeout)
        self._message = StatusMessage(text=text, level=level, until=until)

    def clear_message(self) -> None:
        self._message = None

    def set_context(self, name: str) -> None:
        self._context = name if name in _HINTS else "idle"

    @property
    def message(self) -> Optional[StatusMessage]:
        return self._current_message()

    def render_line(self, width: int) -> Text:
        message = self._current_message()
        if message:
            line = truncate_line(message.text, width)
            style = _LEVEL_STYLES.get(message.level)
            return Text(line, style=style) if style else Text(line)
        return Text(truncate_line(_HINTS[self._context], width))

    def _current_message(self) -> Optional[StatusMessage]:
        if not self._message:
            return None
        if self._message.until is None or self._message.until > self._now():
            return self._message
        self._message = None
        return None
