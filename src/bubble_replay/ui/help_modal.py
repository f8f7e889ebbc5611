"""Help modal for Bubble Replay."""

from __future__ import annotations

from collections import defaultdict
from typing import Any, Iterable, cast

from rich.text import Text
from textual import events
from textual.app import ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal, Vertical, VerticalScroll
from textual.screen import ModalScreen
from textual.widgets import Button, Static

_SECTION_ACTIONS: dict[str, list[str]] = {
    "Playback": [
        "toggle_playback",
        "step_back",
        "step_forward",
        "reset",
        "speed_down",
        "speed_up",
    ],
    "Array": [
        "new_array",
        "size_down",
        "size_up",
        "toggle_mode",
    ],
    "General": [
        "toggle_mute",
        "show_help",
        "quit_app",
    ],
}

_ACTION_OVERRIDES: dict[str, str] = {
    "toggle_mode": "Switch plain / early exit",
    "show_help": "Open help",
}

_LEGEND: list[tuple[str, str]] = [
    ("Yellow", "pair being compared"),
    ("Red", "pair just swapped"),
    ("Green", "position locked in final place"),
]


def _format_key(key: str) -> str:
    key_map = {
        "left": "←",
        "right": "→",
        "space": "Space",
        "plus": "+",
        "minus": "-",
        "left_square_bracket": "[",
        "right_square_bracket": "]",
        "question_mark": "?",
    }
    if key in key_map:
        return key_map[key]
    return "+".join(
        part.upper() if len(part) == 1 else part.capitalize()
        for part in key.split("+")
    )


def normalize_bindings(source: Iterable[Binding | tuple[Any, ...]]) -> list[Binding]:
    return [
        item if isinstance(item, Binding) else Binding(*cast(tuple[Any, ...], item))
        for item in source
    ]


def build_help_text(bindings: Iterable[Binding | tuple[Any, ...]]) -> Text:
    by_action: dict[str, list[str]] = defaultdict(list)
    by_desc: dict[str, str] = {}
    for binding in normalize_bindings(bindings):
        by_action[binding.action].append(binding.key)
        if binding.description:
            by_desc[binding.action] = binding.description

    content = Text()
    for section, actions in _SECTION_ACTIONS.items():
        content.append(f"{section}\n", style="bold #5fc9d6")
        for action in actions:
            keys = by_action.get(action)
            if not keys:
                continue
            key_text = ", ".join(_format_key(key) for key in keys)
            label = _ACTION_OVERRIDES.get(action, by_desc.get(action, action))
            content.append(f"{key_text} — {label}\n")
        content.append("\n")

    content.append("Colors\n", style="bold #5fc9d6")
    for color, meaning in _LEGEND:
        content.append(f"{color} — {meaning}\n")
    content.append(
        "Logs — %LOCALAPPDATA%/BubbleReplay/logs or ~/.bubble_replay/logs\n"
    )
    return content


class HelpModal(ModalScreen[None]):
    """Help modal listing keybinds and the bar color legend."""

    def __init__(self, bindings: Iterable[Binding | tuple[Any, ...]]) -> None:
        super().__init__()
        self._help_bindings = list(bindings)

    def compose(self) -> ComposeResult:
        content = build_help_text(self._help_bindings)
        with Vertical(id="help_modal"):
            yield Static("Bubble Replay Help", id="help_title")
            with VerticalScroll(id="help_scroll"):
                yield Static(content, id="help_content")
            with Horizontal(id="help_footer"):
                yield Static("Esc/q — Close", id="help_hint")
                yield Button("Close", id="help_close")

    def on_button_pressed(self, event: Button.Pressed) -> None:
        if event.button.id == "help_close":
            self.dismiss(None)

    def on_key(self, event: events.Key) -> None:
        if event.key in {"escape", "q"}:
            self.dismiss(None)
