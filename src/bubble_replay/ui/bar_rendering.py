"""Bar chart rendering for history frames."""

from __future__ import annotations

from typing import Optional

from rich.text import Text

from bubble_replay.history import MAX_VALUE, Frame, FrameKind
from bubble_replay.ui.formatters import truncate_line

BAR_STYLE = "#5fc9d6"
COMPARE_STYLE = "bold #ffcc66"
SWAP_STYLE = "bold #ff5f52"
SORTED_STYLE = "#5fd75f"
WAVE_STYLE = "bold #ffffff"
BAR_CHAR = "█"


def tiny_bars_text(width: int, height: int) -> str:
    line = truncate_line("Too small", width).ljust(width)
    lines = [line] + [" " * width for _ in range(max(0, height - 1))]
    return "\n".join(lines)


def bar_heights(values: tuple[int, ...], height: int) -> list[int]:
    """Scale values to row counts; any positive value gets at least one row."""
    if height <= 0:
        return [0 for _ in values]
    heights: list[int] = []
    for value in values:
        scaled = round(max(0, value) / MAX_VALUE * height)
        if value > 0:
            scaled = max(1, scaled)
        heights.append(min(height, scaled))
    return heights


def column_layout(count: int, width: int) -> tuple[int, int]:
    """Return (bar width, gap) so ``count`` bars fit in ``width`` cells."""
    if count <= 0 or width < count:
        return (0, 0)
    slot = width // count
    if slot >= 3:
        return (slot - 1, 1)
    return (slot, 0)


def bar_styles(frame: Frame, wave_upto: Optional[int] = None) -> list[str]:
    """Pick a style for every bar of ``frame``.

    Sorted wins over compare/swap highlighting; the completion wave wins over
    everything.
    """
    sorted_set = set(frame.sorted_indices)
    touched = set(frame.touched)
    styles: list[str] = []
    for idx in range(len(frame.sequence)):
        style = BAR_STYLE
        if idx in touched and frame.kind is FrameKind.COMPARISON:
            style = COMPARE_STYLE
        elif idx in touched and frame.kind is FrameKind.SWAP:
            style = SWAP_STYLE
        if idx in sorted_set:
            style = SORTED_STYLE
        if wave_upto is not None and idx <= wave_upto:
            style = WAVE_STYLE
        styles.append(style)
    return styles


def render_bars(
    frame: Optional[Frame],
    width: int,
    height: int,
    *,
    wave_upto: Optional[int] = None,
) -> Text:
    """Draw ``frame`` as vertical bars filling a ``width`` x ``height`` box."""
    if width <= 0 or height <= 0:
        return Text("")
    if frame is None or not frame.sequence:
        return Text("\n".join(" " * width for _ in range(height)))
    bar_width, gap = column_layout(len(frame.sequence), width)
    if bar_width == 0 or height < 2:
        return Text(tiny_bars_text(width, height))
    heights = bar_heights(frame.sequence, height)
    styles = bar_styles(frame, wave_upto)
    used = len(frame.sequence) * (bar_width + gap)
    output = Text()
    for row in range(height):
        if row:
            output.append("\n")
        threshold = height - row
        for idx, bar in enumerate(heights):
            cell = BAR_CHAR if bar >= threshold else " "
            output.append(cell * bar_width, style=styles[idx] if cell != " " else None)
            if gap:
                output.append(" " * gap)
        if used < width:
            output.append(" " * (width - used))
    return output
