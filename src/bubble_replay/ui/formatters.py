from __future__ import annotations

from bubble_replay.history import Frame, FrameKind, SortMode


def truncate_line(text: str, width: int) -> str:
    if width <= 0:
        return ""
    if len(text) <= width:
        return text
    if width <= 3:
        return text[:width]
    return text[: width - 3] + "..."


def render_level_bar(width: int, ratio: float) -> str:
    """Render ``[===---]`` filled to ``ratio`` within ``width`` cells."""
    if width <= 2:
        return "=" * max(0, width)
    inner = width - 2
    filled = int(max(0.0, min(1.0, ratio)) * inner)
    return "[" + "=" * filled + "-" * (inner - filled) + "]"


def step_counter_text(cursor: int, total: int) -> str:
    last = max(0, total - 1)
    return f"Steps: {cursor} / {last}"


def mode_label(mode: SortMode) -> str:
    if mode is SortMode.EARLY_EXIT:
        return "Early exit"
    return "Plain"


def frame_caption(frame: Frame | None) -> str:
    """Describe what happened in ``frame`` in one line."""
    if frame is None:
        return "No array loaded"
    seq = frame.sequence
    if frame.kind is FrameKind.COMPARISON:
        left, right = frame.touched
        return f"Comparing {seq[left]} and {seq[right]}"
    if frame.kind is FrameKind.SWAP:
        left, right = frame.touched
        return f"Swapped {seq[right]} and {seq[left]}"
    if frame.kind is FrameKind.FINALIZED:
        if frame.is_bulk:
            return "No swaps in this pass: everything is sorted"
        return f"Index {frame.finalized_index} locked"
    return f"Ready: {len(seq)} values"
