from __future__ import annotations

from bubble_replay.history import Frame, FrameKind, SortMode, generate_history
from bubble_replay.ui import bar_rendering
from bubble_replay.ui.bar_rendering import (
    BAR_CHAR,
    COMPARE_STYLE,
    SORTED_STYLE,
    SWAP_STYLE,
    WAVE_STYLE,
    bar_heights,
    bar_styles,
    column_layout,
    render_bars,
)


def test_bar_heights_scale_to_max_value() -> None:
    assert bar_heights((100, 50, 1), 10) == [10, 5, 1]
    assert bar_heights((1,), 3) == [1]
    assert bar_heights((10, 20), 0) == [0, 0]


def test_column_layout() -> None:
    assert column_layout(4, 20) == (4, 1)
    assert column_layout(4, 8) == (2, 0)
    assert column_layout(4, 3) == (0, 0)
    assert column_layout(0, 10) == (0, 0)


def test_render_bars_draws_columns_bottom_up() -> None:
    frame = Frame(FrameKind.INITIAL, (50, 100))
    text = render_bars(frame, 6, 4)
    assert text.plain.split("\n") == [
        "   " + BAR_CHAR * 2 + " ",
        "   " + BAR_CHAR * 2 + " ",
        BAR_CHAR * 2 + " " + BAR_CHAR * 2 + " ",
        BAR_CHAR * 2 + " " + BAR_CHAR * 2 + " ",
    ]


def test_render_bars_pads_to_width() -> None:
    text = render_bars(Frame(FrameKind.INITIAL, (100, 100)), 7, 3)
    assert all(len(line) == 7 for line in text.plain.split("\n"))


def test_render_bars_without_frame_is_blank() -> None:
    text = render_bars(None, 5, 2)
    assert text.plain == "     \n     "
    assert render_bars(None, 0, 2).plain == ""


def test_render_bars_too_small() -> None:
    frame = Frame(FrameKind.INITIAL, tuple(range(1, 21)))
    text = render_bars(frame, 10, 3)
    assert text.plain.split("\n")[0] == "Too small "
    assert bar_rendering.tiny_bars_text(4, 2) == "T...\n    "


def test_compare_and_swap_highlights() -> None:
    history = generate_history([5, 3, 8, 1], SortMode.PLAIN)
    compare_styles = bar_styles(history[1])
    swap_styles = bar_styles(history[2])
    assert compare_styles[:2] == [COMPARE_STYLE, COMPARE_STYLE]
    assert swap_styles[:2] == [SWAP_STYLE, SWAP_STYLE]
    assert compare_styles[2] == bar_rendering.BAR_STYLE


def test_sorted_beats_highlight_and_wave_beats_everything() -> None:
    frame = Frame(
        FrameKind.COMPARISON, (1, 2, 3), touched=(1, 2), sorted_indices=(2,)
    )
    assert bar_styles(frame)[1:] == [COMPARE_STYLE, SORTED_STYLE]
    assert bar_styles(frame, wave_upto=1) == [
        WAVE_STYLE,
        WAVE_STYLE,
        SORTED_STYLE,
    ]


def test_rendered_spans_carry_styles() -> None:
    frame = Frame(FrameKind.SWAP, (100, 100), touched=(0, 1))
    text = render_bars(frame, 2, 2)
    styles = {str(span.style) for span in text.spans}
    assert styles == {SWAP_STYLE}
