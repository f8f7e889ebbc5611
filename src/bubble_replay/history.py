"""Bubble sort history generation.

Design notes:
- A history is a tuple of immutable frames; nothing downstream can edit it.
- Frames share the previous frame's ``sequence``/``sorted_indices`` tuples
  until the data actually changes. Sharing saves memory only; every frame is
  still a complete snapshot.
"""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass
from enum import Enum
import logging
import random
from typing import Any, Iterable, Optional

from typing_extensions import TypeAlias

logger = logging.getLogger(__name__)

MIN_VALUE = 1
MAX_VALUE = 100


class FrameKind(str, Enum):
    INITIAL = "initial"
    COMPARISON = "comparison"
    SWAP = "swap"
    FINALIZED = "finalized"


class SortMode(str, Enum):
    PLAIN = "plain"
    EARLY_EXIT = "early_exit"


@dataclass(frozen=True)
class Frame:
    """One recorded instant of a sort run."""

    kind: FrameKind
    sequence: tuple[int, ...]
    touched: tuple[int, ...] = ()
    sorted_indices: tuple[int, ...] = ()
    finalized_index: Optional[int] = None

    @property
    def is_bulk(self) -> bool:
        """True for the early-exit finalize that covers every position."""
        return (
            self.kind is FrameKind.FINALIZED
            and len(self.sequence) > 1
            and len(self.touched) == len(self.sequence)
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "kind": self.kind.value,
            "sequence": list(self.sequence),
            "touched": list(self.touched),
            "sorted_indices": list(self.sorted_indices),
            "finalized_index": self.finalized_index,
        }


History: TypeAlias = tuple[Frame, ...]


def generate_sequence(size: int, *, rng: Optional[random.Random] = None) -> list[int]:
    """Return ``size`` random integers in [1, 100]."""
    source = rng or random.Random()
    return [source.randint(MIN_VALUE, MAX_VALUE) for _ in range(max(0, size))]


class _Recorder:
    """Accumulates frames while tracking the current shared snapshots."""

    def __init__(self, values: Iterable[int]) -> None:
        self.sequence: tuple[int, ...] = tuple(values)
        self.sorted_indices: tuple[int, ...] = ()
        self.frames: list[Frame] = [Frame(FrameKind.INITIAL, self.sequence)]

    def compare(self, left: int) -> bool:
        """Record a comparison and return True when the pair is out of order."""
        self.frames.append(
            Frame(
                FrameKind.COMPARISON,
                self.sequence,
                touched=(left, left + 1),
                sorted_indices=self.sorted_indices,
            )
        )
        return self.sequence[left] > self.sequence[left + 1]

    def swap(self, left: int) -> None:
        values = list(self.sequence)
        values[left], values[left + 1] = values[left + 1], values[left]
        self.sequence = tuple(values)
        self.frames.append(
            Frame(
                FrameKind.SWAP,
                self.sequence,
                touched=(left, left + 1),
                sorted_indices=self.sorted_indices,
            )
        )

    def finalize(self, index: int) -> None:
        self.sorted_indices = self.sorted_indices + (index,)
        self.frames.append(
            Frame(
                FrameKind.FINALIZED,
                self.sequence,
                touched=(index,),
                sorted_indices=self.sorted_indices,
                finalized_index=index,
            )
        )

    def finalize_remaining(self) -> None:
        """Lock every remaining position in one frame."""
        seen = set(self.sorted_indices)
        missing = tuple(idx for idx in range(len(self.sequence)) if idx not in seen)
        self.sorted_indices = self.sorted_indices + missing
        self.frames.append(
            Frame(
                FrameKind.FINALIZED,
                self.sequence,
                touched=tuple(range(len(self.sequence))),
                sorted_indices=self.sorted_indices,
                finalized_index=0,
            )
        )

    def history(self) -> History:
        return tuple(self.frames)


def _run_passes(recorder: _Recorder, *, early_exit: bool) -> None:
    n = len(recorder.sequence)
    for i in range(n - 1):
        any_swap = False
        for j in range(n - i - 1):
            if recorder.compare(j):
                recorder.swap(j)
                any_swap = True
        recorder.finalize(n - 1 - i)
        if early_exit and not any_swap:
            # Everything left of the boundary is already in order.
            recorder.finalize_remaining()
            return
    if n and 0 not in recorder.sorted_indices:
        recorder.finalize(0)


def generate_history(
    values: Iterable[int], mode: SortMode = SortMode.PLAIN
) -> History:
    """Record a full bubble sort of ``values`` as a tuple of frames."""
    recorder = _Recorder(values)
    _run_passes(recorder, early_exit=SortMode(mode) is SortMode.EARLY_EXIT)
    history = recorder.history()
    logger.debug(
        "Generated history mode=%s size=%s frames=%s",
        SortMode(mode).value,
        len(recorder.sequence),
        len(history),
    )
    return history


def count_kinds(history: Iterable[Frame]) -> dict[FrameKind, int]:
    """Return how many frames of each kind a history holds."""
    counts = Counter(frame.kind for frame in history)
    return {kind: counts.get(kind, 0) for kind in FrameKind}
