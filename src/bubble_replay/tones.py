"""Synthesized sound cues for sort events."""

from __future__ import annotations

from enum import Enum
import logging
from pathlib import Path
import wave

import numpy as np

logger = logging.getLogger(__name__)

SAMPLE_RATE = 22050
CHIME_NOTES = (523.25, 659.25, 783.99, 1046.50)
CHIME_NOTE_SEC = 0.1


class Cue(str, Enum):
    COMPARE = "compare"
    SWAP = "swap"
    SORTED = "sorted"


def _square(phase: np.ndarray) -> np.ndarray:
    return np.sign(np.sin(phase))


def _timeline(duration: float, sample_rate: int) -> np.ndarray:
    return np.linspace(0, duration, int(sample_rate * duration), False)


def compare_blip(sample_rate: int = SAMPLE_RATE) -> np.ndarray:
    """Short 600 Hz square blip with an exponential fade."""
    duration = 0.05
    t = _timeline(duration, sample_rate)
    envelope = 0.05 * np.power(0.01 / 0.05, t / duration)
    return envelope * _square(2 * np.pi * 600.0 * t)


def swap_zip(sample_rate: int = SAMPLE_RATE) -> np.ndarray:
    """Rising 200 -> 400 Hz square sweep."""
    duration = 0.1
    t = _timeline(duration, sample_rate)
    freq = np.linspace(200.0, 400.0, len(t), False)
    phase = np.cumsum(2 * np.pi * freq / sample_rate)
    envelope = np.linspace(0.05, 0.01, len(t), False)
    return envelope * _square(phase)


def sorted_chime(sample_rate: int = SAMPLE_RATE) -> np.ndarray:
    """C major arpeggio, one note every 100 ms."""
    note_len = int(sample_rate * CHIME_NOTE_SEC)
    signal = np.zeros(note_len * len(CHIME_NOTES))
    t = _timeline(CHIME_NOTE_SEC, sample_rate)[:note_len]
    envelope = np.linspace(0.05, 0.001, len(t), False)
    for idx, freq in enumerate(CHIME_NOTES):
        start = idx * note_len
        signal[start : start + len(t)] += envelope * _square(2 * np.pi * freq * t)
    return signal


_RENDERERS = {
    Cue.COMPARE: compare_blip,
    Cue.SWAP: swap_zip,
    Cue.SORTED: sorted_chime,
}


def render_cue(cue: Cue, sample_rate: int = SAMPLE_RATE) -> np.ndarray:
    """Return the cue as 16-bit PCM samples."""
    signal = _RENDERERS[Cue(cue)](sample_rate)
    clipped = np.clip(signal, -1.0, 1.0)
    return (clipped * 32767).astype(np.int16)


def write_wav(path: Path, samples: np.ndarray, sample_rate: int = SAMPLE_RATE) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    with wave.open(str(path), "wb") as handle:
        handle.setnchannels(1)
        handle.setsampwidth(2)
        handle.setframerate(sample_rate)
        handle.writeframes(samples.astype("<i2").tobytes())


def ensure_cue_files(
    directory: Path, sample_rate: int = SAMPLE_RATE
) -> dict[Cue, Path]:
    """Write any missing cue WAV files and return their paths."""
    paths: dict[Cue, Path] = {}
    for cue in Cue:
        path = directory / f"{cue.value}_{sample_rate}.wav"
        if not path.is_file():
            write_wav(path, render_cue(cue, sample_rate), sample_rate)
            logger.info("Wrote cue %s to %s", cue.value, path)
        paths[cue] = path
    return paths
