"""Command-line interface for Bubble Replay."""

from __future__ import annotations

import argparse
from dataclasses import replace
import json
import logging
import random
import sys
import threading
from types import TracebackType
from typing import Iterable, Optional, Sequence, TextIO, Tuple

from bubble_replay.audio_vlc import VlcAudioSink
from bubble_replay.config import AppConfig, clamp_size, load_config
from bubble_replay.history import (
    MAX_VALUE,
    MIN_VALUE,
    SortMode,
    count_kinds,
    generate_history,
    generate_sequence,
)
from bubble_replay.logging_setup import init_logging
from bubble_replay.playback import AudioSink, clamp_speed

logger = logging.getLogger(__name__)


def _bounded_value(raw: str) -> int:
    try:
        value = int(raw)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"not an integer: {raw!r}") from exc
    if not MIN_VALUE <= value <= MAX_VALUE:
        raise argparse.ArgumentTypeError(
            f"values must be between {MIN_VALUE} and {MAX_VALUE}: {value}"
        )
    return value


def build_parser() -> argparse.ArgumentParser:
    """Build and return the CLI argument parser."""
    parser = argparse.ArgumentParser(
        prog="bubble-replay", description="Bubble sort step-by-step replay"
    )
    parser.add_argument(
        "--size", type=int, default=None, help="Array size (clamped to 5-100)"
    )
    parser.add_argument(
        "--values",
        nargs="+",
        type=_bounded_value,
        default=None,
        help="Explicit values to sort (1-100 each)",
    )
    parser.add_argument("--seed", type=int, default=None, help="Random seed")
    mode = parser.add_mutually_exclusive_group()
    mode.add_argument(
        "--early-exit",
        dest="early_exit",
        action="store_true",
        default=None,
        help="Stop once a pass makes no swaps",
    )
    mode.add_argument(
        "--plain",
        dest="early_exit",
        action="store_false",
        help="Always run every pass",
    )
    parser.add_argument(
        "--speed", type=int, default=None, help="Playback speed dial (1-100)"
    )
    parser.add_argument("--mute", action="store_true", help="Start with sound off")
    parser.add_argument(
        "--dump",
        action="store_true",
        help="Print the sort history as JSON lines instead of opening the TUI",
    )
    return parser


def _resolve_config(args: argparse.Namespace, base: AppConfig) -> AppConfig:
    cfg = base
    if args.size is not None:
        cfg = replace(cfg, array_size=clamp_size(args.size))
    if args.early_exit is not None:
        cfg = replace(cfg, early_exit=args.early_exit)
    if args.speed is not None:
        cfg = replace(cfg, speed=clamp_speed(args.speed))
    if args.mute:
        cfg = replace(cfg, muted=True)
    return cfg


def dump_history(
    values: Sequence[int], mode: SortMode, out: Optional[TextIO] = None
) -> int:
    """Write every frame of the history as one JSON object per line."""
    out = out or sys.stdout
    history = generate_history(values, mode)
    for frame in history:
        out.write(json.dumps(frame.to_dict()) + "\n")
    counts = count_kinds(history)
    logger.info(
        "Dumped %s frames (%s)",
        len(history),
        ", ".join(f"{kind.value}={count}" for kind, count in counts.items()),
    )
    out.flush()
    return 0


def _build_audio_sink(cfg: AppConfig) -> Optional[AudioSink]:
    try:
        return VlcAudioSink(muted=cfg.muted, volume=cfg.volume)
    except RuntimeError as exc:
        logger.warning("Audio disabled: %s", exc)
        return None


def _run_tui(
    cfg: AppConfig,
    values: Optional[Sequence[int]],
    audio_sink: Optional[AudioSink],
    seed: Optional[int],
) -> int:
    try:
        from bubble_replay.tui import run_tui
    except (ImportError, RuntimeError) as exc:
        print(str(exc), file=sys.stderr)
        return 1
    return run_tui(config=cfg, values=values, audio_sink=audio_sink, seed=seed)


def _install_exception_hooks() -> None:
    def excepthook(exc_type, exc, tb) -> None:
        logger.critical("Uncaught exception", exc_info=(exc_type, exc, tb))

    sys.excepthook = excepthook

    def thread_hook(args: threading.ExceptHookArgs) -> None:
        exc_value = args.exc_value or RuntimeError("unknown")
        exc_info: Tuple[
            type[BaseException], BaseException, Optional[TracebackType]
        ] = (
            args.exc_type,
            exc_value,
            args.exc_traceback,
        )
        thread_name = args.thread.name if args.thread else "thread"
        logger.critical("Thread exception in %s", thread_name, exc_info=exc_info)

    threading.excepthook = thread_hook


def main(argv: Optional[Iterable[str]] = None) -> int:
    """Entry point for the CLI."""
    parser = build_parser()
    args = parser.parse_args(list(argv) if argv is not None else None)

    init_logging()
    _install_exception_hooks()
    logger.info("App start")

    cfg = _resolve_config(args, load_config())
    values: Optional[list[int]] = list(args.values) if args.values else None

    if args.dump:
        if values is None:
            values = generate_sequence(cfg.array_size, rng=random.Random(args.seed))
        mode = SortMode.EARLY_EXIT if cfg.early_exit else SortMode.PLAIN
        return dump_history(values, mode)

    audio_sink = _build_audio_sink(cfg)
    exit_code = _run_tui(cfg, values, audio_sink, args.seed)
    logger.info("App exit code=%s", exit_code)
    return exit_code


if __name__ == "__main__":
    raise SystemExit(main())
