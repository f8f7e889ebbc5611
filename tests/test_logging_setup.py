"""Tests for logging setup."""

from __future__ import annotations

import logging
import logging.handlers
from pathlib import Path

from bubble_replay import logging_setup


def _restore(root: logging.Logger, handlers: list[logging.Handler], level: int) -> None:
    for handler in root.handlers:
        if handler not in handlers:
            handler.close()
    root.handlers = handlers
    root.setLevel(level)


def test_default_log_dir_uses_local_appdata(monkeypatch, tmp_path: Path) -> None:
    monkeypatch.setenv("LOCALAPPDATA", str(tmp_path))
    log_dir = logging_setup._default_log_dir()
    assert log_dir == tmp_path / "BubbleReplay" / "logs"


def test_default_log_dir_falls_back_to_home(monkeypatch, tmp_path: Path) -> None:
    monkeypatch.delenv("LOCALAPPDATA", raising=False)
    monkeypatch.setattr(logging_setup.Path, "home", lambda: tmp_path)
    log_dir = logging_setup._default_log_dir()
    assert log_dir == tmp_path / ".bubble_replay" / "logs"


def test_init_logging_creates_handlers(monkeypatch, tmp_path: Path) -> None:
    monkeypatch.delenv("BUBBLE_REPLAY_LOG_LEVEL", raising=False)
    log_dir = tmp_path / "logs"
    monkeypatch.setattr(logging_setup, "_default_log_dir", lambda: log_dir)
    root = logging.getLogger()
    original_handlers = list(root.handlers)
    original_level = root.level
    root.handlers.clear()
    try:
        log_path = logging_setup.init_logging()
        assert log_path == log_dir / "app.log"
        assert log_path.exists()
        assert any(
            isinstance(h, logging.handlers.RotatingFileHandler) for h in root.handlers
        )
        assert any(logging_setup._is_console_handler(h) for h in root.handlers)
    finally:
        _restore(root, original_handlers, original_level)


def test_init_logging_does_not_duplicate_handlers(monkeypatch, tmp_path: Path) -> None:
    log_dir = tmp_path / "logs"
    monkeypatch.setattr(logging_setup, "_default_log_dir", lambda: log_dir)
    root = logging.getLogger()
    original_handlers = list(root.handlers)
    original_level = root.level
    root.handlers.clear()
    try:
        logging_setup.init_logging()
        logging_setup.init_logging()
        assert len(root.handlers) == 2
    finally:
        _restore(root, original_handlers, original_level)


def test_init_logging_reads_level_from_env(monkeypatch, tmp_path: Path) -> None:
    monkeypatch.setenv("BUBBLE_REPLAY_LOG_LEVEL", "debug")
    monkeypatch.setattr(logging_setup, "_default_log_dir", lambda: tmp_path)
    root = logging.getLogger()
    original_handlers = list(root.handlers)
    original_level = root.level
    root.handlers.clear()
    try:
        logging_setup.init_logging()
        assert root.level == logging.DEBUG
    finally:
        _restore(root, original_handlers, original_level)


def test_init_logging_invalid_level_defaults(monkeypatch, tmp_path: Path) -> None:
    monkeypatch.setenv("BUBBLE_REPLAY_LOG_LEVEL", "notalevel")
    monkeypatch.setattr(logging_setup, "_default_log_dir", lambda: tmp_path)
    root = logging.getLogger()
    original_handlers = list(root.handlers)
    original_level = root.level
    root.handlers.clear()
    try:
        logging_setup.init_logging()
        assert root.level == logging.INFO
    finally:
        _restore(root, original_handlers, original_level)


def test_init_logging_survives_unwritable_dir(monkeypatch, tmp_path: Path) -> None:
    blocker = tmp_path / "blocker"
    blocker.write_text("file, not a directory", encoding="utf-8")
    monkeypatch.setattr(logging_setup, "_default_log_dir", lambda: blocker / "logs")
    root = logging.getLogger()
    original_handlers = list(root.handlers)
    original_level = root.level
    root.handlers.clear()
    try:
        logging_setup.init_logging()
        assert not any(isinstance(h, logging.FileHandler) for h in root.handlers)
        assert any(logging_setup._is_console_handler(h) for h in root.handlers)
    finally:
        _restore(root, original_handlers, original_level)


def test_set_console_level_adjusts_stream_only(tmp_path: Path) -> None:
    root = logging.getLogger()
    original_handlers = list(root.handlers)
    original_level = root.level
    root.handlers.clear()
    try:
        stream_handler = logging.StreamHandler()
        file_handler = logging.FileHandler(tmp_path / "app.log")
        stream_handler.setLevel(logging.INFO)
        file_handler.setLevel(logging.INFO)
        root.addHandler(stream_handler)
        root.addHandler(file_handler)

        logging_setup.set_console_level(logging.ERROR)

        assert stream_handler.level == logging.ERROR
        assert file_handler.level == logging.INFO
    finally:
        _restore(root, original_handlers, original_level)
