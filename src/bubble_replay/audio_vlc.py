"""VLC-backed audio sink for sort event cues."""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Any, Optional, cast

from bubble_replay.tones import Cue, ensure_cue_files

logger = logging.getLogger(__name__)

vlc: Any | None = None
_VLC_IMPORT_ERROR: Optional[Exception] = None


def _load_vlc() -> None:
    global vlc
    global _VLC_IMPORT_ERROR
    if vlc is not None or _VLC_IMPORT_ERROR is not None:
        return
    try:
        import vlc as vlc_module  # type: ignore
    except Exception as exc:  # pragma: no cover - platform-dependent import
        vlc = None
        _VLC_IMPORT_ERROR = exc
    else:
        vlc = cast(Any, vlc_module)
        _VLC_IMPORT_ERROR = None


def default_cue_dir() -> Path:
    local_appdata = os.getenv("LOCALAPPDATA")
    if local_appdata:
        return Path(local_appdata) / "BubbleReplay" / "cues"
    return Path.home() / ".bubble_replay" / "cues"


class VlcAudioSink:
    """Plays the compare/swap/sorted cues through python-vlc.

    Nothing touches the audio device until ``initialize`` runs, which the
    controller only does from a user-triggered ``play``.
    """

    def __init__(
        self,
        *,
        cue_dir: Optional[Path] = None,
        muted: bool = False,
        volume: int = 80,
    ) -> None:
        _load_vlc()
        if vlc is None:
            raise RuntimeError(
                "VLC backend is unavailable. Install VLC and the python-vlc package."
            ) from _VLC_IMPORT_ERROR
        self._cue_dir = cue_dir or default_cue_dir()
        self._muted = muted
        self._volume = max(0, min(100, volume))
        self._instance: Any | None = None
        self._players: dict[Cue, Any] = {}

    @property
    def initialized(self) -> bool:
        return self._instance is not None

    @property
    def muted(self) -> bool:
        return self._muted

    def set_muted(self, muted: bool) -> None:
        self._muted = muted

    def toggle_mute(self) -> bool:
        """Flip the mute flag and return the new value."""
        self._muted = not self._muted
        return self._muted

    def set_volume(self, volume: int) -> None:
        """Set volume (0-100) on every cue player."""
        self._volume = max(0, min(100, volume))
        for player in self._players.values():
            player.audio_set_volume(self._volume)

    def initialize(self) -> None:
        if self._instance is not None:
            return
        paths = ensure_cue_files(self._cue_dir)
        instance = cast(Any, vlc).Instance()
        if instance is None:
            raise RuntimeError("libvlc could not create an instance")
        players: dict[Cue, Any] = {}
        for cue, path in paths.items():
            player = instance.media_player_new()
            player.set_media(instance.media_new(str(path)))
            player.audio_set_volume(self._volume)
            players[cue] = player
        self._instance = instance
        self._players = players
        logger.info("Audio initialized cues=%s", self._cue_dir)

    def play_compare_tone(self) -> None:
        self._play(Cue.COMPARE)

    def play_swap_tone(self) -> None:
        self._play(Cue.SWAP)

    def play_sorted_chime(self) -> None:
        self._play(Cue.SORTED)

    def close(self) -> None:
        for player in self._players.values():
            try:
                player.stop()
                player.release()
            except Exception:
                logger.exception("Failed to release cue player")
        self._players = {}
        self._instance = None

    def _play(self, cue: Cue) -> None:
        if self._muted:
            return
        player = self._players.get(cue)
        if player is None:
            return
        # A finished VLC player must be stopped before it can replay.
        player.stop()
        player.play()
