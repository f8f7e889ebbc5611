from __future__ import annotations

from pathlib import Path
from typing import Any

import pytest

from bubble_replay import audio_vlc
from bubble_replay.tones import Cue


class FakeMediaPlayer:
    def __init__(self) -> None:
        self.media: Any = None
        self.volume: int | None = None
        self.calls: list[str] = []

    def set_media(self, media: Any) -> None:
        self.media = media

    def audio_set_volume(self, volume: int) -> None:
        self.volume = volume

    def play(self) -> None:
        self.calls.append("play")

    def stop(self) -> None:
        self.calls.append("stop")

    def release(self) -> None:
        self.calls.append("release")


class FakeInstance:
    def __init__(self) -> None:
        self.players: list[FakeMediaPlayer] = []

    def media_player_new(self) -> FakeMediaPlayer:
        player = FakeMediaPlayer()
        self.players.append(player)
        return player

    def media_new(self, path: str) -> str:
        return path


class FakeVlc:
    def __init__(self) -> None:
        self.instances: list[FakeInstance] = []

    def Instance(self) -> FakeInstance:  # noqa: N802
        instance = FakeInstance()
        self.instances.append(instance)
        return instance


@pytest.fixture
def fake_vlc(monkeypatch: pytest.MonkeyPatch) -> FakeVlc:
    fake = FakeVlc()
    monkeypatch.setattr(audio_vlc, "vlc", fake)
    monkeypatch.setattr(audio_vlc, "_VLC_IMPORT_ERROR", None)
    return fake


def _player(sink: audio_vlc.VlcAudioSink, cue: Cue) -> FakeMediaPlayer:
    return sink._players[cue]


def test_construction_does_not_touch_audio(fake_vlc: FakeVlc, tmp_path: Path) -> None:
    sink = audio_vlc.VlcAudioSink(cue_dir=tmp_path)
    assert not sink.initialized
    assert fake_vlc.instances == []
    assert list(tmp_path.iterdir()) == []


def test_initialize_is_idempotent(fake_vlc: FakeVlc, tmp_path: Path) -> None:
    sink = audio_vlc.VlcAudioSink(cue_dir=tmp_path, volume=40)

    sink.initialize()
    sink.initialize()

    assert sink.initialized
    assert len(fake_vlc.instances) == 1
    players = fake_vlc.instances[0].players
    assert len(players) == len(Cue)
    assert all(player.volume == 40 for player in players)
    assert {Path(player.media).name for player in players} == {
        f"{cue.value}_22050.wav" for cue in Cue
    }


def test_play_methods_restart_the_matching_player(
    fake_vlc: FakeVlc, tmp_path: Path
) -> None:
    sink = audio_vlc.VlcAudioSink(cue_dir=tmp_path)
    sink.initialize()

    sink.play_compare_tone()
    sink.play_swap_tone()
    sink.play_sorted_chime()
    sink.play_swap_tone()

    assert _player(sink, Cue.COMPARE).calls == ["stop", "play"]
    assert _player(sink, Cue.SWAP).calls == ["stop", "play", "stop", "play"]
    assert _player(sink, Cue.SORTED).calls == ["stop", "play"]


def test_play_before_initialize_is_silent(fake_vlc: FakeVlc, tmp_path: Path) -> None:
    sink = audio_vlc.VlcAudioSink(cue_dir=tmp_path)
    sink.play_compare_tone()
    assert fake_vlc.instances == []


def test_mute_suppresses_playback(fake_vlc: FakeVlc, tmp_path: Path) -> None:
    sink = audio_vlc.VlcAudioSink(cue_dir=tmp_path, muted=True)
    sink.initialize()

    sink.play_compare_tone()
    assert _player(sink, Cue.COMPARE).calls == []

    assert sink.toggle_mute() is False
    sink.play_compare_tone()
    assert _player(sink, Cue.COMPARE).calls == ["stop", "play"]

    sink.set_muted(True)
    assert sink.muted


def test_set_volume_clamps_and_applies(fake_vlc: FakeVlc, tmp_path: Path) -> None:
    sink = audio_vlc.VlcAudioSink(cue_dir=tmp_path)
    sink.initialize()

    sink.set_volume(150)

    assert all(player.volume == 100 for player in fake_vlc.instances[0].players)


def test_close_releases_players(fake_vlc: FakeVlc, tmp_path: Path) -> None:
    sink = audio_vlc.VlcAudioSink(cue_dir=tmp_path)
    sink.initialize()
    players = list(fake_vlc.instances[0].players)

    sink.close()

    assert not sink.initialized
    assert all(player.calls[-2:] == ["stop", "release"] for player in players)
    sink.play_swap_tone()


def test_missing_vlc_raises_runtime_error(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(audio_vlc, "vlc", None)
    monkeypatch.setattr(audio_vlc, "_VLC_IMPORT_ERROR", ImportError("no libvlc"))

    with pytest.raises(RuntimeError, match="VLC backend is unavailable"):
        audio_vlc.VlcAudioSink()


def test_default_cue_dir_prefers_localappdata(
    monkeypatch: pytest.MonkeyPatch, tmp_path: Path
) -> None:
    monkeypatch.setenv("LOCALAPPDATA", str(tmp_path))
    assert audio_vlc.default_cue_dir() == tmp_path / "BubbleReplay" / "cues"

    monkeypatch.delenv("LOCALAPPDATA")
    monkeypatch.setattr(Path, "home", classmethod(lambda cls: tmp_path))
    assert audio_vlc.default_cue_dir() == tmp_path / ".bubble_replay" / "cues"


@pytest.mark.vlc
def test_real_vlc_sink_initializes(tmp_path: Path) -> None:
    try:
        sink = audio_vlc.VlcAudioSink(cue_dir=tmp_path, muted=True)
    except RuntimeError:
        pytest.skip("python-vlc or libvlc not available")
    try:
        sink.initialize()
    except RuntimeError:
        pytest.skip("libvlc could not start")
    sink.play_compare_tone()
    sink.close()
