from video_lyrics.playback.state import PlaybackMachine, PlaybackState
from tests.mocks.media_mock import FakeMedia


def test_initial_state():
    pb = PlaybackMachine()
    assert pb.state is PlaybackState.PLAYING_OR_PAUSED
    assert pb.controls_visible is True
    assert pb.replay_visible is False


def test_completed_signal_ends():
    pb = PlaybackMachine()
    pb.on_time_update(9.9)
    pb.on_ended()
    assert pb.ended
    assert pb.controls_visible is False
    assert pb.replay_visible is True


def test_forward_time_leaves_ended():
    pb = PlaybackMachine()
    pb.on_time_update(9.9)
    pb.on_ended()
    pb.on_time_update(9.9)
    assert pb.ended
    pb.on_time_update(10.0)
    assert not pb.ended


def test_backward_time_keeps_ended():
    pb = PlaybackMachine()
    pb.on_time_update(9.9)
    pb.on_ended()
    pb.on_time_update(0.0)
    assert pb.ended
    assert pb.clock == 0.0


def test_played_signal_leaves_ended():
    pb = PlaybackMachine()
    pb.on_ended()
    pb.on_played()
    assert pb.state is PlaybackState.PLAYING_OR_PAUSED


def test_replay_resets_clock_and_commands_media():
    media = FakeMedia()
    pb = PlaybackMachine()
    pb.on_time_update(42.0)
    pb.on_ended()
    pb.replay(media)
    assert pb.clock == 0.0
    assert not pb.ended
    assert media.commands == [("seek", 0.0), ("play",)]


def test_seek_refused_while_ended():
    media = FakeMedia()
    pb = PlaybackMachine()
    assert pb.seek(3.0, media) is True
    pb.on_ended()
    assert pb.seek(1.0, media) is False
    assert media.commands == [("seek", 3.0)]


def test_reset():
    pb = PlaybackMachine()
    pb.on_time_update(5.0)
    pb.on_ended()
    pb.reset()
    assert pb.clock == 0.0
    assert not pb.ended
