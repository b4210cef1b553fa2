from video_lyrics.sync.tracker import LineTracker
from video_lyrics.transcript.model import LyricLine, Transcript
from tests.mocks.media_mock import three_lines


def test_tracker_changed_only_on_change():
    tr = LineTracker.from_transcript(three_lines())
    assert tr.update(0.0) is True
    assert tr.last_id == "a"
    assert tr.update(1.0) is False
    assert tr.update(2.0) is False
    assert tr.update(2.5) is True
    assert tr.last_id is None
    assert tr.update(2.7) is False
    assert tr.update(3.0) is True
    assert tr.last_id == "b"


def test_tracker_follows_seek_back():
    tr = LineTracker.from_transcript(three_lines())
    tr.update(7.0)
    assert tr.last_id == "c"
    assert tr.update(0.5) is True
    assert tr.last_id == "a"


def test_tracker_first_match_with_overlap():
    doc = Transcript(lines=(LyricLine("x", 0.0, 10.0), LyricLine("y", 1.0, 2.0)))
    tr = LineTracker.from_transcript(doc)
    assert tr.ordered is True
    assert tr.current_id(1.5) == "x"


def test_tracker_unordered_scans_everything():
    doc = Transcript(lines=(LyricLine("late", 5.0, 6.0), LyricLine("early", 1.0, 2.0)))
    tr = LineTracker.from_transcript(doc)
    assert tr.ordered is False
    assert tr.current_id(1.5) == "early"
    assert tr.current_id(5.5) == "late"


def test_tracker_reset():
    tr = LineTracker.from_transcript(three_lines())
    tr.update(0.5)
    tr.reset()
    assert tr.last_id is None
    assert tr.update(0.5) is True


def test_tracker_empty_transcript():
    tr = LineTracker.from_transcript(Transcript(lines=()))
    assert tr.current_id(1.0) is None
    assert tr.update(1.0) is False
