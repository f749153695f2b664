"""Tests for track data models."""

from musicmemory.models import (
    UNKNOWN_ALBUM,
    UNKNOWN_ARTIST,
    UNKNOWN_TITLE,
    RawTrack,
    TrackRecord,
)


class TestTrackRecord:
    def test_from_raw_keeps_present_fields(self):
        record = TrackRecord.from_raw(
            RawTrack(id="1", title="A", artist="X", album="Y", play_count=5)
        )
        assert record.to_dict() == {
            "id": "1",
            "title": "A",
            "artist": "X",
            "album": "Y",
            "play_count": 5,
        }

    def test_missing_fields_use_sentinels(self):
        record = TrackRecord.from_raw(RawTrack(id="7"))
        assert record.title == UNKNOWN_TITLE
        assert record.artist == UNKNOWN_ARTIST
        assert record.album == UNKNOWN_ALBUM
        assert record.play_count == 0

    def test_empty_strings_count_as_missing(self):
        record = TrackRecord.from_raw(RawTrack(id="7", title="", artist="", album=""))
        assert record.title == "Unknown Title"
        assert record.artist == "Unknown Artist"
        assert record.album == "Unknown Album"

    def test_negative_play_count_clamped(self):
        assert TrackRecord.from_raw(RawTrack(id="1", play_count=-3)).play_count == 0

    def test_equality_uses_id_only(self):
        a = TrackRecord(id="1", title="A", play_count=1)
        b = TrackRecord(id="1", title="Renamed", play_count=99)
        c = TrackRecord(id="2", title="A", play_count=1)

        assert a == b
        assert hash(a) == hash(b)
        assert a != c
        assert len({a, b, c}) == 2
        assert not a.same_fields(b)

    def test_from_dict_round_trip(self):
        record = TrackRecord(id="9", title="T", artist="A", album="B", play_count=3)
        assert TrackRecord.from_dict(record.to_dict()).same_fields(record)


def test_raw_track_from_dict_parses_play_count_strings():
    raw = RawTrack.from_dict({"id": 12, "title": "T", "play_count": "4"})
    assert raw.id == "12"
    assert raw.play_count == 4
    assert raw.artist is None

    assert RawTrack.from_dict({"id": "1", "play_count": ""}).play_count is None
