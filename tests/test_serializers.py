"""Tests for JSON and CSV export encoding."""

import json

import pytest

from musicmemory.errors import SerializationError
from musicmemory.models import RawTrack, TrackRecord
from musicmemory.serializers import (
    ExportFormat,
    escape_csv_field,
    from_csv,
    from_json,
    serialize,
    suggested_filename,
    to_csv,
    to_json,
)
from musicmemory.snapshot import LibrarySnapshot, build_snapshot


@pytest.fixture
def example_snapshot():
    return build_snapshot(
        [
            RawTrack(id="1", title="A", artist="X", album="Y", play_count=5),
            RawTrack(id="2", title="B", artist="X", album="Y", play_count=0),
        ]
    )


@pytest.fixture
def tricky_snapshot():
    return build_snapshot(
        [
            RawTrack(id="10", title='Hello, "World"', artist="Simon & Garfunkel", play_count=1234567),
            RawTrack(id="11", title="Imagine", artist="John Lennon", album="Imagine", play_count=3),
            RawTrack(id="12", title="Line\nBreak", artist="Björk", album="Homogenic"),
        ]
    )


class TestCsv:
    def test_example_output(self, example_snapshot):
        assert to_csv(example_snapshot) == (
            "id,title,artist,album,play_count\n"
            "1,A,X,Y,5\n"
            "2,B,X,Y,0\n"
        )

    def test_escapes_quotes_and_commas(self, tricky_snapshot):
        lines = to_csv(tricky_snapshot).split("\n")
        assert lines[1] == '10,"Hello, ""World""",Simon & Garfunkel,Unknown Album,1234567'
        assert lines[2] == "11,Imagine,John Lennon,Imagine,3"

    def test_quotes_embedded_newline(self, tricky_snapshot):
        assert '12,"Line\nBreak",Björk,Homogenic,0\n' in to_csv(tricky_snapshot)

    def test_escape_csv_field(self):
        assert escape_csv_field('Hello, "World"') == '"Hello, ""World"""'
        assert escape_csv_field("Imagine") == "Imagine"
        assert escape_csv_field('say "hi"') == '"say ""hi"""'
        assert escape_csv_field("a\nb") == '"a\nb"'
        assert escape_csv_field(42) == "42"

    def test_escaping_applies_to_id_too(self):
        snapshot = build_snapshot([RawTrack(id="a,b", title="T", play_count=1)])
        assert to_csv(snapshot).split("\n")[1] == '"a,b",T,Unknown Artist,Unknown Album,1'

    def test_empty_snapshot_has_header_only(self):
        assert to_csv(LibrarySnapshot()) == "id,title,artist,album,play_count\n"

    def test_sanitize_formulas_is_opt_in(self):
        snapshot = build_snapshot([RawTrack(id="1", title="=SUM(A1)", artist="-X", play_count=2)])
        assert to_csv(snapshot).split("\n")[1] == "1,=SUM(A1),-X,Unknown Album,2"
        assert (
            to_csv(snapshot, sanitize_formulas=True).split("\n")[1]
            == "1,'=SUM(A1),'-X,Unknown Album,2"
        )

    def test_from_csv_reads_back_quoted_fields(self, tricky_snapshot):
        records = from_csv(to_csv(tricky_snapshot))
        assert [r.to_dict() for r in records] == [t.to_dict() for t in tricky_snapshot]

    def test_from_csv_requires_header(self):
        with pytest.raises(ValueError, match="missing columns"):
            from_csv("id,name\n1,A\n")

    def test_from_csv_rejects_short_rows(self):
        with pytest.raises(ValueError, match="has 2 fields, expected 5"):
            from_csv("id,title,artist,album,play_count\n1,A\n")

    def test_from_csv_rejects_long_rows(self):
        with pytest.raises(ValueError, match="has 6 fields, expected 5"):
            from_csv("id,title,artist,album,play_count\n1,A,X,Y,5,extra\n")

    def test_from_csv_rejects_bare_carriage_return(self):
        snapshot = build_snapshot([RawTrack(id="1", title="A\rB", artist="X", album="Y", play_count=5)])
        text = to_csv(snapshot)
        assert text.split("\n")[1] == "1,A\rB,X,Y,5"
        with pytest.raises(ValueError, match="fields, expected 5"):
            from_csv(text)

    def test_from_csv_skips_blank_lines(self):
        records = from_csv("id,title,artist,album,play_count\n\n1,A,X,Y,5\n")
        assert [r.id for r in records] == ["1"]


class TestJson:
    def test_keys_sorted_and_snake_case(self, example_snapshot):
        data = json.loads(to_json(example_snapshot))
        assert list(data[0].keys()) == ["album", "artist", "id", "play_count", "title"]
        assert data[0] == {"album": "Y", "artist": "X", "id": "1", "play_count": 5, "title": "A"}

    def test_pretty_printed(self, example_snapshot):
        text = to_json(example_snapshot)
        assert text.startswith("[\n")
        assert '\n    "album": "Y",' in text

    def test_records_only(self, example_snapshot):
        data = json.loads(to_json(example_snapshot))
        assert isinstance(data, list)
        assert len(data) == 2

    def test_round_trip(self, tricky_snapshot):
        records = from_json(to_json(tricky_snapshot))
        assert len(records) == tricky_snapshot.total_count
        for decoded, original in zip(records, tricky_snapshot):
            assert decoded.same_fields(original)

    def test_round_trip_empty(self):
        assert to_json(LibrarySnapshot()) == "[]"
        assert from_json(to_json(LibrarySnapshot())) == []

    def test_non_ascii_kept_literal(self, tricky_snapshot):
        assert "Björk" in to_json(tricky_snapshot)

    def test_from_json_rejects_objects(self):
        with pytest.raises(ValueError):
            from_json('{"id": "1"}')


@pytest.mark.parametrize("encode", [to_json, to_csv])
def test_unencodable_text_raises_serialization_error(encode):
    snapshot = LibrarySnapshot(tracks=(TrackRecord(id="1", title="bad \ud800 surrogate"),))
    with pytest.raises(SerializationError):
        encode(snapshot)


class TestExportFormat:
    def test_parse(self):
        assert ExportFormat.parse("json") is ExportFormat.JSON
        assert ExportFormat.parse(".CSV") is ExportFormat.CSV
        assert ExportFormat.parse(ExportFormat.CSV) is ExportFormat.CSV
        with pytest.raises(ValueError):
            ExportFormat.parse("xml")

    def test_properties(self):
        assert ExportFormat.JSON.extension == "json"
        assert ExportFormat.CSV.mime_type == "text/csv"

    def test_suggested_filename(self):
        assert suggested_filename(1700000000, ExportFormat.CSV) == "music_play_counts_1700000000.csv"
        assert suggested_filename("x", ExportFormat.JSON) == "music_play_counts_x.json"

    def test_serialize_dispatch(self, example_snapshot):
        assert serialize(example_snapshot, ExportFormat.CSV) == to_csv(example_snapshot)
        assert serialize(example_snapshot, ExportFormat.JSON) == to_json(example_snapshot)
