"""Tests for saving and loading playlist documents."""
import json

import pytest

from playlist_curator.errors import PersistenceError
from playlist_curator.models import Playlist, Track
from playlist_curator.playlist_store import (
    load_playlists,
    playlists_from_document,
    playlists_to_document,
    save_playlists,
)


@pytest.fixture()
def playlists():
    return [
        Playlist(
            name="Mix Rock",
            description="Loud",
            generated_by="genres",
            tracks=[
                Track(path="/m/a.mp3", title="One", artist="Alpha", album="First", year=1984,
                      genres=("Rock",), duration=201.0),
                Track(path="/m/b.mp3", title="Two", artist="Bravo", album="Second", duration=99.5),
            ],
        ),
        Playlist(name="Empty", generated_by="template"),
    ]


def test_round_trip_preserves_contents(tmp_path, playlists):
    path = tmp_path / "nested" / "playlists.json"
    save_playlists(path, playlists)
    loaded = load_playlists(path)

    assert [p.name for p in loaded] == ["Mix Rock", "Empty"]
    assert [p.generated_by for p in loaded] == ["genres", "template"]
    first = loaded[0]
    assert first.description == "Loud"
    assert [t.path for t in first.tracks] == ["/m/a.mp3", "/m/b.mp3"]
    assert first.artists == {"Alpha", "Bravo"}
    assert first.tracks[0].album == "First"
    assert first.tracks[0].year == 1984
    assert first.tracks[0].genres == ("Rock",)
    assert first.tracks[1].duration == 99.5


def test_document_shape(playlists):
    document = playlists_to_document(playlists)
    assert document[0]["generatedBy"] == "genres"
    assert document[0]["tracks"][0] == {
        "path": "/m/a.mp3",
        "title": "One",
        "artist": "Alpha",
        "album": "First",
        "year": 1984,
        "genres": ["Rock"],
        "duration": 201.0,
    }
    json.dumps(document)


def test_load_defaults():
    loaded = playlists_from_document([
        {"name": "Bare", "tracks": [{"path": "/m/x.mp3", "title": "X", "artist": "A"}]},
    ])
    playlist = loaded[0]
    assert playlist.description == ""
    assert playlist.generated_by == "imported"
    track = playlist.tracks[0]
    assert track.album == ""
    assert track.year is None
    assert track.genres == ()
    assert track.duration == 0


@pytest.mark.parametrize("document", [
    {"name": "not a list"},
    [{"description": "no name"}],
    [{"name": "bad tracks", "tracks": "x"}],
    [{"name": "track without path", "tracks": [{"title": "x"}]}],
    [{"name": "damaged track", "tracks": [{"path": "/a.mp3"}, "/b.mp3"]}],
    [{"name": "null track", "tracks": [None]}],
])
def test_invalid_documents_raise(document):
    with pytest.raises(PersistenceError):
        playlists_from_document(document)


def test_load_invalid_json_raises(tmp_path):
    path = tmp_path / "broken.json"
    path.write_text("{not json", encoding="utf-8")
    with pytest.raises(PersistenceError):
        load_playlists(path)


def test_load_missing_file_raises(tmp_path):
    with pytest.raises(PersistenceError) as excinfo:
        load_playlists(tmp_path / "missing.json")
    assert excinfo.value.path.endswith("missing.json")


def test_damaged_track_entry_is_reported(tmp_path):
    path = tmp_path / "playlists.json"
    path.write_text('[{"name": "Mix", "tracks": [{"path": "/a.mp3"}, 42]}]', encoding="utf-8")
    with pytest.raises(PersistenceError, match="track 1"):
        load_playlists(path)
