"""Tests for the generator pipeline registry."""
import pytest

from playlist_curator.models import Playlist
from playlist_curator.playlist.pipeline import GeneratorPipeline
from playlist_curator.playlist.strategies import PlaylistGenerationStrategy, default_strategies
from tests.fixtures.library_data import build_context, make_records


class FixedStrategy(PlaylistGenerationStrategy):
    """Returns ``count`` empty playlists and records each call."""

    def __init__(self, name, priority, count=1, calls=None):
        super().__init__(priority=priority)
        self.name = name
        self.count = count
        self.calls = calls if calls is not None else []

    def generate(self, context):
        self.calls.append(self.name)
        return [Playlist(name=f"{self.name} {i}", generated_by=self.name) for i in range(self.count)]


@pytest.fixture()
def context():
    return build_context(make_records("A", 3), numberOfPlaylists=10, minTracksPerPlaylist=1)


def test_default_registry_order():
    pipeline = GeneratorPipeline(default_strategies())
    assert pipeline.describe() == [
        {"name": "genres", "priority": 10, "enabled": True},
        {"name": "folders", "priority": 20, "enabled": True},
        {"name": "recentlyAdded", "priority": 30, "enabled": True},
        {"name": "decades", "priority": 40, "enabled": True},
        {"name": "smartMix", "priority": 50, "enabled": True},
        {"name": "coverage", "priority": 100, "enabled": True},
    ]


def test_runs_by_priority_with_stable_ties(context):
    calls = []
    pipeline = GeneratorPipeline([
        FixedStrategy("late", 50, calls=calls),
        FixedStrategy("tie-a", 10, calls=calls),
        FixedStrategy("tie-b", 10, calls=calls),
        FixedStrategy("first", 1, calls=calls),
    ])
    playlists = pipeline.run(context)
    assert calls == ["first", "tie-a", "tie-b", "late"]
    assert playlists is context.playlists
    assert [p.generated_by for p in playlists] == calls


def test_stops_once_target_reached(context):
    calls = []
    pipeline = GeneratorPipeline([
        FixedStrategy("big", 1, count=10, calls=calls),
        FixedStrategy("skipped", 2, calls=calls),
    ])
    pipeline.run(context)
    assert calls == ["big"]
    # Skipped, not disabled
    assert pipeline.get("skipped").enabled


def test_disabled_strategies_do_not_run(context):
    calls = []
    pipeline = GeneratorPipeline([FixedStrategy("a", 1, calls=calls), FixedStrategy("b", 2, calls=calls)])
    assert pipeline.disable("a")
    pipeline.run(context)
    assert calls == ["b"]
    assert pipeline.enable("a")
    assert [s.name for s in pipeline.ordered()] == ["a", "b"]


def test_unknown_names(caplog):
    pipeline = GeneratorPipeline()
    assert not pipeline.enable("nope")
    assert not pipeline.disable("nope")
    assert "Unknown playlist generator: nope" in caplog.text


def test_register_replaces_by_name():
    pipeline = GeneratorPipeline([FixedStrategy("a", 1), FixedStrategy("b", 2)])
    replacement = FixedStrategy("a", 5)
    pipeline.register(replacement)
    assert len(pipeline) == 2
    assert pipeline.get("a") is replacement
    assert pipeline.names() == ["b", "a"]
    assert "a" in pipeline


def test_register_requires_name():
    with pytest.raises(ValueError):
        GeneratorPipeline([FixedStrategy("", 1)])


def test_unregister():
    pipeline = GeneratorPipeline([FixedStrategy("a", 1)])
    assert pipeline.unregister("a").name == "a"
    assert pipeline.unregister("a") is None
    assert len(pipeline) == 0
