"""Tests for YAML configuration loading."""
import pytest

from playlist_curator.config_loader import Config
from playlist_curator.playlist.config import GenerationOptions, SimilarityWeights


def _write(tmp_path, text):
    path = tmp_path / "config.yaml"
    path.write_text(text, encoding="utf-8")
    return str(path)


def test_defaults_from_empty_file(tmp_path, monkeypatch):
    monkeypatch.delenv("MUSIC_DIR", raising=False)
    monkeypatch.delenv("PLAYLISTS_DIR", raising=False)
    config = Config(_write(tmp_path, ""))
    assert config.music_directory == "./music"
    assert config.playlists_directory == "./playlists"
    assert config.save_file_name == "playlists.json"
    assert config.log_level == "INFO"
    assert config.log_file is None
    assert config.random_seed is None
    assert config.disabled_generators == []
    assert config.generation_options == GenerationOptions()


def test_generation_section(tmp_path):
    config = Config(_write(tmp_path, """
random_seed: 42
generation:
  minTracksPerPlaylist: 10
  maxTracksPerPlaylist: 20
  numberOfPlaylists: 4
  includeRecentlyAdded: false
  similarityFactors:
    artistName: 0.0
  disabled_generators: [smartMix]
  playlistTemplates:
    - name: Jazz
      rules:
        - type: genre
          value: jazz
"""))
    options = config.generation_options
    assert options.min_tracks_per_playlist == 10
    assert options.max_tracks_per_playlist == 20
    assert options.max_tracks_per_artist_in_playlist == 5
    assert options.number_of_playlists == 4
    assert options.include_recently_added is False
    assert options.similarity_weights == SimilarityWeights(artist_name=0.0)
    assert options.playlist_templates[0]["name"] == "Jazz"
    assert config.disabled_generators == ["smartMix"]
    assert config.random_seed == 42


def test_env_overrides_directories(tmp_path, monkeypatch):
    monkeypatch.setenv("MUSIC_DIR", "/srv/music")
    monkeypatch.setenv("PLAYLISTS_DIR", "/srv/playlists")
    config = Config(_write(tmp_path, "library:\n  music_directory: /ignored\n"))
    assert config.music_directory == "/srv/music"
    assert config.playlists_directory == "/srv/playlists"


def test_missing_file_raises(tmp_path):
    with pytest.raises(FileNotFoundError):
        Config(str(tmp_path / "nope.yaml"))


@pytest.mark.parametrize("text", [
    "generation:\n  minTracksPerPlaylist: 60\n  maxTracksPerPlaylist: 50\n",
    "generation:\n  minTracksPerPlaylist: 0\n",
    "generation:\n  tempo: fast\n",
    "generation: [1, 2]\n",
    "- just\n- a list\n",
])
def test_invalid_configuration_raises(tmp_path, text):
    with pytest.raises(ValueError):
        Config(_write(tmp_path, text))


def test_from_dict():
    config = Config.from_dict({"output": {"save_file": "mine.json"}, "logging": {"level": "DEBUG"}})
    assert config.save_file_name == "mine.json"
    assert config.log_level == "DEBUG"
    assert config.get("output", "missing", "fallback") == "fallback"
    assert config.get("absent", "key") is None


class TestGenerationOptions:
    def test_to_dict_uses_camel_case(self):
        data = GenerationOptions().to_dict()
        assert data["minTracksPerPlaylist"] == 30
        assert data["similarityFactors"] == {"genre": 0.5, "folder": 0.3, "artistName": 0.2}
        assert GenerationOptions.from_mapping(data) == GenerationOptions()

    def test_negative_weight_rejected(self):
        with pytest.raises(ValueError):
            SimilarityWeights().updated({"genre": -1})
