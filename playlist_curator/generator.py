"""
Playlist Engine - the programmatic surface a UI layer drives.

Owns the library index, the similarity model, the strategy pipeline and the
current playlist list. One engine instance is one independent session.
"""
import logging
from dataclasses import replace
from pathlib import Path
from typing import Any, Dict, Iterable, List, Mapping, Optional, Union

from .errors import NotFoundError
from .library_index import LibraryIndex
from .library_scanner import LibraryScanner
from .logging_utils import RunSummary, format_count, stage_timer
from .m3u_exporter import ExportResult, M3UExporter
from .models import Playlist, Template, Track
from .playlist.config import GenerationOptions, SimilarityWeights, canonical_option_name
from .playlist.pipeline import GeneratorPipeline
from .playlist.sampler import RandomSource, TrackSampler, make_rng
from .playlist.strategies import (
    GenerationContext,
    PlaylistGenerationStrategy,
    TemplatePlaylistStrategy,
    default_strategies,
)
from .playlist.templates import parse_template
from .playlist_store import load_playlists, save_playlists
from .similarity_calculator import ArtistSimilarity

logger = logging.getLogger(__name__)

TrackInput = Union[Track, Mapping[str, Any], str]

# Option flags that switch a registry strategy on or off
_INCLUDE_FLAGS = {
    "include_recently_added": "recentlyAdded",
    "include_year_based_playlists": "decades",
}


class PlaylistEngine:
    """Library index, generator pipeline and playlist list for one session.

    Usage:
        engine = PlaylistEngine(rng=42)
        engine.scan(records)
        engine.generate()
        engine.export("/music/playlists")
    """

    def __init__(
        self,
        options: Optional[GenerationOptions] = None,
        rng: RandomSource = None,
        strategies: Optional[Iterable[PlaylistGenerationStrategy]] = None,
    ):
        self._options = options or GenerationOptions()
        self._rng = make_rng(rng)
        self.index = LibraryIndex().finalize()
        self.similarity = ArtistSimilarity(self.index, self._options.similarity_weights)
        self.pipeline = GeneratorPipeline(default_strategies() if strategies is None else strategies)
        self.template_strategy = TemplatePlaylistStrategy()
        self.playlists: List[Playlist] = []
        for flag in _INCLUDE_FLAGS:
            self._apply_include_flag(flag)

    # ------------------------------------------------------------------
    # Generators
    # ------------------------------------------------------------------

    def list_generators(self) -> List[Dict[str, object]]:
        return self.pipeline.describe()

    def enable_generator(self, name: str) -> bool:
        return self.pipeline.enable(name)

    def disable_generator(self, name: str) -> bool:
        return self.pipeline.disable(name)

    def register_generator(self, strategy: PlaylistGenerationStrategy) -> None:
        self.pipeline.register(strategy)

    # ------------------------------------------------------------------
    # Options
    # ------------------------------------------------------------------

    @property
    def options(self) -> GenerationOptions:
        return self._options

    def update_options(self, changes: Mapping[str, Any]) -> GenerationOptions:
        """
        Apply option changes (camelCase or snake_case keys).

        Changing similarity weights clears the similarity cache; the include
        flags enable or disable their strategies.

        Raises:
            ValueError: On unknown options or inconsistent sizes
        """
        updated = self._options.updated(changes)
        previous = self._options
        self._options = updated

        if updated.similarity_weights != previous.similarity_weights:
            self.similarity.set_weights(updated.similarity_weights)

        for key in changes:
            name = canonical_option_name(key)
            if name in _INCLUDE_FLAGS:
                self._apply_include_flag(name)

        logger.debug(f"Generation options updated: {sorted(changes)}")
        return self._options

    def _apply_include_flag(self, flag: str) -> None:
        strategy_name = _INCLUDE_FLAGS[flag]
        if strategy_name not in self.pipeline:
            return
        if getattr(self._options, flag):
            self.pipeline.enable(strategy_name)
        else:
            self.pipeline.disable(strategy_name)

    def set_similarity_weights(self, **weights: float) -> SimilarityWeights:
        """Change individual similarity factors (genre, folder, artist_name)"""
        new_weights = self._options.similarity_weights.updated(weights)
        self._options = replace(self._options, similarity_weights=new_weights)
        return self.similarity.set_weights(new_weights)

    def add_template(self, template: Union[Template, Mapping[str, Any]]) -> Template:
        """
        Validate and append one template.

        Raises:
            TemplateError: If the template is malformed
        """
        parsed = parse_template(template)
        self._options = replace(self._options, playlist_templates=self._options.playlist_templates + (parsed,))
        logger.info(f"Added playlist template: {parsed.name}")
        return parsed

    def set_templates(self, templates: Iterable[Union[Template, Mapping[str, Any]]]) -> None:
        """Replace the template list; malformed entries are reported when generation runs"""
        self._options = replace(self._options, playlist_templates=tuple(templates))

    # ------------------------------------------------------------------
    # Library
    # ------------------------------------------------------------------

    def scan(self, records: Iterable[Union[Track, Mapping[str, Any]]]) -> Dict[str, int]:
        """
        Replace the library with ``records``. Bad records are skipped.

        Returns:
            Index statistics (tracks, artists, genres, folders)
        """
        self.index = LibraryIndex.build(records)
        # Cached similarities refer to the previous index
        self.similarity = ArtistSimilarity(self.index, self._options.similarity_weights)
        return self.index.stats()

    def scan_directory(self, music_dir: Union[str, Path]) -> Dict[str, int]:
        """
        Scan audio files under ``music_dir`` and index them.

        Raises:
            FileNotFoundError: If the directory does not exist
        """
        scanner = LibraryScanner(music_dir)
        with stage_timer("Library scan", logger):
            return self.scan(scanner.iter_tracks())

    # ------------------------------------------------------------------
    # Generation and persistence
    # ------------------------------------------------------------------

    def generate(self) -> List[Playlist]:
        """
        Regenerate the playlist list: registry strategies by priority, then
        one playlist per template.

        Returns:
            The new playlist list
        """
        self.playlists = []
        if not self.index.tracks:
            logger.warning("Library is empty; no playlists generated")
            return self.playlists

        context = GenerationContext(
            index=self.index,
            options=self._options,
            sampler=TrackSampler(self.index, self._rng),
            similarity=self.similarity,
            playlists=self.playlists,
        )

        with stage_timer("Playlist generation", logger):
            self.pipeline.run(context)
            if self._options.playlist_templates:
                context.playlists.extend(self.template_strategy.generate(context))

        logger.info(f"Generated {format_count(len(self.playlists), 'playlist')}")
        return self.playlists

    def export(self, output_dir: Union[str, Path]) -> ExportResult:
        """Write every playlist as M3U plus the JSON summary"""
        exporter = M3UExporter(output_dir)
        return exporter.export_all(self.playlists)

    def save(self, file_path: Union[str, Path]) -> str:
        return save_playlists(file_path, self.playlists)

    def load(self, file_path: Union[str, Path]) -> List[Playlist]:
        """Replace the playlist list with a saved document"""
        self.playlists = load_playlists(file_path)
        return self.playlists

    # ------------------------------------------------------------------
    # Playlist edits
    # ------------------------------------------------------------------

    def get_playlist(self, position: int) -> Playlist:
        """
        Raises:
            NotFoundError: If ``position`` is out of range
        """
        if not isinstance(position, int) or isinstance(position, bool) or not 0 <= position < len(self.playlists):
            raise NotFoundError(f"No playlist at index {position} ({len(self.playlists)} playlists)")
        return self.playlists[position]

    def rename_playlist(self, position: int, name: str) -> Playlist:
        playlist = self.get_playlist(position)
        playlist.rename(name)
        return playlist

    def describe_playlist(self, position: int, description: str) -> Playlist:
        playlist = self.get_playlist(position)
        playlist.describe(description)
        return playlist

    def replace_tracks(self, position: int, tracks: Iterable[TrackInput]) -> Playlist:
        """
        Replace a playlist's tracks. Entries may be Tracks, records or paths
        of indexed tracks; nothing changes if any entry cannot be resolved.

        Raises:
            NotFoundError: If ``position`` is out of range or a path is unknown
            IngestionError: If a record has no path
        """
        playlist = self.get_playlist(position)
        resolved = [self._resolve_track(entry) for entry in tracks]
        playlist.set_tracks(resolved)
        return playlist

    def _resolve_track(self, entry: TrackInput) -> Track:
        if isinstance(entry, str):
            track = self.index.get_track(entry)
            if track is None:
                raise NotFoundError(f"Track not in library: {entry}")
            return track
        return Track.from_record(entry)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def list_artists(self) -> List[str]:
        return self.index.artist_names()

    def list_genres(self) -> List[str]:
        return self.index.genre_names()

    def summary(self, log: bool = True) -> Dict[str, Union[int, float, str]]:
        """Library and per-generator playlist counts for the current list"""
        summary = RunSummary("Playlist Generation", logger)
        summary.update(self.index.stats())
        summary.add("playlists", len(self.playlists))
        for playlist in self.playlists:
            summary.increment(f"by_{playlist.generated_by or 'unknown'}")
        if log:
            summary.log()
        return summary.as_dict()


