"""
Folder playlists: one mix per folder holding several artists.
"""
from __future__ import annotations

import logging
from typing import Iterable, List

from ...models import Playlist, Track
from ...string_utils import folder_basename
from .base_strategy import MIN_DISTINCT_ARTISTS, GenerationContext, PlaylistGenerationStrategy

logger = logging.getLogger(__name__)

DUPLICATE_OVERLAP_RATIO = 0.7


def overlap_fraction(tracks: List[Track], other: Playlist) -> float:
    """Share of ``tracks`` (by path) already present in ``other``"""
    if not tracks:
        return 0.0
    other_paths = other.paths
    shared = sum(1 for track in tracks if track.path in other_paths)
    return shared / len(tracks)


def is_near_duplicate(tracks: List[Track], playlists: Iterable[Playlist],
                      threshold: float = DUPLICATE_OVERLAP_RATIO) -> bool:
    """
    True when ``tracks`` overlap any playlist by at least ``threshold``.

    Compares against every playlist, so cost grows with playlists x tracks.
    """
    return any(overlap_fraction(tracks, playlist) >= threshold for playlist in playlists)


class FolderPlaylistStrategy(PlaylistGenerationStrategy):
    """Playlists built from a folder's own tracks; near-duplicates are rejected."""

    name = "folders"
    default_priority = 20

    def generate(self, context: GenerationContext) -> List[Playlist]:
        options = context.options
        produced: List[Playlist] = []

        for folder, artists in context.index.folder_cache.items():
            if context.target_reached(len(produced)):
                break
            if len(artists) < MIN_DISTINCT_ARTISTS:
                continue

            folder_tracks = context.index.tracks_in_folder(folder)
            if len(folder_tracks) < options.min_tracks_per_playlist:
                continue

            selected = self.select_tracks(context, artists, pool=folder_tracks)
            if not self.meets_minimum(context, selected):
                continue

            if is_near_duplicate(selected, context.playlists + produced):
                logger.debug(f"Folder '{folder}' overlaps an existing playlist, skipping")
                continue

            name = folder_basename(folder)
            produced.append(self.make_playlist(
                f"Folder Mix: {name}",
                f"Tracks from the {name} folder",
                selected,
            ))
        return produced
