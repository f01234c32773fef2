"""
Constrained track selection.

All shuffling and sampling goes through one numpy Generator so a fixed seed
reproduces the same playlists.
"""
from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Iterable, List, Optional, Sequence, TypeVar, Union

import numpy as np

from ..models import Track

if TYPE_CHECKING:
    from ..library_index import LibraryIndex

logger = logging.getLogger(__name__)

T = TypeVar("T")

RandomSource = Union[None, int, np.random.Generator]


def make_rng(source: RandomSource = None) -> np.random.Generator:
    """Generator from a seed, an existing Generator, or OS entropy (None)."""
    return np.random.default_rng(source)


class TrackSampler:
    """Diversity-bounded track selection over a LibraryIndex"""

    def __init__(self, index: "LibraryIndex", rng: RandomSource = None):
        self.index = index
        self.rng = make_rng(rng)

    def shuffle(self, items: Iterable[T]) -> List[T]:
        """Shuffled copy of ``items``"""
        items = list(items)
        if len(items) < 2:
            return items
        order = self.rng.permutation(len(items))
        return [items[i] for i in order]

    def select_random(self, tracks: Sequence[Track], count: int) -> List[Track]:
        """
        Uniformly sample ``count`` tracks without replacement.

        Returns every track (shuffled) when ``count`` exceeds the population.
        """
        if count <= 0 or not tracks:
            return []
        count = min(count, len(tracks))
        picks = self.rng.choice(len(tracks), size=count, replace=False)
        return [tracks[int(i)] for i in picks]

    def select_from_artists(
        self,
        artists: Iterable[str],
        max_per_artist: int,
        max_total: int,
        pool: Optional[Iterable[Track]] = None,
    ) -> List[Track]:
        """
        Pick up to ``max_per_artist`` tracks from each artist until ``max_total``.

        Args:
            artists: Artist names to draw from
            max_per_artist: Per-artist cap
            max_total: Overall cap
            pool: Optional restriction; only tracks in the pool (by path) are eligible

        Returns:
            Shuffled list of unique tracks
        """
        if max_total <= 0 or max_per_artist <= 0:
            return []

        pool_paths = {t.path for t in pool} if pool is not None else None
        unique_artists = list(dict.fromkeys(artists))

        result: List[Track] = []
        seen_paths = set()
        for artist in self.shuffle(unique_artists):
            remaining = max_total - len(result)
            if remaining <= 0:
                break

            candidates = [
                t for t in self.index.tracks_for_artist(artist)
                if t.path not in seen_paths and (pool_paths is None or t.path in pool_paths)
            ]
            if not candidates:
                continue

            picked = self.select_random(candidates, min(max_per_artist, len(candidates), remaining))
            result.extend(picked)
            seen_paths.update(t.path for t in picked)

        logger.debug(
            f"Selected {len(result)} tracks from {len(unique_artists)} artists "
            f"(max {max_per_artist}/artist, max {max_total} total)"
        )
        return self.shuffle(result)
