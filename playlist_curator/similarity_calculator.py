"""
Artist Similarity - heuristic artist-to-artist similarity over library metadata.

Scores combine three weighted factors (shared genres, shared folders, artist
name tokens). Results are memoised per (seed, limit, weights); the cache is
owned by this object and cleared whenever the weights change. The engine
builds a fresh instance on every rescan.
"""
import logging
from typing import Dict, List, Optional, Sequence, Tuple

from .library_index import LibraryIndex
from .models import ArtistProfile
from .playlist.config import SimilarityWeights
from .string_utils import name_tokens

logger = logging.getLogger(__name__)

MIN_SIMILARITY = 0.1
FIRST_TOKEN_MATCH_SCORE = 0.8
SHARED_TOKEN_SCALE = 0.5


def overlap_ratio(left: Sequence, right: Sequence) -> float:
    """|common| / max(1, max(|left|, |right|))"""
    left_set, right_set = set(left), set(right)
    common = len(left_set & right_set)
    return common / max(1, max(len(left_set), len(right_set)))


def name_similarity(name_a: str, name_b: str) -> float:
    """
    Name factor between two artists.

    0.8 when the first tokens match (case-insensitive, longer than 2 chars),
    otherwise 0.5 * shared tokens longer than 3 chars / max token count.
    """
    words_a = name_tokens(name_a)
    words_b = name_tokens(name_b)
    if not words_a or not words_b:
        return 0.0

    if words_a[0] == words_b[0] and len(words_a[0]) > 2:
        return FIRST_TOKEN_MATCH_SCORE

    common = [w for w in words_a if w in words_b and len(w) > 3]
    if not common:
        return 0.0
    return SHARED_TOKEN_SCALE * (len(common) / max(len(words_a), len(words_b)))


class ArtistSimilarity:
    """Weighted artist similarity with a per-instance memo cache"""

    def __init__(self, index: LibraryIndex, weights: Optional[SimilarityWeights] = None):
        self.index = index
        self._weights = weights or SimilarityWeights()
        self._cache: Dict[Tuple[str, int, Tuple[float, float, float]], List[str]] = {}
        self._hits = 0
        self._misses = 0

    @property
    def weights(self) -> SimilarityWeights:
        return self._weights

    def set_weights(self, weights: Optional[SimilarityWeights] = None, **changes: float) -> SimilarityWeights:
        """
        Replace the weights and clear the cache.

        Args:
            weights: Complete replacement weights
            **changes: Individual factors to change (genre, folder, artist_name)
        """
        new_weights = weights or self._weights
        if changes:
            new_weights = new_weights.updated(changes)
        if new_weights != self._weights:
            logger.debug(f"Similarity weights changed: {self._weights} -> {new_weights}")
        self._weights = new_weights
        self.clear_cache()
        return self._weights

    def clear_cache(self) -> None:
        self._cache.clear()
        self._hits = 0
        self._misses = 0

    def cache_info(self) -> Dict[str, int]:
        return {"entries": len(self._cache), "hits": self._hits, "misses": self._misses}

    def score(self, seed: ArtistProfile, other: ArtistProfile) -> float:
        """Weighted similarity between two artist profiles"""
        weights = self._weights
        similarity = 0.0
        if weights.genre > 0:
            similarity += weights.genre * overlap_ratio(seed.genres, other.genres)
        if weights.folder > 0:
            similarity += weights.folder * overlap_ratio(seed.folders, other.folders)
        if weights.artist_name > 0:
            similarity += weights.artist_name * name_similarity(seed.name, other.name)
        return similarity

    def similar_artists(self, seed: str, limit: int = 10) -> List[str]:
        """
        Artists most similar to ``seed``, best first.

        Scores <= 0.1 are dropped; ties follow library insertion order.

        Args:
            seed: Artist name
            limit: Maximum number of artists returned

        Returns:
            Ordered list of artist names (empty for unknown artists)
        """
        key = (seed, limit, self._weights.as_key())
        cached = self._cache.get(key)
        if cached is not None:
            self._hits += 1
            return list(cached)
        self._misses += 1

        seed_profile = self.index.artists.get(seed)
        if seed_profile is None or limit <= 0:
            result: List[str] = []
        else:
            scored = []
            for name, profile in self.index.artists.items():
                if name == seed:
                    continue
                score = self.score(seed_profile, profile)
                if score > MIN_SIMILARITY:
                    scored.append((score, self.index.artist_position(name), name))
            scored.sort(key=lambda item: (-item[0], item[1]))
            result = [name for _, _, name in scored[:limit]]
            logger.debug(f"Similar to {seed}: {len(result)} artists (limit={limit})")

        self._cache[key] = result
        return list(result)
