"""Synthetic library records for tests.

Every record is built deterministically from the artist name and an index, so
paths, titles and modification times are stable across runs.
"""

import numpy as np

from playlist_curator.library_index import LibraryIndex
from playlist_curator.playlist.config import GenerationOptions
from playlist_curator.playlist.sampler import TrackSampler
from playlist_curator.playlist.strategies.base_strategy import GenerationContext
from playlist_curator.similarity_calculator import ArtistSimilarity


def make_records(artist, count, genres=None, year=None, folder=None, start=0, modified=0.0):
    """Build ``count`` track records for one artist."""
    folder = folder or f"/music/{artist}"
    records = []
    for i in range(start, start + count):
        records.append({
            "path": f"{folder}/{artist} - Song {i:02d}.mp3",
            "title": f"Song {i:02d}",
            "artist": artist,
            "album": f"{artist} Album",
            "genres": list(genres or []),
            "year": year,
            "duration": 180 + i,
            "modifiedTime": modified + i,
        })
    return records


def build_context(records, rng=0, **options):
    """Finalized index plus a generation context over ``records``."""
    index = LibraryIndex.build(records)
    opts = GenerationOptions.from_mapping(options)
    return GenerationContext(
        index=index,
        options=opts,
        sampler=TrackSampler(index, np.random.default_rng(rng)),
        similarity=ArtistSimilarity(index, opts.similarity_weights),
    )
