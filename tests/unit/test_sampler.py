"""Tests for constrained track selection."""
from collections import Counter

import numpy as np
import pytest

from playlist_curator.library_index import LibraryIndex
from playlist_curator.playlist.sampler import TrackSampler, make_rng

from tests.fixtures.library_data import make_records


@pytest.fixture()
def rock_index(rock_records):
    return LibraryIndex.build(rock_records)


def test_make_rng_accepts_seed_and_generator():
    rng = np.random.default_rng(1)
    assert make_rng(rng) is rng
    assert make_rng(5).integers(1000) == np.random.default_rng(5).integers(1000)


def test_shuffle_is_a_permutation(rock_index):
    sampler = TrackSampler(rock_index, rng=3)
    items = list(range(20))
    shuffled = sampler.shuffle(items)
    assert sorted(shuffled) == items
    assert items == list(range(20))


def test_select_random_without_replacement(rock_index):
    sampler = TrackSampler(rock_index, rng=0)
    picked = sampler.select_random(rock_index.tracks, 12)
    assert len(picked) == 12
    assert len({t.path for t in picked}) == 12


def test_select_random_edge_cases(rock_index):
    sampler = TrackSampler(rock_index, rng=0)
    assert sampler.select_random(rock_index.tracks, 0) == []
    assert sampler.select_random([], 5) == []
    assert len(sampler.select_random(rock_index.tracks[:4], 10)) == 4


def test_select_from_artists_respects_caps(rock_index):
    sampler = TrackSampler(rock_index, rng=7)
    selected = sampler.select_from_artists(["Alpha", "Bravo", "Charlie"], max_per_artist=4, max_total=10)
    assert len(selected) == 10
    assert len({t.path for t in selected}) == 10
    assert max(Counter(t.artist for t in selected).values()) <= 4


def test_select_from_artists_ignores_duplicates_and_unknown(rock_index):
    sampler = TrackSampler(rock_index, rng=7)
    selected = sampler.select_from_artists(["Alpha", "Alpha", "Nobody"], max_per_artist=5, max_total=50)
    assert len(selected) == 5
    assert {t.artist for t in selected} == {"Alpha"}


def test_select_from_artists_restricted_to_pool(rock_index):
    sampler = TrackSampler(rock_index, rng=7)
    pool = rock_index.tracks_for_artist("Bravo")[:2] + rock_index.tracks_for_artist("Charlie")[:1]
    selected = sampler.select_from_artists(["Alpha", "Bravo", "Charlie"], max_per_artist=5, max_total=50, pool=pool)
    assert {t.path for t in selected} == {t.path for t in pool}


def test_select_from_artists_zero_budget(rock_index):
    sampler = TrackSampler(rock_index, rng=7)
    assert sampler.select_from_artists(["Alpha"], max_per_artist=0, max_total=10) == []
    assert sampler.select_from_artists(["Alpha"], max_per_artist=3, max_total=0) == []


def test_same_seed_reproduces_selection():
    index = LibraryIndex.build(
        make_records("A", 12, genres=["Rock"]) + make_records("B", 12, genres=["Rock"])
    )
    first = TrackSampler(index, rng=42).select_from_artists(["A", "B"], 5, 8)
    second = TrackSampler(index, rng=42).select_from_artists(["A", "B"], 5, 8)
    assert [t.path for t in first] == [t.path for t in second]
