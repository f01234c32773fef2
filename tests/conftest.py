"""Test configuration and fixtures."""

import sys
from pathlib import Path

import pytest

# Add repo root to path for imports
sys.path.insert(0, str(Path(__file__).resolve().parents[1]))

from playlist_curator.library_index import LibraryIndex
from tests.fixtures.library_data import make_records


@pytest.fixture()
def rock_records():
    """Three artists with ten Rock tracks each."""
    records = []
    for artist in ("Alpha", "Bravo", "Charlie"):
        records.extend(make_records(artist, 10, genres=["Rock"]))
    return records


@pytest.fixture()
def mixed_records():
    """A small library with real genres, untagged folders and several decades."""
    records = []
    records.extend(make_records("Alpha", 8, genres=["Rock"], year=1984, folder="/music/Rock"))
    records.extend(make_records("Bravo", 8, genres=["Rock", "Pop"], year=1987, folder="/music/Rock"))
    records.extend(make_records("Charlie", 8, genres=["Rock"], year=1992, folder="/music/Rock"))
    records.extend(make_records("Delta", 6, genres=["Jazz"], year=1965, folder="/music/Jazz"))
    records.extend(make_records("Echo", 6, genres=["Jazz"], year=1968, folder="/music/Jazz"))
    records.extend(make_records("Foxtrot", 6, genres=["Jazz"], year=1961, folder="/music/Jazz"))
    # No genre tags at all: falls back to folder pseudo-genres
    records.extend(make_records("Golf", 5, folder="/music/Untagged"))
    records.extend(make_records("Hotel", 5, folder="/music/Untagged"))
    records.extend(make_records("India", 5, folder="/music/Untagged"))
    return records


@pytest.fixture()
def mixed_index(mixed_records):
    return LibraryIndex.build(mixed_records)
