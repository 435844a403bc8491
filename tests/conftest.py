"""Pytest configuration and shared fixtures."""

from typing import List

import pytest

from freelancmusic.catalog.store import CatalogStore
from freelancmusic.models import Profile
from freelancmusic.storage import MemoryKeyValueStore, PreferenceStore


def make_profile(profile_id: str, name: str, instruments=(), genres=()) -> Profile:
    """Build a minimal profile for catalogue tests."""
    return Profile(
        id=profile_id,
        name=name,
        instruments=list(instruments),
        genres=list(genres),
    )


@pytest.fixture
def profiles() -> List[Profile]:
    """Small catalogue with overlapping instruments and genres."""
    return [
        make_profile("a", "Eleanor Vance", ["Violin", "Piano"], ["Classical"]),
        make_profile("b", "Marcus Holloway", ["Sax", "Clarinet"], ["Jazz", "Blues"]),
        make_profile("c", "Samuel Jones", ["Trumpet", "Sax"], ["Jazz", "Funk"]),
    ]


@pytest.fixture
def kv() -> MemoryKeyValueStore:
    return MemoryKeyValueStore()


@pytest.fixture
def store(profiles: List[Profile], kv: MemoryKeyValueStore) -> CatalogStore:
    """Store over the small catalogue with in-memory preferences."""
    return CatalogStore(profiles=profiles, preferences=PreferenceStore(kv))
