"""Pytest configuration and fixtures."""

import random

import pytest

from carboniq.config.settings import Settings
from carboniq.infrastructure.auth import UserIdentity
from carboniq.infrastructure.database import InMemoryFarmStore


class ScriptedRandom(random.Random):
    """Random source that replays fixed draws for ``random()``."""

    def __init__(self, draws):
        super().__init__(0)
        self.draws = list(draws)

    def random(self):
        return self.draws.pop(0)


@pytest.fixture
def settings():
    """Provide settings fixture."""
    return Settings()


@pytest.fixture
def store():
    """Provide an empty in-memory farm store."""
    return InMemoryFarmStore()


@pytest.fixture
def user():
    return UserIdentity(id="user-1", email="farmer@example.com")


@pytest.fixture
def valid_farm():
    """A submission payload that passes every deterministic check."""
    return {
        "name": "Green Valley Farm",
        "land_size": 2.0,
        "crop_types": ["Maize"],
        "coordinates": [0.0236, 37.9062],
        "farming_practices": ["No-till farming", "Composting"],
        "planting_date": "2024-03-15",
    }


@pytest.fixture
def scripted_rng():
    """Factory for random sources with pinned draws."""
    return ScriptedRandom
