"""
Shared fixtures for Pokedex service tests.
"""

import pytest

from fakes import FakeCatalogClient, SleepRecorder
from service_pokedex.app.hydration.policy import FetchPolicy, detail_retry_config


@pytest.fixture
def sleep_recorder():
    return SleepRecorder()


@pytest.fixture
def fast_policy(sleep_recorder):
    """Default retry policy (2 retries, 0.5s base) without real sleeping."""
    return FetchPolicy(detail_retry_config(retries=2, base_delay=0.5), sleep=sleep_recorder)


@pytest.fixture
def pokemon_pair():
    return [(1, "pikachu"), (2, "charizard")]


@pytest.fixture
def fake_client(pokemon_pair):
    return FakeCatalogClient(pokemon_pair)
