"""
Shared fixtures: in-memory vaults, settings and engines.
"""

import pytest

from backlinker.config import Settings
from backlinker.engine import AutoLinkEngine
from backlinker.models.options import LinkOptions, PatternOptions
from backlinker.store import MemoryStore


@pytest.fixture
def make_settings():
    """Settings factory that ignores .env files and does not sleep between retries"""

    def _make(**overrides) -> Settings:
        values = {"io_retry_base_delay": 0.0}
        values.update(overrides)
        return Settings(_env_file=None, **values)

    return _make


@pytest.fixture
def make_options():
    """LinkOptions factory; pattern flags are passed flat"""

    def _make(ignore_case=False, partial_match=False, allow_particles=True, **overrides) -> LinkOptions:
        return LinkOptions(
            pattern=PatternOptions(
                ignore_case=ignore_case,
                partial_match=partial_match,
                allow_particles=allow_particles,
            ),
            **overrides,
        )

    return _make


@pytest.fixture
def vault() -> MemoryStore:
    """Small vault: two people and a journal mentioning both"""
    return MemoryStore(
        {
            "Alice.md": "Alice is a person.",
            "Bob.md": "Bob knows Alice.",
            "Journal.md": "Met Alice and Bob today.",
        }
    )


@pytest.fixture
def make_engine(make_settings):
    """Build an engine over a store with an index already built"""

    async def _make(store, reviewer=None, progress=None, **overrides) -> AutoLinkEngine:
        engine = AutoLinkEngine(store, make_settings(**overrides), reviewer=reviewer, progress=progress)
        await engine.rebuild_index()
        return engine

    return _make


def pytest_configure(config):
    config.addinivalue_line("markers", "unit: Unit tests (fast, isolated)")
    config.addinivalue_line("markers", "integration: Engine tests against an in-memory store")
