"""Pytest configuration and shared fixtures."""

from __future__ import annotations

from collections.abc import Callable, Iterator
from pathlib import Path

import pytest
import structlog
from prometheus_client import REGISTRY

from shortbox.core.config import Settings, get_settings, reload_settings
from shortbox.core.knowledge import KnowledgeBaseStore
from shortbox.core.matching import config as matching_config
from shortbox.core.models import ComicKnowledge, VolumeInfo


@pytest.fixture(autouse=True)
def reset_prometheus_registry():
    """Reset Prometheus registry before each test to avoid duplicate metric registration.

    create_app() instruments every app in the global registry, so two apps in
    one session would otherwise raise "Duplicated timeseries" errors.
    """
    for collector in list(REGISTRY._collector_to_names.keys()):
        REGISTRY.unregister(collector)

    yield

    for collector in list(REGISTRY._collector_to_names.keys()):
        REGISTRY.unregister(collector)


@pytest.fixture(autouse=True)
def data_dir(monkeypatch, tmp_path: Path) -> Iterator[Path]:
    """Point every test at its own data directory with default settings."""
    data = tmp_path / "data"
    monkeypatch.setenv("SHORTBOX_DATA_DIR", str(data))
    monkeypatch.setattr(matching_config, "_cached_config", None)
    reload_settings()

    yield data

    structlog.contextvars.clear_contextvars()
    get_settings.cache_clear()


@pytest.fixture
def settings(data_dir: Path) -> Settings:
    return get_settings()


def _make_entry(series: str, publisher: str, start_year: int, *years: int) -> ComicKnowledge:
    return ComicKnowledge(
        series=series,
        publisher=publisher,
        start_year=start_year,
        volumes=[VolumeInfo(volume=str(year), year=year) for year in years],
    )


@pytest.fixture
def make_entry() -> Callable[..., ComicKnowledge]:
    """Factory for knowledge entries whose volumes are labelled by year."""
    return _make_entry


@pytest.fixture
def knowledge() -> list[ComicKnowledge]:
    """A small knowledge base covering the common matching cases."""
    return [
        _make_entry("Saga", "Image Comics", 2012, 2012),
        _make_entry("Batman", "DC Comics", 1940, 1940, 2011, 2016),
        _make_entry("The Amazing Spider-Man", "Marvel Comics", 1963, 1963, 1999, 2014, 2018),
        _make_entry("X-Men", "Marvel Comics", 1963, 1963, 1991),
        _make_entry("Invincible", "Image Comics", 2003, 2003),
        _make_entry("Detective Comics", "DC Comics", 1937, 1937, 2011, 2016),
    ]


@pytest.fixture
def knowledge_store(data_dir: Path) -> KnowledgeBaseStore:
    """Store backed by a file in the test data directory."""
    return KnowledgeBaseStore(data_dir / "config" / "knowledge_base.json")
