"""Pytest configuration and fixtures."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterator

import pytest
from fastapi.testclient import TestClient

from pikablast.main import create_app
from pikablast.services.score_ledger import ScoreLedger
from pikablast.utils.logging_utils import BACKEND_LOGGER, FRONTEND_LOGGER


class FixedRandom:
    """Random source that replays a fixed sequence of draws."""

    def __init__(self, *values: float):
        self._values = list(values)

    def random(self) -> float:
        return self._values.pop(0)


@pytest.fixture(autouse=True)
def reset_logging() -> Iterator[None]:
    """Drop handlers installed by configure_logging after each test."""
    yield
    for name in (BACKEND_LOGGER, FRONTEND_LOGGER):
        logger = logging.getLogger(name)
        for handler in list(logger.handlers):
            logger.removeHandler(handler)
            handler.close()


@pytest.fixture
def log_dir(tmp_path: Path) -> Path:
    return tmp_path / "logs"


@pytest.fixture
def ledger() -> ScoreLedger:
    return ScoreLedger()


@pytest.fixture
def client(ledger: ScoreLedger, log_dir: Path) -> Iterator[TestClient]:
    """Test client over a fresh ledger, with logs written under tmp_path."""
    app = create_app(ledger=ledger, log_dir=log_dir, static_dir=None)
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def fixed_random() -> type[FixedRandom]:
    return FixedRandom
