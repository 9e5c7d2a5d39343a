from __future__ import annotations

import logging
from pathlib import Path

import pytest

from exportgen.logging import close_handlers

from tests._fixtures.package_builder import PackageBuilder


@pytest.fixture
def package_builder(tmp_path: Path) -> PackageBuilder:
    """Provide a throwaway R package rooted at the pytest tmp_path."""
    return PackageBuilder(tmp_path)


@pytest.fixture(autouse=True)
def _reset_exportgen_logger():
    """Undo CLI logging configuration so caplog keeps receiving records."""
    yield
    logger = logging.getLogger("exportgen")
    close_handlers(logger)
    logger.propagate = True
    logger.setLevel(logging.NOTSET)
