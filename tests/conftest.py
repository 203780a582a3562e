from __future__ import annotations

from loguru import logger
import pytest

from evospecies.speciation.config import SpeciationConfig


@pytest.fixture
def conf() -> SpeciationConfig:
    """Defaults, but no young-age boost so adjusted fitness is easy to predict."""
    return SpeciationConfig(
        total_population_size=10,
        young_age_threshold=0,
        old_age_threshold=40,
        species_max_stagnation=400,
    )


@pytest.fixture
def caplog(caplog):
    handler_id = logger.add(caplog.handler, format="{message}", level="DEBUG")
    yield caplog
    logger.remove(handler_id)
