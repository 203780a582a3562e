"""Build a SpeciationConfig from YAML files, mappings and dotlist overrides."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Mapping

from loguru import logger
from omegaconf import DictConfig, OmegaConf

from evospecies.speciation.config import SpeciationConfig


def load_config(
    source: str | Path | Mapping[str, Any] | DictConfig | None = None,
    overrides: list[str] | None = None,
    key: str | None = None,
) -> SpeciationConfig:
    """Load and validate speciation parameters.

    Args:
        source: YAML file path, plain mapping or DictConfig; None uses defaults
        overrides: dotlist overrides applied last (e.g. ["crossover=false"])
        key: optional dotted path of the speciation section inside `source`
            (e.g. "evolution.speciation")

    Returns:
        Validated SpeciationConfig. Interpolations are resolved first;
        pydantic raises ValidationError for out-of-range values.

    Example:
        load_config("run.yaml", overrides=["total_population_size=50"])
    """
    if source is None:
        cfg = OmegaConf.create({})
    elif isinstance(source, (str, Path)):
        cfg = OmegaConf.load(Path(source))
    elif isinstance(source, DictConfig):
        cfg = source
    else:
        cfg = OmegaConf.create(dict(source))

    if key is not None:
        section = OmegaConf.select(cfg, key)
        if section is None:
            raise KeyError(f"Config section '{key}' not found")
        cfg = section

    if overrides:
        cfg = OmegaConf.merge(cfg, OmegaConf.from_dotlist(overrides))

    values = OmegaConf.to_container(cfg, resolve=True)
    config = SpeciationConfig.model_validate(values)
    logger.debug("Loaded speciation config: {}", config.model_dump())
    return config
