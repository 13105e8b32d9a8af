"""
Engine configuration.

The dataclass is the single source of truth for all options (and their defaults).
A YAML file and/or CLI-style overrides (e.g. ["legality_workers=4"]) can be merged on top.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from omegaconf import OmegaConf

from src.engine.fen import STARTING_FEN


@dataclass
class EngineConfig:
    # position a new game starts from
    starting_fen: str = STARTING_FEN
    # > 1: spread the legality checks of a position over a thread pool
    legality_workers: int = 1
    log_level: str = "INFO"
    log_file: Optional[str] = None

    def __post_init__(self) -> None:
        if self.legality_workers < 1:
            msg = f"legality_workers must be at least 1, got {self.legality_workers}"
            raise ValueError(msg)


def load_config(
    config_path: Optional[str | Path] = None, overrides: Optional[list[str]] = None
) -> EngineConfig:
    """Load the configuration: defaults <-- YAML file (optional) <-- overrides (optional)"""
    config = OmegaConf.structured(EngineConfig)

    if config_path is not None:
        config_path = Path(config_path)
        if not config_path.exists():
            msg = f"Config file not found: {config_path}"
            raise FileNotFoundError(msg)
        config = OmegaConf.merge(config, OmegaConf.load(config_path))

    if overrides:
        config = OmegaConf.merge(config, OmegaConf.from_dotlist(overrides))

    return EngineConfig(**OmegaConf.to_container(config))
