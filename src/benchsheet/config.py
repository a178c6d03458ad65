# Copyright (c) Syntropy Systems
"""Configuration management for benchsheet."""
from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import cast

import yaml

CONFIG_DIR_NAME = ".benchsheet"
CONFIG_FILE_NAME = "config.yaml"


@dataclass
class BenchsheetConfig:
    """Configuration for benchsheet."""

    # Delay before the first heap sample of an iteration (milliseconds)
    initial_delay_ms: int = 10

    # Period between heap samples (milliseconds)
    sampling_period_ms: int = 100

    # Unit cell of placeholder rows for metrics a run does not carry
    missing_unit: str = "none"

    # Statistic type cell of placeholder rows
    missing_statistic: str = "none"

    @property
    def initial_delay(self) -> float:
        """Initial sampling delay in seconds."""
        return self.initial_delay_ms / 1000

    @property
    def sampling_period(self) -> float:
        """Sampling period in seconds."""
        return self.sampling_period_ms / 1000


def find_config_dir(start_path: Path | None = None) -> Path | None:
    """Find the nearest .benchsheet directory by walking up from start_path.

    Returns None if no .benchsheet directory is found.
    """
    if start_path is None:
        start_path = Path.cwd()

    current = start_path.resolve()

    while current != current.parent:
        config_dir = current / CONFIG_DIR_NAME
        if config_dir.is_dir():
            return config_dir
        current = current.parent

    # Check root
    config_dir = current / CONFIG_DIR_NAME
    if config_dir.is_dir():
        return config_dir

    return None


def get_global_config_dir() -> Path:
    """Get the global benchsheet config directory (~/.benchsheet)."""
    return Path.home() / CONFIG_DIR_NAME


def load_config(config_dir: Path | None = None) -> BenchsheetConfig:
    """Load configuration from .benchsheet/config.yaml or defaults.

    Looks for config in:
    1. Provided config_dir
    2. Nearest .benchsheet directory walking up
    3. ~/.benchsheet/config.yaml
    4. Defaults
    """
    config = BenchsheetConfig()

    config_path = None

    if config_dir is not None:
        config_path = config_dir / CONFIG_FILE_NAME
    else:
        found_dir = find_config_dir()
        if found_dir is not None:
            config_path = found_dir / CONFIG_FILE_NAME
        else:
            global_config = get_global_config_dir() / CONFIG_FILE_NAME
            if global_config.exists():
                config_path = global_config

    if config_path is not None and config_path.exists():
        with config_path.open() as f:
            data = cast("dict[str, object]", yaml.safe_load(f) or {})

        initial_delay_ms = data.get("initial_delay_ms")
        if isinstance(initial_delay_ms, (int, float)) and initial_delay_ms >= 0:
            config.initial_delay_ms = int(initial_delay_ms)
        sampling_period_ms = data.get("sampling_period_ms")
        if isinstance(sampling_period_ms, (int, float)) and sampling_period_ms > 0:
            config.sampling_period_ms = int(sampling_period_ms)
        missing_unit = data.get("missing_unit")
        if isinstance(missing_unit, str):
            config.missing_unit = missing_unit
        missing_statistic = data.get("missing_statistic")
        if isinstance(missing_statistic, str):
            config.missing_statistic = missing_statistic

    return config
