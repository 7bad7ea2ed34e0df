"""Load ladder rating-system definitions from TOML files."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any

from domain.config_base import BaseSystemConfig, load_system_configs
from domain.ratings.calculator import RatingParameters


@dataclass(frozen=True)
class LadderSystemConfig(BaseSystemConfig):
    """Configuration for one ladder rating formula."""

    parameters: RatingParameters

    def as_config_json(self) -> dict[str, Any]:
        return {
            "initial_rating": self.parameters.initial_rating,
            "target_score": self.parameters.target_score,
            "k_factor": self.parameters.k_factor,
            "max_change": self.parameters.max_change,
            "scale_factor": self.parameters.scale_factor,
        }


def load_ladder_system_configs(config_dir: Path) -> list[LadderSystemConfig]:
    """Load and validate all ladder rating TOML config files in a directory."""
    return load_system_configs(
        config_dir,
        _parse_ladder_system_config,
        duplicate_name_label="ladder",
    )


def _parse_ladder_system_config(raw: dict[str, Any], file_path: Path) -> LadderSystemConfig:
    system_raw = raw.get("system", {})
    rating_raw = raw.get("rating", {})

    name = str(system_raw.get("name", "")).strip()
    if not name:
        raise ValueError(f"{file_path}: [system].name is required")

    description_value = system_raw.get("description")
    description = None if description_value is None else str(description_value)

    parameters = RatingParameters(
        initial_rating=float(rating_raw.get("initial_rating", 1000.0)),
        target_score=int(rating_raw.get("target_score", 21)),
        k_factor=float(rating_raw.get("k_factor", 8.0)),
        max_change=float(rating_raw.get("max_change", 30.0)),
        scale_factor=float(rating_raw.get("scale_factor", 400.0)),
    )
    _validate_parameters(file_path=file_path, parameters=parameters)

    return LadderSystemConfig(
        name=name,
        description=description,
        file_path=file_path,
        parameters=parameters,
    )


def _validate_parameters(*, file_path: Path, parameters: RatingParameters) -> None:
    if parameters.initial_rating <= 0.0:
        raise ValueError(f"{file_path}: [rating].initial_rating must be > 0")
    if parameters.target_score <= 0:
        raise ValueError(f"{file_path}: [rating].target_score must be > 0")
    if parameters.k_factor <= 0.0:
        raise ValueError(f"{file_path}: [rating].k_factor must be > 0")
    if parameters.max_change <= 0.0:
        raise ValueError(f"{file_path}: [rating].max_change must be > 0")
    if parameters.scale_factor <= 0.0:
        raise ValueError(f"{file_path}: [rating].scale_factor must be > 0")
