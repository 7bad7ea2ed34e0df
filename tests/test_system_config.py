"""Tests for TOML-based ladder system config loading."""

from __future__ import annotations

from pathlib import Path

import pytest

from domain.config_base import select_system_config
from domain.ratings.config import load_ladder_system_configs

REPO_CONFIG_DIR = Path(__file__).resolve().parents[1] / "configs" / "ratings" / "ladder"


def test_load_ladder_system_configs_from_directory(tmp_path: Path) -> None:
    config_path = tmp_path / "default.toml"
    config_path.write_text(
        """
[system]
name = "system_a"
description = "A test system"

[rating]
initial_rating = 1200.0
target_score = 11
k_factor = 12.0
max_change = 40.0
scale_factor = 420.0
""".strip()
    )

    configs = load_ladder_system_configs(tmp_path)
    assert len(configs) == 1

    system = configs[0]
    assert system.name == "system_a"
    assert system.description == "A test system"
    assert system.file_path == config_path
    assert system.parameters.initial_rating == pytest.approx(1200.0)
    assert system.parameters.target_score == 11
    assert system.parameters.k_factor == pytest.approx(12.0)
    assert system.parameters.max_change == pytest.approx(40.0)
    assert system.parameters.scale_factor == pytest.approx(420.0)


def test_missing_rating_values_fall_back_to_defaults(tmp_path: Path) -> None:
    (tmp_path / "minimal.toml").write_text('[system]\nname = "minimal"\n')

    system = load_ladder_system_configs(tmp_path)[0]

    assert system.description is None
    assert system.as_config_json() == {
        "initial_rating": 1000.0,
        "target_score": 21,
        "k_factor": 8.0,
        "max_change": 30.0,
        "scale_factor": 400.0,
    }


def test_shipped_default_config_matches_documented_constants() -> None:
    configs = load_ladder_system_configs(REPO_CONFIG_DIR)

    system = select_system_config(configs, "ladder_default")
    assert system.parameters.target_score == 21
    assert system.parameters.k_factor == pytest.approx(8.0)
    assert system.parameters.max_change == pytest.approx(30.0)


def test_duplicate_names_raise_error(tmp_path: Path) -> None:
    template = """
[system]
name = "dup"

[rating]
k_factor = 8.0
""".strip()
    (tmp_path / "a.toml").write_text(template)
    (tmp_path / "b.toml").write_text(template)

    with pytest.raises(ValueError, match="Duplicate ladder system names"):
        load_ladder_system_configs(tmp_path)


def test_missing_name_is_rejected(tmp_path: Path) -> None:
    (tmp_path / "nameless.toml").write_text('[rating]\nk_factor = 8.0\n')

    with pytest.raises(ValueError, match=r"\[system\]\.name is required"):
        load_ladder_system_configs(tmp_path)


@pytest.mark.parametrize(
    "field",
    ["initial_rating", "target_score", "k_factor", "max_change", "scale_factor"],
)
def test_non_positive_parameters_are_rejected(tmp_path: Path, field: str) -> None:
    (tmp_path / "bad.toml").write_text(f'[system]\nname = "bad"\n\n[rating]\n{field} = 0\n')

    with pytest.raises(ValueError, match=rf"\[rating\]\.{field} must be > 0"):
        load_ladder_system_configs(tmp_path)


def test_empty_directory_raises(tmp_path: Path) -> None:
    with pytest.raises(ValueError, match="No .toml config files"):
        load_ladder_system_configs(tmp_path)


def test_missing_directory_raises(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError):
        load_ladder_system_configs(tmp_path / "nope")


def test_select_system_config_by_name(tmp_path: Path) -> None:
    (tmp_path / "a.toml").write_text('[system]\nname = "alpha"\n')
    (tmp_path / "b.toml").write_text('[system]\nname = "beta"\n\n[rating]\ntarget_score = 11\n')
    configs = load_ladder_system_configs(tmp_path)

    assert select_system_config(configs, None).name == "alpha"
    assert select_system_config(configs, "beta").parameters.target_score == 11
    with pytest.raises(KeyError, match="gamma"):
        select_system_config(configs, "gamma")


def test_malformed_toml_names_the_file(tmp_path: Path) -> None:
    (tmp_path / "broken.toml").write_text('[system\nname = "oops"\n')

    with pytest.raises(ValueError, match=r"broken\.toml: invalid TOML"):
        load_ladder_system_configs(tmp_path)


def test_duplicate_error_lists_clashing_files(tmp_path: Path) -> None:
    (tmp_path / "a.toml").write_text('[system]\nname = "dup"\n')
    (tmp_path / "b.toml").write_text('[system]\nname = "dup"\n')
    (tmp_path / "c.toml").write_text('[system]\nname = "unique"\n')

    with pytest.raises(ValueError, match=r"dup in a\.toml, b\.toml$"):
        load_ladder_system_configs(tmp_path)
