"""Directory-of-TOML loading shared by rating-system configs."""

from __future__ import annotations

from collections import defaultdict
from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, TypeVar
import tomllib


@dataclass(frozen=True)
class BaseSystemConfig:
    """Name and origin of one rating-system config file."""

    name: str
    description: str | None
    file_path: Path

    def as_config_json(self) -> dict[str, Any]:
        raise NotImplementedError


T = TypeVar("T", bound=BaseSystemConfig)


def config_files(config_dir: Path) -> list[Path]:
    """``*.toml`` files in ``config_dir``, sorted so the first is the default system."""
    if not config_dir.exists():
        raise FileNotFoundError(f"Config directory not found: {config_dir}")
    if not config_dir.is_dir():
        raise NotADirectoryError(f"Config path is not a directory: {config_dir}")

    files = sorted(config_dir.glob("*.toml"))
    if not files:
        raise ValueError(f"No .toml config files found in: {config_dir}")
    return files


def read_toml(file_path: Path) -> dict[str, Any]:
    try:
        with file_path.open("rb") as file:
            return tomllib.load(file)
    except tomllib.TOMLDecodeError as exc:
        raise ValueError(f"{file_path}: invalid TOML ({exc})") from exc


def load_system_configs(
    config_dir: Path,
    parser: Callable[[dict[str, Any], Path], T],
    *,
    duplicate_name_label: str = "rating",
) -> list[T]:
    """Parse every config file; system names must be unique across the directory."""
    systems = [parser(read_toml(file_path), file_path) for file_path in config_files(config_dir)]

    files_by_name: dict[str, list[str]] = defaultdict(list)
    for system in systems:
        files_by_name[system.name].append(system.file_path.name)
    clashes = {name: files for name, files in files_by_name.items() if len(files) > 1}
    if clashes:
        details = "; ".join(f"{name} in {', '.join(files)}" for name, files in sorted(clashes.items()))
        raise ValueError(f"Duplicate {duplicate_name_label} system names found in {config_dir}: {details}")

    return systems


def select_system_config(configs: Sequence[T], name: str | None) -> T:
    """The named system, or the first one when ``name`` is None."""
    by_name = {config.name: config for config in configs}
    if name is None:
        return configs[0]
    if name not in by_name:
        raise KeyError(f"No rating system named '{name}'. Available: {', '.join(by_name)}")
    return by_name[name]


__all__ = [
    "BaseSystemConfig",
    "config_files",
    "load_system_configs",
    "read_toml",
    "select_system_config",
]
