"""YAML files for island configuration."""

from __future__ import annotations

from pathlib import Path

import yaml

from .schemas import IslandConfig


def load_config(yaml_path: str | Path) -> IslandConfig:
    """Read an ``IslandConfig``; a missing file raises FileNotFoundError, bad content ValueError."""
    yaml_path = Path(yaml_path)
    if not yaml_path.exists():
        raise FileNotFoundError(f"Config file not found: {yaml_path}")

    with open(yaml_path, "r", encoding="utf-8") as f:
        data = yaml.safe_load(f)
    if not data:
        raise ValueError(f"Empty or invalid YAML file: {yaml_path}")

    try:
        return IslandConfig.from_dict(data)
    except Exception as e:
        raise ValueError(f"Invalid island configuration in {yaml_path}: {e}") from e


def save_config(config: IslandConfig, yaml_path: str | Path) -> None:
    yaml_path = Path(yaml_path)
    yaml_path.parent.mkdir(parents=True, exist_ok=True)
    with open(yaml_path, "w", encoding="utf-8") as f:
        yaml.dump(config.to_dict(), f, default_flow_style=False, sort_keys=False, indent=2)
