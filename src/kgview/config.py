from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Any, Dict, Iterable, Literal, Optional, Type, TypeVar

from dotenv import find_dotenv, load_dotenv
from pydantic import BaseModel, Field, field_validator
from yaml import YAMLError, safe_load

logger = logging.getLogger(__name__)

T = TypeVar("T", bound="KGConfig")

HOME_CONFIG_DIR = Path("~/.kgconf/").expanduser()


class KGConfig(BaseModel):
    """Base config for kg* packages to inherit from."""
    pass


class LayoutConfig(BaseModel):
    """
    Knobs consumed by the layout engine.

    width/height bound seeding and centering; the force constants follow the
    defaults of the d3-force simulation the viewer was tuned with.
    """
    width: float = 800.0
    height: float = 600.0
    strategy: Literal["force", "hierarchical"] = "force"

    # force-directed
    iterations: int = 300
    seed: Optional[int] = 0
    edge_rest_length: float = 150.0
    link_strength: float = 0.5
    charge_strength: float = -800.0
    max_interaction_distance: float = 400.0
    min_node_separation: float = 60.0
    collision_strength: float = 0.8
    velocity_decay: float = 0.4
    alpha_min: float = 0.001
    node_center_offset: float = 50.0

    # hierarchical
    direction: Literal["RIGHT", "LEFT", "DOWN", "UP"] = "RIGHT"
    node_width: float = 150.0
    node_height: float = 80.0
    node_spacing: float = 100.0
    layer_spacing: float = 150.0
    padding: float = 50.0
    crossing_sweeps: int = 4
    hierarchical_timeout: float = 10.0

    @field_validator("width", "height")
    @classmethod
    def _positive(cls, v: float) -> float:
        if v <= 0:
            raise ValueError("viewport size must be positive")
        return v

    @field_validator("iterations", "crossing_sweeps")
    @classmethod
    def _non_negative(cls, v: int) -> int:
        if v < 0:
            raise ValueError("must not be negative")
        return v


class KGViewConfig(KGConfig):
    """
    The configuration for kgview.
    """
    mode: Literal["er", "full"] = "er"
    fallback: Literal["empty", "placeholder"] = "empty"
    id_strategy: Literal["sequential", "hashed"] = "sequential"
    log_level: str = "INFO"
    layout: LayoutConfig = Field(default_factory=LayoutConfig)


def _read_yaml(path: Path) -> Dict[str, Any]:
    if not path.exists():
        return {}
    with path.open("r") as f:
        data = safe_load(f)  # handles YAML merges/anchors too
    return data or {}


def _deep_merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    """
    Deep-merge two dicts. Dicts merge recursively; for non-dicts (incl. lists),
    the override wins entirely.
    """
    out = dict(base)
    for k, v in override.items():
        if k in out and isinstance(out[k], dict) and isinstance(v, dict):
            out[k] = _deep_merge(out[k], v)
        else:
            out[k] = v
    return out


def _load_dotenv_files(config_name: str) -> None:
    dotenv_path = find_dotenv(usecwd=True)
    if dotenv_path:
        logger.debug(f"Loading .env from: {dotenv_path}")
        load_dotenv(dotenv_path, override=False)

    # config-specific .env, e.g. ./kgview.env
    specific = Path.cwd() / f"{config_name}.env"
    if specific.exists():
        logger.debug(f"Loading config-specific .env from: {specific}")
        load_dotenv(specific, override=True)


class ConfigLoader:
    """
    Layered config loader with deep merging.

    Load order (low → high priority):
      1) base:   ~/.kgconf/{name}.yaml (or .yml)
      2) cwd:    ./{name}.yaml (or .yml)
      3) file:   explicit `path` if provided
      4) env:    YAML content from env var {name.upper()}_CONFIG
      5) env:    single fields from {name.upper()}_{FIELD} (highest priority)

    Later layers override earlier ones (deep merge).
    """
    def __init__(self, config_name: str, home_dir: Optional[Path] = None):
        self.config_name = config_name or "kgview"
        self.home_dir = home_dir or HOME_CONFIG_DIR

    def _candidate_paths(self, path: Optional[str | Path]) -> Iterable[Path]:
        explicit = [Path(path)] if path else []

        # support both .yaml and .yml
        base = [
            self.home_dir / f"{self.config_name}.yaml",
            self.home_dir / f"{self.config_name}.yml",
        ]
        cwd = [
            Path.cwd() / f"{self.config_name}.yaml",
            Path.cwd() / f"{self.config_name}.yml",
        ]

        # merge order: base → cwd → explicit
        return base + cwd + explicit

    def _env_overrides(self, config_class: Type[T]) -> Dict[str, Any]:
        env_config: Dict[str, Any] = {}

        env_var_name = f"{self.config_name.upper()}_CONFIG"
        env_content = os.environ.get(env_var_name)
        if env_content:
            try:
                d = safe_load(env_content)
            except YAMLError as e:
                raise ValueError(f"Failed to parse {env_var_name}: {e}") from e
            if isinstance(d, dict):
                env_config = d

        env_prefix = f"{self.config_name.upper()}_"
        for field_name in config_class.model_fields.keys():
            env_value = os.environ.get(env_prefix + field_name.upper())
            if env_value is None:
                continue
            try:
                parsed = safe_load(env_value)
            except YAMLError:
                parsed = env_value
            # nested sections come in as YAML mappings, scalars stay strings for pydantic
            env_config[field_name] = parsed if isinstance(parsed, dict) else env_value
        return env_config

    def load_config(self, config_class: Type[T], path: Optional[str | Path] = None) -> T:
        if path and not Path(path).exists():
            raise FileNotFoundError(f"Config file not found: {path}")

        _load_dotenv_files(self.config_name)

        merged: Dict[str, Any] = {}
        for p in self._candidate_paths(path):
            d = _read_yaml(p)
            if d:
                logger.debug(f"Loaded config layer {p}")
                merged = _deep_merge(merged, d)

        env_config = self._env_overrides(config_class)
        if env_config:
            merged = _deep_merge(merged, env_config)

        return config_class(**merged)


def load_config(path: Optional[str | Path] = None) -> KGViewConfig:
    """
    Load the configuration for kgview.
    """
    return ConfigLoader("kgview").load_config(KGViewConfig, path)
