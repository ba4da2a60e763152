"""Engine configuration loaded from YAML with environment overrides."""

from __future__ import annotations

import copy
import os
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, Optional

import yaml
from dotenv import load_dotenv


BASE_DIR = Path(__file__).resolve().parents[1]
CONFIG_PATH = BASE_DIR / "config" / "engine_config.yaml"

load_dotenv()

DEFAULT_CONFIG: Dict[str, Any] = {
    "provider": {
        "kind": "csv",
        "csv_path": "data/bangalore_suppliers_sample.csv",
    },
    "retrieval": {
        "default_top_k": 10,
    },
    "lookup": {
        "strict_matching": False,
    },
    "prediction": {
        "strategy": "heuristic",
        "fixed_confidence": 82.0,
    },
    "auditing": {
        "enabled": True,
        "database": False,
    },
}


def _merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    merged = copy.deepcopy(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _merge(merged[key], value)
        else:
            merged[key] = value
    return merged


def load_config(path: Optional[Path] = None) -> Dict[str, Any]:
    """Read engine settings from YAML, falling back to the built-in defaults.

    ``SUPPLIER_RAG_CONFIG`` points at an alternative file when ``path`` is
    not given. Missing sections keep their defaults.
    """

    config_path = Path(path or os.getenv("SUPPLIER_RAG_CONFIG") or CONFIG_PATH)
    if config_path.exists():
        merged = _read_config(str(config_path.resolve()), config_path.stat().st_mtime_ns)
        return copy.deepcopy(merged)
    return copy.deepcopy(DEFAULT_CONFIG)


@lru_cache(maxsize=8)
def _read_config(path: str, mtime_ns: int) -> Dict[str, Any]:
    # Keyed on mtime so an edited file is parsed again.
    with open(path, "r", encoding="utf-8") as stream:
        user_config = yaml.safe_load(stream) or {}
    return _merge(DEFAULT_CONFIG, user_config)


def resolve_path(value: str) -> Path:
    """Resolve a config path relative to the repository root."""

    path = Path(value)
    return path if path.is_absolute() else BASE_DIR / path
