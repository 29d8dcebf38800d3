from __future__ import annotations

import copy
import os
from typing import Any, Dict

import yaml

DEFAULT_CONFIG: Dict[str, Dict[str, Any]] = {
    "images": {
        "color_distance_threshold": 75,
        "fetch_timeout": 20,
        "palette_size": 5,
    },
    "uploads": {
        "endpoint": "http://localhost:3001/api/uploads",
        "timeout": 60,
    },
    "seo": {
        "brand": "Donare Home",
        "material_hint": "couro vegano",
    },
}


def _config_path() -> str:
    return os.getenv("DONARE_CONFIG") or os.path.join("config", "config.yaml")


def load_config(path: str | None = None) -> dict:
    """Loads config/config.yaml (or DONARE_CONFIG) over the built-in defaults."""
    cfg = copy.deepcopy(DEFAULT_CONFIG)
    cfg_path = path or _config_path()
    if not os.path.exists(cfg_path):
        return cfg

    with open(cfg_path, "r", encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}

    for section, values in data.items():
        if isinstance(values, dict) and isinstance(cfg.get(section), dict):
            cfg[section].update(values)
        else:
            cfg[section] = values
    return cfg


def get_setting(cfg: dict, dotted: str, default=None):
    cur: Any = cfg
    for part in dotted.split("."):
        if isinstance(cur, dict) and part in cur:
            cur = cur[part]
        else:
            return default
    return cur
