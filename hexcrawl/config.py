from __future__ import annotations
from typing import Any, Dict, Iterable
import os, json, copy

import yaml

DEFAULTS: Dict[str, Any] = {
    "grid": {"hex_size": 30.0},
    "exploration": {"sight_distance": 2, "min_sight": 1, "max_sight": 10},
    "flood_fill": {"large_threshold": 20, "preview_limit": 100},
    "server": {"host": "127.0.0.1", "port": 8000, "reload": False, "log_level": "info"},
}

ENV_PREFIX = "HEXCRAWL__"

def _deep_merge(a: Dict[str, Any], b: Dict[str, Any]) -> Dict[str, Any]:
    out = dict(a)
    for k, v in (b or {}).items():
        if isinstance(v, dict) and isinstance(out.get(k), dict):
            out[k] = _deep_merge(out[k], v)
        else:
            out[k] = v
    return out

def _load_one(path: str) -> Dict[str, Any]:
    with open(path, "r", encoding="utf-8") as f:
        text = f.read()
    # .json files go through json, everything else through YAML
    try:
        d = json.loads(text) if path.endswith(".json") else yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ValueError(f"Cannot parse config file {path}: {exc}") from exc
    if d is None:
        return {}
    if not isinstance(d, dict):
        raise ValueError(f"Config file {path} must contain a mapping, got {type(d).__name__}")
    return d

def load_configs(paths: Iterable[str] | None) -> Dict[str, Any]:
    cfg: Dict[str, Any] = {}
    for p in (paths or []):
        cfg = _deep_merge(cfg, _load_one(p))
    return cfg

def env_overrides(prefix: str = ENV_PREFIX) -> Dict[str, Any]:
    # Nested via double underscores: HEXCRAWL__EXPLORATION__SIGHT_DISTANCE=3
    out: Dict[str, Any] = {}
    for k, v in os.environ.items():
        if not k.startswith(prefix):
            continue
        parts = k[len(prefix):].split("__")
        cur = out
        for i, part in enumerate(parts):
            key = part.lower()
            if i == len(parts) - 1:
                cur[key] = _coerce(v)
            else:
                cur = cur.setdefault(key, {})
    return out

def _coerce(s: str) -> Any:
    t = s.strip().lower()
    if t in ("true", "false"):
        return t == "true"
    try:
        if "." in t:
            return float(t)
        return int(t)
    except ValueError:
        return s

def apply_cli_overrides(base: Dict[str, Any], overrides: Dict[str, Any]) -> Dict[str, Any]:
    return _deep_merge(base, overrides or {})

def resolve(paths: Iterable[str] | None = None, prefix: str = ENV_PREFIX) -> Dict[str, Any]:
    """Defaults, then config files in order, then environment overrides."""
    cfg = _deep_merge(copy.deepcopy(DEFAULTS), load_configs(paths))
    return apply_cli_overrides(cfg, env_overrides(prefix))

__all__ = ["DEFAULTS", "ENV_PREFIX", "load_configs", "env_overrides", "apply_cli_overrides", "resolve"]
