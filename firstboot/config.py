from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Dict

from .errors import ConfigError
from .types import Config, config_from_dict

logger = logging.getLogger(__name__)


def merge_documents(base: Dict[str, Any], overlay: Dict[str, Any]) -> Dict[str, Any]:
    """Merge ``overlay`` into ``base``: lists append, mappings merge, scalars replace."""

    out = dict(base)
    for key, value in overlay.items():
        current = out.get(key)
        if isinstance(current, list) and isinstance(value, list):
            out[key] = current + value
        elif isinstance(current, dict) and isinstance(value, dict):
            out[key] = merge_documents(current, value)
        else:
            out[key] = value
    return out


def load_document(path: str) -> Dict[str, Any]:
    p = Path(path)
    if not p.exists():
        raise FileNotFoundError(path)

    if p.suffix.lower() not in {".yaml", ".yml", ".json"}:
        raise ConfigError(f"config must be YAML or JSON: {path}")

    try:
        import yaml  # type: ignore
    except Exception as e:  # pragma: no cover
        raise RuntimeError("PyYAML is required to read provisioning configs") from e

    raw = yaml.safe_load(p.read_text(encoding="utf-8")) or {}
    if not isinstance(raw, dict):
        raise ConfigError(f"{path} must contain a mapping/object")
    return raw


def load_config(*paths: str) -> Config:
    """Load and merge one or more documents, in order, into a Config."""

    if not paths:
        raise ConfigError("No config files given")

    merged: Dict[str, Any] = {}
    for path in paths:
        logger.info("Loading config %s", path)
        merged = merge_documents(merged, load_document(path))
    return config_from_dict(merged)
