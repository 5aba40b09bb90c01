"""
Configuration for the framing core.

Built-in DEFAULTS, optionally overlaid by a JSON file. The file is the one
passed explicitly, or else the one named by the CAMFRAME_CONFIG environment
variable. Loading is read-only; callers get a fresh dict every time.

    cfg = load_config()
    cfg = merged({"camera": {"orthographic": True}})
"""

from __future__ import annotations

import copy
import json
import logging
import os
from pathlib import Path
from typing import Any, Optional, Union

logger = logging.getLogger(__name__)

ENV_CONFIG_PATH = "CAMFRAME_CONFIG"

PathLike = Union[str, Path]

DEFAULTS: dict[str, Any] = {
    "camera": {
        "position": [0.0, 1.0, -10.0],
        "forward": [0.0, 0.0, 1.0],
        "orthographic": False,
        "fov_deg": 60.0,
        "ortho_size": 5.0,
        "near_clip": 0.3,
        "far_clip": 1000.0,
    },
    "viewport": {
        "width": 800,
        "height": 600,
    },
    "motion": {
        "move_speed": 2.0,
    },
    "framing": {
        "legacy_depth_scan": False,
    },
    "visibility": {
        "inclusive_edges": False,
    },
}


def config_path(path: Optional[PathLike] = None) -> Optional[Path]:
    """Resolve the overlay file: *path*, else $CAMFRAME_CONFIG, else None."""
    if path:
        return Path(path)
    override = os.getenv(ENV_CONFIG_PATH)
    return Path(override) if override else None


def deep_merge(base: dict, overlay: dict) -> dict:
    """Merge *overlay* into *base* in place, recursing into nested dicts."""
    for k, v in overlay.items():
        if isinstance(base.get(k), dict) and isinstance(v, dict):
            deep_merge(base[k], v)
        else:
            base[k] = copy.deepcopy(v)
    return base


def _read_overlay(path: Path) -> dict[str, Any]:
    try:
        data = json.loads(path.read_text())
    except (OSError, json.JSONDecodeError) as e:
        logger.warning("Ignoring camframe config %s: %s", path, e)
        return {}
    if not isinstance(data, dict):
        logger.warning("Ignoring camframe config %s: top level is not an object", path)
        return {}
    logger.info("Loaded camframe config from %s", path)
    return data


def load_config(path: Optional[PathLike] = None) -> dict[str, Any]:
    """Return DEFAULTS with the overlay file (if any) merged on top."""
    data = copy.deepcopy(DEFAULTS)
    resolved = config_path(path)
    if resolved is not None:
        deep_merge(data, _read_overlay(resolved))
    return data


def merged(
    overlay: Optional[dict[str, Any]] = None,
    path: Optional[PathLike] = None,
) -> dict[str, Any]:
    """load_config(path) with an in-memory *overlay* applied last."""
    data = load_config(path)
    if overlay:
        deep_merge(data, overlay)
    return data
