"""Configuration for the framing core."""

from camframe.config.rig_config import DEFAULTS, deep_merge, load_config, merged

__all__ = ["DEFAULTS", "deep_merge", "load_config", "merged"]
