from __future__ import annotations

import os
from importlib import import_module
from typing import Dict, List

from pydantic import BaseModel, Field

from satchel.core.spec import DuplicatePolicy, FileSearchOverrideSpec


class Settings(BaseModel):
    # Defaults are static. Use load_settings(env=...) to read from an env snapshot.
    root: str = "."

    # Generic descriptor filenames, probed after the kind-specific ones.
    descriptor_filenames: List[str] = Field(default_factory=lambda: ["bundle.txt"])

    # What BundleCollection.add does when a bundle already exists at the path.
    on_duplicate: DuplicatePolicy = "replace"

    # kind -> replacement file search (pattern/exclude/recursive)
    file_search_overrides: Dict[str, FileSearchOverrideSpec] = Field(default_factory=dict)

    plugin_paths: List[str] = Field(default_factory=list)
    plugin_strict: bool = True
    log_level: str = "INFO"

    # Observability
    # - log_format: "text" (default) or "json". When json, satchel events emit a single JSON
    #   object per line, suitable for log aggregation.
    log_format: str = "text"

    @classmethod
    def from_env(cls, env: dict[str, str], overrides: dict | None = None) -> "Settings":
        """Build Settings from an explicit env snapshot (does not read os.environ)."""
        def g(key: str, default: str | None = None) -> str | None:
            return env.get(key, default)

        data = {
            "root": g("SATCHEL_ROOT", "."),
            "descriptor_filenames": [
                p.strip() for p in (g("SATCHEL_DESCRIPTOR_FILENAMES", "bundle.txt") or "").split(",") if p.strip()
            ],
            "on_duplicate": (g("SATCHEL_ON_DUPLICATE", "replace") or "replace").lower(),
            "plugin_paths": [p for p in (g("SATCHEL_PLUGIN_PATHS", "") or "").split(",") if p],
            "plugin_strict": (g("SATCHEL_PLUGIN_STRICT", "true") or "true").lower() == "true",
            "log_level": g("SATCHEL_LOG_LEVEL", "INFO"),
            "log_format": g("SATCHEL_LOG_FORMAT", "text"),
        }
        if overrides:
            data.update(overrides)
        return cls(**data)


def load_settings(overrides: dict | None = None, *, env: dict[str, str] | None = None) -> Settings:
    """Load settings from (1) env snapshot, (2) optional settings module, (3) explicit overrides.

    If env is not provided, a snapshot of os.environ is used.
    """
    env2 = {k: str(v) for k, v in os.environ.items()} if env is None else env
    s = Settings.from_env(env2)
    mod = env2.get("SATCHEL_SETTINGS_MODULE")
    if mod:
        m = import_module(mod)
        data = getattr(m, "SETTINGS", {})
        if not isinstance(data, dict):
            raise TypeError("SATCHEL_SETTINGS_MODULE must expose SETTINGS: dict")
        s = Settings(**{**s.model_dump(), **data})
    if overrides:
        s = Settings(**{**s.model_dump(), **overrides})
    return s
