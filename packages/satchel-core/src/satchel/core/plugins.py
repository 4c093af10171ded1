"""Plugin loading: extra bundle kinds from entry points and plugin directories.

A plugin registers kinds as an import side effect (``@register_bundle_kind``).
Entry points in the ``satchel.plugins`` group may instead resolve to a callable
or to an object with ``register()``.
"""

from __future__ import annotations

import importlib.util
import logging
import sys
from importlib.metadata import entry_points
from pathlib import Path
from typing import Iterator, List, Set

from satchel.core.observability import log_event
from satchel.core.registry.kinds import REGISTRY, BundleKindRegistry

log = logging.getLogger("satchel.core.plugins")

ENTRY_POINT_GROUP = "satchel.plugins"

# Resolved plugin files already executed in this process.
_LOADED_FILES: Set[Path] = set()


def _fail(message: str, exc: Exception, *, strict: bool) -> None:
    if strict:
        raise RuntimeError(f"{message}: {exc}") from exc
    log.warning("%s; continuing", message, exc_info=True)


def load_plugins_from_entrypoints(group: str = ENTRY_POINT_GROUP, *, strict: bool = True) -> List[str]:
    """Run every entry point of ``group``; returns the names that loaded."""
    try:
        eps = list(entry_points().select(group=group))
    except Exception as e:
        _fail(f"Failed reading entry points for group={group}", e, strict=strict)
        return []

    loaded: List[str] = []
    for ep in eps:
        try:
            obj = ep.load()
            if callable(obj):
                obj()
            elif hasattr(obj, "register"):
                obj.register()
        except Exception as e:
            _fail(f"Failed loading entry point plugin {ep.name}", e, strict=strict)
            continue
        loaded.append(ep.name)
    return loaded


def _plugin_files(root: Path) -> Iterator[Path]:
    for p in sorted(root.rglob("*.py")):
        if not p.name.startswith("_"):
            yield p


def load_plugins_from_paths(paths: List[str], *, strict: bool = True) -> List[Path]:
    """Execute each public ``*.py`` file under ``paths`` once per process.

    Returns the files executed by this call. Files seen by an earlier call are
    skipped so their kinds are not registered twice.
    """
    executed: List[Path] = []
    for raw in paths:
        if not raw:
            continue
        root = Path(raw).expanduser().resolve()
        if not root.exists():
            if strict:
                raise FileNotFoundError(f"Plugin path not found: {root}")
            log.warning("plugin path not found, skipping: %s", root)
            continue
        # plugin files may import helper modules that sit next to them
        if str(root) not in sys.path:
            sys.path.insert(0, str(root))

        for py in _plugin_files(root):
            if py in _LOADED_FILES:
                continue
            mod_name = "satchel_user_plugin_" + "_".join(py.with_suffix("").parts[-4:])
            try:
                spec = importlib.util.spec_from_file_location(mod_name, py)
                if spec is None or spec.loader is None:
                    continue
                module = importlib.util.module_from_spec(spec)
                spec.loader.exec_module(module)
            except Exception as e:
                _fail(f"Failed loading plugin file: {py}", e, strict=strict)
                continue
            _LOADED_FILES.add(py)
            executed.append(py)
    return executed


def load_all_plugins(*, settings, registry: BundleKindRegistry = REGISTRY) -> List[str]:
    """Load entry-point and path plugins; returns the bundle kinds they added."""
    before = set(registry.list())
    entry_names = load_plugins_from_entrypoints(strict=settings.plugin_strict)
    files = load_plugins_from_paths(settings.plugin_paths, strict=settings.plugin_strict)
    added = sorted(set(registry.list()) - before)
    if entry_names or files:
        log_event(
            log,
            settings=settings,
            level=logging.INFO,
            event="plugins_loaded",
            entry_points=len(entry_names),
            files=len(files),
            kinds=",".join(added),
        )
    return added
