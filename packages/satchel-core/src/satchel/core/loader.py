"""Build a BundleCollection from a YAML collection file.

Example ``bundles.yaml``::

    version: 1
    root: assets
    bundles:
      - path: ~/scripts
        kind: script
        per_subdirectory: true
      - path: ~/styles
        kind: stylesheet
        page_location: head
        search: {pattern: "*.css", exclude: "\\\\.print\\\\.css$"}

``root`` is relative to the YAML file.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Dict, Optional, Union

import yaml
from pydantic import ValidationError

from satchel.core.bundles import Bundle
from satchel.core.collection import BundleCollection
from satchel.core.exception import SpecError
from satchel.core.files import FileSearch, FileSystem
from satchel.core.plugins import load_all_plugins
from satchel.core.runtime.settings import Settings, load_settings
from satchel.core.spec import BundleEntrySpec, CollectionSpec

log = logging.getLogger("satchel.core.loader")


def parse_collection_spec(raw: Any) -> CollectionSpec:
    if not isinstance(raw, dict):
        raise SpecError("Collection file must be a YAML mapping (object)")
    try:
        spec = CollectionSpec.model_validate(raw)
    except ValidationError as exc:
        # collect the extra_forbidden error locations for a friendly message
        unknowns = []
        for err in exc.errors():
            if err.get("type") == "extra_forbidden":
                loc = err.get("loc", ())
                if loc:
                    unknowns.append(".".join(str(x) for x in loc))
        if unknowns:
            raise SpecError("Unknown collection keys: " + ", ".join(sorted(set(unknowns)))) from exc
        raise SpecError(f"Invalid collection file: {exc}") from exc
    if spec.version != 1:
        raise SpecError(f"Unsupported collection file version: {spec.version}")
    return spec


def load_collection_spec(path: Union[str, Path]) -> CollectionSpec:
    p = Path(path)
    try:
        raw = yaml.safe_load(p.read_text(encoding="utf-8"))
    except yaml.YAMLError as exc:
        raise SpecError(f"Invalid YAML in collection file {p}: {exc}") from exc
    return parse_collection_spec(raw)


def _file_search(entry: BundleEntrySpec, collection: BundleCollection) -> Optional[FileSearch]:
    if entry.search is None:
        return None
    kind = collection.registry.get(entry.kind)
    return FileSearch(
        pattern=entry.search.pattern or kind.file_pattern,
        exclude=entry.search.exclude if entry.search.exclude is not None else kind.exclude,
        recursive=entry.search.recursive,
    )


def _customizer(entry: BundleEntrySpec):
    if not entry.page_location:
        return None

    def customize(bundle: Bundle) -> None:
        bundle.page_location = entry.page_location

    return customize


def build_collection(config_path: Union[str, Path], *, settings: Optional[Settings] = None) -> BundleCollection:
    config_path = Path(config_path).expanduser().resolve()
    spec = load_collection_spec(config_path)

    overrides: Dict[str, Any] = {"root": str((config_path.parent / spec.root).resolve())}
    if spec.descriptor_filenames is not None:
        overrides["descriptor_filenames"] = spec.descriptor_filenames
    if spec.on_duplicate is not None:
        overrides["on_duplicate"] = spec.on_duplicate
    base = settings or load_settings()
    s = Settings(**{**base.model_dump(), **overrides})
    load_all_plugins(settings=s)

    collection = BundleCollection(FileSystem(s.root), settings=s)
    unknown = sorted({e.kind for e in spec.bundles} - set(collection.registry.list()))
    if unknown:
        raise SpecError(f"Unknown bundle kinds: {', '.join(unknown)}. Loaded: {collection.registry.list()}")

    for entry in spec.bundles:
        search = _file_search(entry, collection)
        customize = _customizer(entry)
        if entry.per_subdirectory:
            collection.add_per_subdirectory(
                entry.path,
                entry.kind,
                search,
                customize,
                exclude_top_level_files=entry.exclude_top_level_files,
            )
        else:
            collection.add(entry.path, entry.kind, search, customize)
    log.info("built %d bundle(s) from %s", len(collection), config_path)
    return collection
