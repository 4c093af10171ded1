"""Bundle collection and the add pipeline.

``BundleCollection.add`` accepts three input shapes:

1. a file path: the file becomes a one-asset bundle at its own path;
2. a directory with a descriptor file: the descriptor drives asset order;
3. a directory without a descriptor: every searched file, in search order.

Descriptor filenames are probed in order (kind-specific names such as
``scriptbundle.txt`` first, then ``Settings.descriptor_filenames``); the first
existing file is used on its own, never merged with the others.
"""

from __future__ import annotations

import logging
from typing import Callable, Dict, Iterator, List, Optional, Sequence, Type, Union

from satchel.core.bundles import Bundle
from satchel.core.descriptor import read_descriptor
from satchel.core.exception import DuplicateBundleError, PathNotFoundError
from satchel.core.files import FileSearch, FileSearchStrategy, FileSystem, VirtualDirectory, VirtualFile
from satchel.core.observability import log_event
from satchel.core.paths import app_relative, normalize_path, path_starts_with
from satchel.core.registry.kinds import REGISTRY, BundleKind, BundleKindRegistry
from satchel.core.runtime.settings import Settings
from satchel.core.spec import WILDCARD, BundleDescriptor

log = logging.getLogger("satchel.core.collection")

KindRef = Union[str, Type[Bundle], BundleKind]
Customize = Callable[[Bundle], None]


class BundleCollection:
    """Bundles keyed by app-relative path (case-insensitive), in insertion order."""

    def __init__(
        self,
        file_system: FileSystem,
        *,
        settings: Optional[Settings] = None,
        registry: BundleKindRegistry = REGISTRY,
    ):
        self.file_system = file_system
        self.settings = settings or Settings(root=str(file_system.root))
        self.registry = registry
        self._bundles: Dict[str, Bundle] = {}

    # ------------------------------------------------------------------
    # container
    # ------------------------------------------------------------------

    @staticmethod
    def _key(path: str) -> str:
        return normalize_path(app_relative(normalize_path(path))).lower()

    def __getitem__(self, path: str) -> Bundle:
        try:
            return self._bundles[self._key(path)]
        except KeyError:
            raise KeyError(f"No bundle at path: {path}") from None

    def __contains__(self, path: object) -> bool:
        return isinstance(path, str) and self._key(path) in self._bundles

    def __iter__(self) -> Iterator[Bundle]:
        return iter(list(self._bundles.values()))

    def __len__(self) -> int:
        return len(self._bundles)

    def get(self, path: str, bundle_type: Optional[Type[Bundle]] = None) -> Optional[Bundle]:
        bundle = self._bundles.get(self._key(path))
        if bundle is not None and bundle_type is not None and not isinstance(bundle, bundle_type):
            return None
        return bundle

    def paths(self) -> List[str]:
        return [b.path for b in self._bundles.values()]

    def find_containing(self, path: str) -> Optional[Bundle]:
        """Bundle whose path, or one of whose asset paths, equals ``path``."""
        for bundle in self._bundles.values():
            if bundle.contains_path(path):
                return bundle
        return None

    def remove(self, path: str) -> Bundle:
        return self._bundles.pop(self._key(path))

    def _insert(self, bundle: Bundle) -> None:
        key = self._key(bundle.path)
        if key in self._bundles:
            if self.settings.on_duplicate == "error":
                raise DuplicateBundleError(bundle.path)
            log_event(log, settings=self.settings, level=logging.WARNING, event="bundle_replaced", path=bundle.path)
        self._bundles[key] = bundle

    # ------------------------------------------------------------------
    # add pipeline
    # ------------------------------------------------------------------

    def add(
        self,
        path: str,
        kind: KindRef = "script",
        file_search: Optional[FileSearchStrategy] = None,
        customize: Optional[Customize] = None,
    ) -> Bundle:
        """Build the bundle at ``path`` and insert it. Nothing is inserted on error."""
        bundle_kind = self.registry.resolve(kind)
        path = normalize_path(app_relative(normalize_path(path)))

        if self.file_system.file_exists(path):
            file = self.file_system.get_file(path)
            bundle = bundle_kind.factory.create_bundle(path, [file], BundleDescriptor.for_file(path))
        elif self.file_system.directory_exists(path):
            directory = self.file_system.get_directory(path)
            bundle = self._create_directory_bundle(bundle_kind, directory, file_search)
        else:
            raise PathNotFoundError(path)

        if customize is not None:
            customize(bundle)
        self._insert(bundle)
        log_event(
            log,
            settings=self.settings,
            level=logging.INFO,
            event="bundle_added",
            kind=bundle_kind.name,
            path=bundle.path,
            assets=len(bundle.assets),
            descriptor=bundle.descriptor_file_path,
        )
        return bundle

    def add_per_subdirectory(
        self,
        path: str,
        kind: KindRef = "script",
        file_search: Optional[FileSearchStrategy] = None,
        customize: Optional[Customize] = None,
        exclude_top_level_files: bool = True,
    ) -> List[Bundle]:
        """Add one bundle per immediate sub-directory of ``path`` (name order)."""
        path = normalize_path(app_relative(normalize_path(path)))
        if not self.file_system.directory_exists(path):
            raise PathNotFoundError(path)
        directory = self.file_system.get_directory(path)

        added: List[Bundle] = []
        if not exclude_top_level_files:
            top_search = file_search or self._file_search_for(self.registry.resolve(kind))
            if isinstance(top_search, FileSearch):
                top_search = FileSearch(pattern=top_search.pattern, exclude=top_search.exclude, recursive=False)
            added.append(self.add(path, kind, top_search, customize))
        for sub in directory.list_directories():
            added.append(self.add(sub.full_path, kind, file_search, customize))
        return added

    def _create_directory_bundle(
        self,
        bundle_kind: BundleKind,
        directory: VirtualDirectory,
        file_search: Optional[FileSearchStrategy],
    ) -> Bundle:
        descriptor_names = self._descriptor_filenames(bundle_kind)
        descriptor = BundleDescriptor.default()
        for name in descriptor_names:
            candidate = directory.get_file(name)
            if candidate.exists:
                descriptor = read_descriptor(candidate)
                log_event(
                    log,
                    settings=self.settings,
                    level=logging.DEBUG,
                    event="descriptor_read",
                    path=candidate.full_path,
                    assets=len(descriptor.asset_filenames),
                    references=len(descriptor.references),
                )
                break

        search = file_search or self._file_search_for(bundle_kind)
        skip = {n.lower() for n in descriptor_names}
        files = [f for f in search.find_files(directory) if f.name.lower() not in skip]
        if descriptor.external_url:
            files.extend(self._fallback_files_outside(directory, files, descriptor.asset_filenames))
        return bundle_kind.factory.create_bundle(directory.full_path, files, descriptor)

    def _descriptor_filenames(self, bundle_kind: BundleKind) -> List[str]:
        names: List[str] = []
        for name in (*bundle_kind.descriptor_filenames, *self.settings.descriptor_filenames):
            if name.lower() not in (n.lower() for n in names):
                names.append(name)
        return names

    def _file_search_for(self, bundle_kind: BundleKind) -> FileSearch:
        override = self.settings.file_search_overrides.get(bundle_kind.name)
        if override is None:
            return bundle_kind.default_file_search()
        return FileSearch(
            pattern=override.pattern or bundle_kind.file_pattern,
            exclude=override.exclude if override.exclude is not None else bundle_kind.exclude,
            recursive=True if override.recursive is None else override.recursive,
        )

    def _fallback_files_outside(
        self,
        directory: VirtualDirectory,
        found: Sequence[VirtualFile],
        filenames: Sequence[str],
    ) -> List[VirtualFile]:
        """Explicit fallback assets of an external bundle that live outside its directory.

        Files inside the directory are left to the file search, so its pattern
        and exclude still apply to them.
        """
        inside = directory.full_path.rstrip("/") + "/"
        known = {f.full_path.lower() for f in found}
        extra: List[VirtualFile] = []
        for filename in filenames:
            if filename == WILDCARD:
                break
            if filename.endswith("/*") or filename.lower() in known or path_starts_with(filename, inside):
                continue
            if self.file_system.file_exists(filename):
                extra.append(self.file_system.get_file(filename))
                known.add(filename.lower())
        return extra
