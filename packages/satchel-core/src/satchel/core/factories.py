"""Bundle factory: resolves descriptor asset patterns against candidate files.

Pattern kinds, evaluated in descriptor order:

- ``*``          claim every file not claimed yet, then stop (later patterns are dead)
- ``~/dir/*``    claim every unclaimed file under ``~/dir/``
- anything else  explicit file; must exist among the candidates

A file is claimed at most once. Explicit filenames that do not exist get a
more specific error when the listed name is the minified (or non-debug)
variant of a file that does exist.
"""

from __future__ import annotations

import logging
import re
from typing import Callable, Dict, Iterable, List, Sequence

from satchel.core.bundles import Bundle
from satchel.core.exception import MissingAssetError, ShouldReferenceDebugError, ShouldReferenceNonMinifiedError
from satchel.core.files import VirtualFile
from satchel.core.paths import app_relative, insert_before_extension, normalize_path, path_starts_with
from satchel.core.spec import WILDCARD, BundleDescriptor

log = logging.getLogger("satchel.core.factories")

BuildBundle = Callable[[str, BundleDescriptor], Bundle]

_MIN_RE = re.compile(r"^(.*)[.-]min(\.js|\.css)$", re.IGNORECASE)
_DEBUG_MARKERS = ("-debug", ".debug")


class BundleFactory:
    """Builds a populated bundle from a path, candidate files and a descriptor.

    ``build`` is the kind-specific construction strategy: it only instantiates
    the bundle object. Asset claiming, references and metadata are shared.
    """

    def __init__(self, build: BuildBundle):
        self.build = build

    def create_bundle(self, path: str, files: Iterable[VirtualFile], descriptor: BundleDescriptor) -> Bundle:
        bundle = self.build(path, descriptor)
        self._add_assets(bundle, list(files), descriptor.asset_filenames)
        for reference in descriptor.references:
            bundle.add_reference(reference)
        self._set_is_sorted(bundle, descriptor.asset_filenames)

        if descriptor.is_from_file:
            bundle.descriptor_file_path = descriptor.source_file
        if descriptor.page_location and descriptor.page_location.strip():
            bundle.page_location = descriptor.page_location
        return bundle

    def _add_assets(self, bundle: Bundle, files: List[VirtualFile], filenames: Sequence[str]) -> None:
        files_by_path: Dict[str, VirtualFile] = {}
        for f in files:
            files_by_path.setdefault(f.full_path.lower(), f)
        # dict keeps enumeration order for the wildcard claim
        remaining: Dict[VirtualFile, None] = dict.fromkeys(files)

        for filename in filenames:
            if filename == WILDCARD:
                for f in remaining:
                    bundle.add_asset(f)
                remaining.clear()
                break
            if filename.endswith("/*"):
                self._add_subdirectory(bundle, filename[:-1], remaining)
                continue

            file = self._find_file_or_raise(bundle, filename, files_by_path)
            if file not in remaining:
                log.debug("bundle %s: %s already claimed, skipping", bundle.path, filename)
                continue
            bundle.add_asset(file)
            del remaining[file]

    def _add_subdirectory(self, bundle: Bundle, prefix: str, remaining: Dict[VirtualFile, None]) -> None:
        prefix = normalize_path(app_relative(normalize_path(prefix))) + "/"
        claimed = [f for f in remaining if path_starts_with(f.full_path, prefix)]
        for f in claimed:
            del remaining[f]
            bundle.add_asset(f)

    def _find_file_or_raise(self, bundle: Bundle, filename: str, files_by_path: Dict[str, VirtualFile]) -> VirtualFile:
        file = files_by_path.get(filename.lower())
        if file is not None:
            return file

        m = _MIN_RE.match(filename)
        if m:
            non_min = m.group(1) + m.group(2)
            if non_min.lower() in files_by_path:
                raise ShouldReferenceNonMinifiedError(bundle_path=bundle.path, filename=filename, suggestion=non_min)

        for marker in _DEBUG_MARKERS:
            debug_name = insert_before_extension(filename, marker)
            if debug_name and debug_name.lower() in files_by_path:
                raise ShouldReferenceDebugError(bundle_path=bundle.path, filename=filename, suggestion=debug_name)

        raise MissingAssetError(bundle_path=bundle.path, filename=filename)

    @staticmethod
    def _set_is_sorted(bundle: Bundle, filenames: Sequence[str]) -> None:
        if not filenames or filenames[0] != WILDCARD:
            bundle.is_sorted = True
