"""Public, stable API surface for satchel.

If you're writing plugins (custom bundle kinds) or integrating satchel into
your own codebase, import from **`satchel.core.api`**.

Everything outside this package is considered internal and may change without
notice, even in minor releases.
"""

from __future__ import annotations

# Bundle model
from satchel.core.bundles import (
    Asset,
    Bundle,
    ExternalScriptBundle,
    ExternalStylesheetBundle,
    HtmlTemplateBundle,
    ScriptBundle,
    StylesheetBundle,
)
# Collection + add pipeline
from satchel.core.collection import BundleCollection
# Descriptor reader
from satchel.core.descriptor import BundleDescriptorReader, read_descriptor
# Common exceptions
from satchel.core.exception import (
    DescriptorFormatError,
    DuplicateBundleError,
    MissingAssetError,
    PathNotFoundError,
    SatchelError,
    ShouldReferenceDebugError,
    ShouldReferenceNonMinifiedError,
    SpecError,
)
# Factory
from satchel.core.factories import BundleFactory
# File system collaborators
from satchel.core.files import FileSearch, FileSystem, VirtualDirectory, VirtualFile
# Registry (bundle kinds)
from satchel.core.registry.kinds import BundleKind, get_bundle_kind, list_bundle_kinds, register_bundle_kind
# Settings
from satchel.core.runtime.settings import Settings, load_settings
# Specs (Pydantic models)
from satchel.core.spec import BundleDescriptor, BundleEntrySpec, CollectionSpec, FileSearchSpec

__all__ = [
    # bundles
    "Asset",
    "Bundle",
    "ScriptBundle",
    "StylesheetBundle",
    "HtmlTemplateBundle",
    "ExternalScriptBundle",
    "ExternalStylesheetBundle",
    # collection
    "BundleCollection",
    # descriptor
    "BundleDescriptor",
    "BundleDescriptorReader",
    "read_descriptor",
    # factory
    "BundleFactory",
    # files
    "FileSystem",
    "FileSearch",
    "VirtualFile",
    "VirtualDirectory",
    # registry
    "BundleKind",
    "register_bundle_kind",
    "get_bundle_kind",
    "list_bundle_kinds",
    # settings
    "Settings",
    "load_settings",
    # spec
    "CollectionSpec",
    "BundleEntrySpec",
    "FileSearchSpec",
    # errors
    "SatchelError",
    "PathNotFoundError",
    "DescriptorFormatError",
    "MissingAssetError",
    "ShouldReferenceNonMinifiedError",
    "ShouldReferenceDebugError",
    "DuplicateBundleError",
    "SpecError",
]
