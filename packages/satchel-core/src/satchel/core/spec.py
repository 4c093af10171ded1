from __future__ import annotations

from typing import List, Literal, Optional, Tuple

from pydantic import BaseModel, Field, model_validator
from pydantic.config import ConfigDict

# ---------------------------------------------------------------------------
# Bundle descriptor (parsed bundle.txt)
# ---------------------------------------------------------------------------

WILDCARD = "*"


class BundleDescriptor(BaseModel):
    """Parsed content of a bundle descriptor file.

    ``asset_filenames`` keeps file order: it is the load order of explicit assets.
    ``references`` is unique; first-seen order is kept so output is deterministic.
    ``source_file`` is the full virtual path of the descriptor file, or None when
    the descriptor was synthesized (directory without descriptor, single file).
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    asset_filenames: Tuple[str, ...] = ()
    references: Tuple[str, ...] = ()
    external_url: Optional[str] = None
    fallback_condition: Optional[str] = None
    page_location: Optional[str] = None
    source_file: Optional[str] = None

    @model_validator(mode="after")
    def _fallback_requires_url(self) -> "BundleDescriptor":
        if self.fallback_condition is not None and self.external_url is None:
            raise ValueError("fallback_condition requires external_url")
        return self

    @property
    def is_from_file(self) -> bool:
        return self.source_file is not None

    @classmethod
    def default(cls) -> "BundleDescriptor":
        return cls(asset_filenames=(WILDCARD,))

    @classmethod
    def for_file(cls, path: str) -> "BundleDescriptor":
        return cls(asset_filenames=(path,))


# ---------------------------------------------------------------------------
# Collection config (bundles.yaml)
# ---------------------------------------------------------------------------

DuplicatePolicy = Literal["replace", "error"]


class FileSearchSpec(BaseModel):
    model_config = ConfigDict(extra="forbid")

    pattern: Optional[str] = None
    exclude: Optional[str] = None
    recursive: bool = True


class BundleEntrySpec(BaseModel):
    model_config = ConfigDict(extra="forbid")

    path: str
    kind: str = "script"
    per_subdirectory: bool = False
    exclude_top_level_files: bool = True
    search: Optional[FileSearchSpec] = None
    # Applied after construction through the customize hook.
    page_location: Optional[str] = None


class CollectionSpec(BaseModel):
    model_config = ConfigDict(extra="forbid")

    version: int = 1
    root: str = "."
    descriptor_filenames: Optional[List[str]] = None
    on_duplicate: Optional[DuplicatePolicy] = None
    bundles: List[BundleEntrySpec] = Field(default_factory=list)


# ---------------------------------------------------------------------------
# Settings fragments
# ---------------------------------------------------------------------------


class FileSearchOverrideSpec(BaseModel):
    """Per-kind replacement of the default file search (Settings.file_search_overrides)."""

    model_config = ConfigDict(extra="forbid")

    pattern: Optional[str] = None
    exclude: Optional[str] = None
    recursive: Optional[bool] = None


__all__ = [
    "WILDCARD",
    "BundleDescriptor",
    "DuplicatePolicy",
    "FileSearchSpec",
    "BundleEntrySpec",
    "CollectionSpec",
    "FileSearchOverrideSpec",
]
