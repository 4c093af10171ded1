from __future__ import annotations

from typing import Any, ClassVar, Dict, List, Optional

from satchel.core.files import VirtualFile
from satchel.core.paths import app_relative, combine, is_url, normalize_path


class Asset:
    """One source file claimed by a bundle."""

    def __init__(self, file: VirtualFile, bundle: "Bundle"):
        self.file = file
        self.bundle = bundle

    def __repr__(self) -> str:
        return f"Asset({self.path!r})"

    @property
    def path(self) -> str:
        return self.file.full_path


class Bundle:
    """Named, ordered collection of assets.

    ``is_sorted`` is False only while the asset order came from a wildcard and
    may still be reordered by a later dependency-sorting stage.
    """

    kind: ClassVar[str] = "bundle"

    def __init__(self, path: str):
        self.path = normalize_path(app_relative(normalize_path(path)))
        self.assets: List[Asset] = []
        self.references: List[str] = []
        self.is_sorted = False
        self.descriptor_file_path: Optional[str] = None
        self.page_location: Optional[str] = None

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.path!r}, assets={len(self.assets)})"

    def add_asset(self, file: VirtualFile) -> Asset:
        asset = Asset(file, self)
        self.assets.append(asset)
        return asset

    def add_reference(self, path: str) -> None:
        if is_url(path):
            ref = path
        elif path.startswith("~"):
            ref = normalize_path(path)
        else:
            ref = normalize_path(combine(self.path, path))
        if not any(r.lower() == ref.lower() for r in self.references):
            self.references.append(ref)

    def contains_path(self, path: str) -> bool:
        target = normalize_path(app_relative(normalize_path(path))).lower()
        if self.path.lower() == target:
            return True
        return any(a.path.lower() == target for a in self.assets)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "kind": self.kind,
            "path": self.path,
            "assets": [a.path for a in self.assets],
            "references": list(self.references),
            "is_sorted": self.is_sorted,
            "descriptor_file_path": self.descriptor_file_path,
            "page_location": self.page_location,
        }


class ScriptBundle(Bundle):
    kind = "script"


class StylesheetBundle(Bundle):
    kind = "stylesheet"

    def __init__(self, path: str, media: Optional[str] = None):
        super().__init__(path)
        self.media = media

    def to_dict(self) -> Dict[str, Any]:
        d = super().to_dict()
        d["media"] = self.media
        return d


class HtmlTemplateBundle(Bundle):
    kind = "htmltemplate"


class ExternalScriptBundle(ScriptBundle):
    """Script bundle served from ``url``; local assets are the fallback."""

    def __init__(self, path: str, url: str, fallback_condition: Optional[str] = None):
        super().__init__(path)
        self.url = url
        self.fallback_condition = fallback_condition

    def to_dict(self) -> Dict[str, Any]:
        d = super().to_dict()
        d.update({"url": self.url, "fallback_condition": self.fallback_condition})
        return d


class ExternalStylesheetBundle(StylesheetBundle):
    def __init__(self, path: str, url: str, media: Optional[str] = None):
        super().__init__(path, media=media)
        self.url = url

    def to_dict(self) -> Dict[str, Any]:
        d = super().to_dict()
        d["url"] = self.url
        return d
