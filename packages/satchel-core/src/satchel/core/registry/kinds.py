from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Optional, Tuple, Type, Union

from satchel.core.bundles import Bundle
from satchel.core.factories import BuildBundle, BundleFactory
from satchel.core.files import FileSearch


@dataclass(frozen=True)
class BundleKind:
    """Everything the add pipeline needs to know about one kind of bundle."""

    name: str
    bundle_type: Type[Bundle]
    factory: BundleFactory
    file_pattern: str = "*"
    exclude: Optional[str] = None
    # Probed before the generic descriptor filenames; first existing file wins.
    descriptor_filenames: Tuple[str, ...] = field(default_factory=tuple)

    def default_file_search(self) -> FileSearch:
        return FileSearch(pattern=self.file_pattern, exclude=self.exclude)


class BundleKindRegistry:
    """
    Registry of bundle kinds keyed by tag.

    Supports decorator registration of the construction strategy:
        @registry.register("script", bundle_type=ScriptBundle, file_pattern="*.js")
        def build_script(path, descriptor): ...
    """

    def __init__(self) -> None:
        self._items: Dict[str, BundleKind] = {}

    def register(
        self,
        name: str,
        *,
        bundle_type: Type[Bundle],
        file_pattern: str = "*",
        exclude: Optional[str] = None,
        descriptor_filenames: Tuple[str, ...] = (),
    ):
        def deco(build: BuildBundle):
            self._items[name] = BundleKind(
                name=name,
                bundle_type=bundle_type,
                factory=BundleFactory(build),
                file_pattern=file_pattern,
                exclude=exclude,
                descriptor_filenames=tuple(descriptor_filenames),
            )
            return build
        return deco

    def get(self, name: str) -> BundleKind:
        if name not in self._items:
            raise KeyError(f"Unknown bundle kind: {name}. Loaded: {self.list()}")
        return self._items[name]

    def kind_for(self, bundle_type: Type[Bundle]) -> BundleKind:
        for item in self._items.values():
            if item.bundle_type is bundle_type:
                return item
        for item in self._items.values():
            if issubclass(item.bundle_type, bundle_type):
                return item
        raise KeyError(f"No bundle kind registered for {bundle_type.__name__}. Loaded: {self.list()}")

    def resolve(self, kind: Union[str, Type[Bundle], BundleKind]) -> BundleKind:
        if isinstance(kind, BundleKind):
            return kind
        if isinstance(kind, str):
            return self.get(kind)
        return self.kind_for(kind)

    def list(self) -> list[str]:
        return sorted(self._items.keys())


# Singleton registry used by core + plugins
REGISTRY = BundleKindRegistry()


def register_bundle_kind(name: str, **kwargs):
    return REGISTRY.register(name, **kwargs)


def get_bundle_kind(name: str) -> BundleKind:
    return REGISTRY.get(name)


def list_bundle_kinds() -> list[str]:
    return REGISTRY.list()
