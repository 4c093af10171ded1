from pathlib import Path

import sys

# Allow running tests without installing the package.
sys.path.insert(0, str(Path(__file__).resolve().parents[1] / "src"))

import pytest
from satchel.core.collection import BundleCollection
from satchel.core.files import FileSystem
from satchel.core.runtime.settings import Settings


@pytest.fixture()
def asset_root(tmp_path):
    root = tmp_path / "assets"
    root.mkdir()
    return root


@pytest.fixture()
def fs(asset_root):
    return FileSystem(asset_root)


@pytest.fixture()
def settings(asset_root):
    return Settings(
        root=str(asset_root),
        descriptor_filenames=["bundle.txt"],
        plugin_paths=[],
        plugin_strict=True,
        log_level="INFO",
    )


@pytest.fixture()
def bundles(fs, settings):
    return BundleCollection(fs, settings=settings)
