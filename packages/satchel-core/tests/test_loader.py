from __future__ import annotations

from pathlib import Path

import pytest
import yaml

from satchel.core.bundles import StylesheetBundle
from satchel.core.exception import SpecError
from satchel.core.loader import build_collection, load_collection_spec, parse_collection_spec
from satchel.core.runtime.settings import Settings


def _write_text(p: Path, txt: str = "") -> None:
    p.parent.mkdir(parents=True, exist_ok=True)
    p.write_text(txt, encoding="utf-8")


def _write_config(tmp_path: Path, data: dict) -> Path:
    cfg = tmp_path / "bundles.yaml"
    cfg.write_text(yaml.safe_dump(data, sort_keys=False), encoding="utf-8")
    return cfg


def test_build_collection_from_yaml(tmp_path: Path):
    root = tmp_path / "site"
    _write_text(root / "scripts" / "module-a" / "a.js")
    _write_text(root / "scripts" / "module-b" / "bundle.txt", "b2.js\nb1.js\n[references]\n../module-a")
    _write_text(root / "scripts" / "module-b" / "b1.js")
    _write_text(root / "scripts" / "module-b" / "b2.js")
    _write_text(root / "styles" / "site.css")
    _write_text(root / "styles" / "print.css")

    cfg = _write_config(
        tmp_path,
        {
            "version": 1,
            "root": "site",
            "bundles": [
                {"path": "~/scripts", "kind": "script", "per_subdirectory": True},
                {
                    "path": "~/styles",
                    "kind": "stylesheet",
                    "page_location": "head",
                    "search": {"exclude": r"print\.css$"},
                },
            ],
        },
    )

    collection = build_collection(cfg, settings=Settings())

    assert collection.paths() == ["~/scripts/module-a", "~/scripts/module-b", "~/styles"]
    b = collection["~/scripts/module-b"]
    assert [a.path for a in b.assets] == ["~/scripts/module-b/b2.js", "~/scripts/module-b/b1.js"]
    assert b.references == ["~/scripts/module-a"]
    styles = collection.get("~/styles", StylesheetBundle)
    assert [a.path for a in styles.assets] == ["~/styles/site.css"]
    assert styles.page_location == "head"


def test_collection_level_settings_apply(tmp_path: Path):
    root = tmp_path / "site"
    _write_text(root / "a" / "order.txt", "y.js\nx.js")
    _write_text(root / "a" / "x.js")
    _write_text(root / "a" / "y.js")
    cfg = _write_config(
        tmp_path,
        {"root": "site", "descriptor_filenames": ["order.txt"], "bundles": [{"path": "~/a"}]},
    )

    collection = build_collection(cfg, settings=Settings())

    assert [a.path for a in collection["~/a"].assets] == ["~/a/y.js", "~/a/x.js"]


def test_unknown_keys_are_reported():
    with pytest.raises(SpecError) as ei:
        parse_collection_spec({"bundles": [{"path": "~/a", "knd": "script"}]})
    assert "bundles.0.knd" in str(ei.value)


def test_unsupported_version():
    with pytest.raises(SpecError):
        parse_collection_spec({"version": 2, "bundles": []})


def test_non_mapping_document(tmp_path: Path):
    cfg = tmp_path / "bundles.yaml"
    cfg.write_text("- just\n- a list\n", encoding="utf-8")
    with pytest.raises(SpecError):
        load_collection_spec(cfg)


def test_invalid_yaml(tmp_path: Path):
    cfg = tmp_path / "bundles.yaml"
    cfg.write_text("bundles: [unclosed\n", encoding="utf-8")
    with pytest.raises(SpecError):
        load_collection_spec(cfg)


def test_unknown_kind_is_a_spec_error(tmp_path: Path):
    (tmp_path / "site").mkdir()
    cfg = _write_config(tmp_path, {"root": "site", "bundles": [{"path": "~", "kind": "flash"}]})
    with pytest.raises(SpecError) as ei:
        build_collection(cfg, settings=Settings())
    assert "flash" in str(ei.value)
