from __future__ import annotations

import io
from pathlib import Path

import pytest

from satchel.core.descriptor import read_descriptor
from satchel.core.exception import DescriptorFormatError
from satchel.core.spec import BundleDescriptor


def _write_text(p: Path, txt: str) -> None:
    p.parent.mkdir(parents=True, exist_ok=True)
    p.write_text(txt, encoding="utf-8")


def _read(fs, asset_root: Path, text: str, rel: str = "test/bundle.txt") -> BundleDescriptor:
    _write_text(asset_root / rel, text)
    return read_descriptor(fs.get_file("~/" + rel))


def test_assets_resolved_relative_to_descriptor_directory_in_file_order(fs, asset_root):
    d = _read(fs, asset_root, "b.js\na.js\nlib/*\n~/shared/x.js\n*\n")
    assert d.asset_filenames == ("~/test/b.js", "~/test/a.js", "~/test/lib/*", "~/shared/x.js", "*")
    assert d.source_file == "~/test/bundle.txt"
    assert d.is_from_file


def test_comments_and_blank_lines_are_ignored(fs, asset_root):
    d = _read(fs, asset_root, "# header\n\n   \na.js   # trailing comment\n  # indented comment\nb.js\n")
    assert d.asset_filenames == ("~/test/a.js", "~/test/b.js")


def test_parent_segments_are_normalized(fs, asset_root):
    d = _read(fs, asset_root, "../common/util.js\n")
    assert d.asset_filenames == ("~/common/util.js",)


def test_references_are_resolved_and_deduplicated(fs, asset_root):
    d = _read(
        fs,
        asset_root,
        "[references]\n../lib\n~/lib\n~/other\nhttp://cdn.example.com/x.js\n",
    )
    assert d.references == ("~/lib", "~/other", "http://cdn.example.com/x.js")
    assert d.asset_filenames == ()


def test_section_headers_are_case_insensitive_and_order_free(fs, asset_root):
    d = _read(
        fs,
        asset_root,
        "[BUNDLE]\npageLocation = head\n[References]\n~/lib\n[Assets]\na.js\n",
    )
    assert d.page_location == "head"
    assert d.references == ("~/lib",)
    assert d.asset_filenames == ("~/test/a.js",)


def test_external_with_url_only_has_no_fallback_condition(fs, asset_root):
    d = _read(fs, asset_root, "[external]\nurl = http://example.org/test.js\n")
    assert d.external_url == "http://example.org/test.js"
    assert d.fallback_condition is None


def test_external_url_and_fallback_condition(fs, asset_root):
    d = _read(
        fs,
        asset_root,
        "[external]\nurl=https://cdn.example.com/jquery.js\nfallbackCondition = !window.jQuery\n[assets]\n~/jquery.js\n",
    )
    assert d.external_url == "https://cdn.example.com/jquery.js"
    assert d.fallback_condition == "!window.jQuery"
    assert d.asset_filenames == ("~/jquery.js",)


@pytest.mark.parametrize(
    "text,needle",
    [
        ("[nope]\n", "Unexpected bundle descriptor section"),
        ("[external]\nfallbackCondition = x\n", "before the \"fallbackCondition\""),
        ("[external]\nurl = http://a/b.js\nurl = http://a/c.js\n", "only contain one \"url\""),
        ("[external]\nurl = http://a/b.js\nfallbackCondition = a\nfallbackCondition = b\n", "only contain one \"fallbackCondition\""),
        ("[external]\nurl = not-a-url\n", "must be a URL"),
        ("[external]\ncdn = http://a/b.js\n", "Unexpected property in bundle descriptor [external]"),
        ("[external]\nhttp://a/b.js\n", "[external] section of bundle descriptor must contain key value pairs"),
        ("[bundle]\npageLocation = head\npageLocation = body\n", "only contain one \"pageLocation\""),
        ("[bundle]\ncolor = red\n", "Unexpected property in bundle descriptor [bundle]"),
        ("[bundle]\n= head\n", "[bundle] section of bundle descriptor must contain key value pairs"),
    ],
)
def test_format_errors(fs, asset_root, text, needle):
    with pytest.raises(DescriptorFormatError) as ei:
        _read(fs, asset_root, text)
    assert needle in str(ei.value)
    assert ei.value.source == "~/test/bundle.txt"
    assert ei.value.line_number is not None


def test_format_error_reports_line_number(fs, asset_root):
    with pytest.raises(DescriptorFormatError) as ei:
        _read(fs, asset_root, "a.js\nb.js\n[whatever]\n")
    assert ei.value.line_number == 3
    assert "line 3" in str(ei.value)


def test_format_error_is_a_value_error(fs, asset_root):
    with pytest.raises(ValueError):
        _read(fs, asset_root, "[external]\nfallbackCondition = x\n")


def test_byte_order_mark_is_ignored(fs, asset_root):
    p = asset_root / "test" / "bundle.txt"
    p.parent.mkdir(parents=True)
    p.write_bytes("\ufeffa.js\n".encode("utf-8"))
    d = read_descriptor(fs.get_file("~/test/bundle.txt"))
    assert d.asset_filenames == ("~/test/a.js",)


def test_invalid_utf8_is_a_format_error(fs, asset_root):
    p = asset_root / "test" / "bundle.txt"
    p.parent.mkdir(parents=True)
    p.write_bytes(b"a.js\n\xff\xfe\x80.js\n")
    with pytest.raises(DescriptorFormatError) as ei:
        read_descriptor(fs.get_file("~/test/bundle.txt"))
    assert ei.value.source == "~/test/bundle.txt"
    assert "not valid UTF-8" in str(ei.value)


class _StubFile:
    """Minimal File collaborator: anything with full_path, directory and open()."""

    def __init__(self, full_path: str, directory: str, content: bytes):
        self.full_path = full_path
        self.directory = type("D", (), {"full_path": directory})()
        self._content = content

    def open(self):
        return io.BytesIO(self._content)


def test_reader_only_needs_the_file_protocol():
    d = read_descriptor(_StubFile("~/x/bundle.txt", "~/x", b"one.js\r\ntwo.js\r\n"))
    assert d.asset_filenames == ("~/x/one.js", "~/x/two.js")


def test_descriptor_model_rejects_fallback_without_url():
    with pytest.raises(ValueError):
        BundleDescriptor(fallback_condition="!window.x")


def test_descriptor_defaults():
    assert BundleDescriptor.default().asset_filenames == ("*",)
    assert BundleDescriptor.default().is_from_file is False
    assert BundleDescriptor.for_file("~/file.js").asset_filenames == ("~/file.js",)
