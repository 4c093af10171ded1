from __future__ import annotations

import pytest

from satchel.core.paths import (
    app_relative,
    combine,
    insert_before_extension,
    is_url,
    normalize_path,
    path_starts_with,
    paths_equal,
)


@pytest.mark.parametrize(
    "raw,expected",
    [
        ("~/a/./b/../c.js", "~/a/c.js"),
        ("~//scripts///app.js", "~/scripts/app.js"),
        ("~\\scripts\\app.js", "~/scripts/app.js"),
        ("~/scripts/", "~/scripts"),
        ("~", "~"),
        ("/abs/x.js", "/abs/x.js"),
        ("lib/*", "lib/*"),
    ],
)
def test_normalize_path(raw, expected):
    assert normalize_path(raw) == expected


def test_normalize_path_rejects_climbing_above_root():
    with pytest.raises(ValueError):
        normalize_path("~/../outside.js")


def test_combine_and_app_relative():
    assert combine("~", "b.js") == "~/b.js"
    assert combine("~/test/", "/lib", "a.js") == "~/test/lib/a.js"
    assert normalize_path(combine("~/test", "../shared/x.js")) == "~/shared/x.js"
    assert app_relative("file.js") == "~/file.js"
    assert app_relative("/file.js") == "~/file.js"
    assert app_relative("~/file.js") == "~/file.js"
    assert app_relative("~") == "~"


def test_prefix_and_equality_are_case_insensitive():
    assert path_starts_with("~/Scripts/Lib/a.js", "~/scripts/lib/")
    assert not path_starts_with("~/scripts/library.js", "~/scripts/lib/")
    assert paths_equal("~/A/b.JS", "~/a/./B.js")


def test_is_url():
    assert is_url("http://example.org/test.js")
    assert is_url("https://cdn.example.com/jquery.min.js")
    assert is_url("//cdn.example.com/jquery.js")
    assert not is_url("~/scripts/app.js")
    assert not is_url("not a url")
    assert not is_url("")


def test_insert_before_extension():
    assert insert_before_extension("~/a/app.js", "-debug") == "~/a/app-debug.js"
    assert insert_before_extension("~/a/app.js", ".debug") == "~/a/app.debug.js"
    assert insert_before_extension("~/a.b/README", "-debug") is None
    assert insert_before_extension("~/a/.hidden", "-debug") is None
