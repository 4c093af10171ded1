"""Bundle descriptor reader.

A descriptor (``bundle.txt`` by default) is a line-oriented text file::

    # assets, in load order (the default section)
    jquery.js
    app.js
    lib/*

    [references]
    ~/shared

    [external]
    url = https://cdn.example.com/jquery.min.js
    fallbackCondition = !window.jQuery

    [bundle]
    pageLocation = head

Relative asset and reference lines are resolved against the directory that
holds the descriptor and normalized to app-relative paths.
"""

from __future__ import annotations

import io
import logging
import re
from typing import Callable, Dict, List, Optional

from pydantic import ValidationError

from satchel.core.exception import DescriptorFormatError
from satchel.core.files import File
from satchel.core.paths import combine, is_url, normalize_path
from satchel.core.spec import WILDCARD, BundleDescriptor

log = logging.getLogger("satchel.core.descriptor")

_KEY_VALUE_RE = re.compile(r"^\s*(?P<key>[a-z]+)\s*=\s*(?P<value>.*)$", re.IGNORECASE)


class BundleDescriptorReader:
    """Reads one descriptor file. Use once: ``BundleDescriptorReader(f).read()``."""

    def __init__(self, source_file: File):
        self.source_file = source_file
        self._parsers: Dict[str, Callable[[str], None]] = {
            "assets": self._parse_asset,
            "references": self._parse_reference,
            "external": self._parse_external,
            "bundle": self._parse_bundle,
        }
        self._section = "assets"
        self._line_number = 0
        self._assets: List[str] = []
        self._references: Dict[str, None] = {}
        self._external_url: Optional[str] = None
        self._fallback_condition: Optional[str] = None
        self._page_location: Optional[str] = None

    def read(self) -> BundleDescriptor:
        with self.source_file.open() as stream:
            text = io.TextIOWrapper(stream, encoding="utf-8-sig")
            try:
                for number, line in enumerate(text, start=1):
                    self._line_number = number
                    self._process_line(line)
            except UnicodeDecodeError as exc:
                # decoding runs in chunks, so no reliable line number
                raise DescriptorFormatError(
                    "Bundle descriptor is not valid UTF-8.", source=self.source_file.full_path
                ) from exc

        try:
            descriptor = BundleDescriptor(
                asset_filenames=tuple(self._assets),
                references=tuple(self._references),
                external_url=self._external_url,
                fallback_condition=self._fallback_condition,
                page_location=self._page_location,
                source_file=self.source_file.full_path,
            )
        except ValidationError as exc:
            raise DescriptorFormatError(str(exc), source=self.source_file.full_path) from exc
        log.debug(
            "descriptor %s: %d asset pattern(s), %d reference(s)",
            self.source_file.full_path,
            len(descriptor.asset_filenames),
            len(descriptor.references),
        )
        return descriptor

    def _fail(self, message: str) -> DescriptorFormatError:
        return DescriptorFormatError(message, source=self.source_file.full_path, line_number=self._line_number)

    def _process_line(self, line: str) -> None:
        line = line.strip()
        if not line or line.startswith("#"):
            return
        comment = line.find("#")
        if comment >= 0:
            line = line[:comment].rstrip()
        if line.startswith("["):
            name = line[1:].rstrip("]").strip().lower()
            if name not in self._parsers:
                raise self._fail(f"Unexpected bundle descriptor section \"{line}\".")
            self._section = name
            return
        self._parsers[self._section](line)

    def _resolve(self, line: str) -> str:
        try:
            if line.startswith("~"):
                return normalize_path(line)
            return normalize_path(combine(self.source_file.directory.full_path, line))
        except ValueError as exc:
            raise self._fail(str(exc)) from exc

    def _parse_asset(self, line: str) -> None:
        if line != WILDCARD:
            line = self._resolve(line)
        self._assets.append(line)

    def _parse_reference(self, line: str) -> None:
        if not is_url(line):
            line = self._resolve(line)
        self._references.setdefault(line, None)

    def _key_value(self, line: str) -> tuple[str, str]:
        m = _KEY_VALUE_RE.match(line)
        if not m:
            raise self._fail(f"The [{self._section}] section of bundle descriptor must contain key value pairs.")
        return m.group("key"), m.group("value").strip()

    def _parse_external(self, line: str) -> None:
        key, value = self._key_value(line)
        k = key.lower()
        if k == "url":
            if self._external_url is not None:
                raise self._fail("The [external] section of bundle descriptor can only contain one \"url\".")
            if not is_url(value):
                raise self._fail("The value \"url\" in bundle descriptor [external] section must be a URL.")
            self._external_url = value
        elif k == "fallbackcondition":
            if self._external_url is None:
                raise self._fail(
                    "The [external] section of bundle descriptor must contain a \"url\" property "
                    "before the \"fallbackCondition\" property."
                )
            if self._fallback_condition is not None:
                raise self._fail(
                    "The [external] section of bundle descriptor can only contain one \"fallbackCondition\"."
                )
            self._fallback_condition = value
        else:
            raise self._fail(f"Unexpected property in bundle descriptor [external] section: {line}")

    def _parse_bundle(self, line: str) -> None:
        key, value = self._key_value(line)
        if key.lower() == "pagelocation":
            if self._page_location is not None:
                raise self._fail("The [bundle] section of bundle descriptor can only contain one \"pageLocation\".")
            self._page_location = value
        else:
            raise self._fail(f"Unexpected property in bundle descriptor [bundle] section: {line}")


def read_descriptor(source_file: File) -> BundleDescriptor:
    return BundleDescriptorReader(source_file).read()
