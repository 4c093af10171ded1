from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Dict, List, Union

from satchel.core.exception import DescriptorFormatError
from satchel.core.descriptor import read_descriptor
from satchel.core.files import FileSystem
from satchel.core.spec import WILDCARD

log = logging.getLogger("satchel.core.validation")


def _err(loc: str, code: str, msg: str) -> Dict[str, Any]:
    return {"loc": loc, "code": code, "msg": msg}


def validate_descriptor_file(root: Union[str, Path], path: str) -> Dict[str, Any]:
    """Parse one descriptor and report problems without building a bundle.

    Errors make ``ok`` false. Warnings flag configuration that parses but has
    no effect (patterns after ``*``, a pattern listed twice).
    """
    fs = FileSystem(root)
    errors: List[Dict[str, Any]] = []
    warnings: List[Dict[str, Any]] = []
    report: Dict[str, Any] = {"ok": False, "descriptor": path, "errors": errors, "warnings": warnings}

    try:
        file = fs.get_file(path)
        exists = file.exists
    except ValueError as exc:
        errors.append(_err(path, "path:invalid", str(exc)))
        return report
    if not exists:
        errors.append(_err(file.full_path, "path:not_found", "Descriptor file does not exist"))
        return report

    try:
        descriptor = read_descriptor(file)
    except DescriptorFormatError as exc:
        loc = f"{exc.source}:{exc.line_number}" if exc.line_number else str(exc.source)
        errors.append(_err(loc, "format:invalid", exc.reason))
        return report

    seen: set[str] = set()
    after_wildcard = False
    for i, pattern in enumerate(descriptor.asset_filenames):
        loc = f"assets[{i}]"
        if after_wildcard:
            warnings.append(_err(loc, "assets:after_wildcard", f"{pattern!r} follows '*' and is never used"))
        elif pattern == WILDCARD:
            after_wildcard = True
        if pattern.lower() in seen:
            warnings.append(_err(loc, "assets:duplicate", f"{pattern!r} is listed more than once"))
        seen.add(pattern.lower())

    report["ok"] = True
    report["asset_filenames"] = list(descriptor.asset_filenames)
    report["references"] = list(descriptor.references)
    report["external_url"] = descriptor.external_url
    report["fallback_condition"] = descriptor.fallback_condition
    report["page_location"] = descriptor.page_location
    log.debug("validated %s: %d warning(s)", file.full_path, len(warnings))
    return report
