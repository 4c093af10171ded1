"""Virtual path helpers.

Bundle and asset paths are "app-relative": forward-slash paths rooted at the
asset root and written with a leading ``~`` (``~/scripts/app.js``). Comparisons
are case-insensitive throughout.
"""

from __future__ import annotations

import re
from typing import Optional

APP_ROOT = "~"

_URL_RE = re.compile(r"^(?:https?:)?//[^/\s]+", re.IGNORECASE)


def normalize_path(path: str) -> str:
    """Collapse ``.``/``..`` segments and duplicate slashes, keep a ``~`` or ``/`` root."""
    path = path.replace("\\", "/").strip()
    root = ""
    if path == APP_ROOT or path.startswith(APP_ROOT + "/"):
        root = APP_ROOT
        path = path[len(APP_ROOT):]
    if path.startswith("/"):
        root = root or "/"

    out: list[str] = []
    for seg in path.split("/"):
        if seg in ("", "."):
            continue
        if seg == "..":
            if not out:
                raise ValueError(f"Path climbs above its root: {path!r}")
            out.pop()
            continue
        out.append(seg)

    body = "/".join(out)
    if root == APP_ROOT:
        return APP_ROOT + ("/" + body if body else "")
    if root == "/":
        return "/" + body
    return body


def combine(*parts: str) -> str:
    """Join path parts with forward slashes, skipping empty parts."""
    cleaned = []
    for i, part in enumerate(p for p in parts if p):
        part = part.replace("\\", "/")
        cleaned.append(part.rstrip("/") if i == 0 else part.strip("/"))
    return "/".join(p for p in cleaned if p) or (parts[0] if parts else "")


def app_relative(path: str) -> str:
    if path == APP_ROOT or path.startswith(APP_ROOT + "/"):
        return path
    if path.startswith("/"):
        return APP_ROOT + path
    return APP_ROOT + "/" + path if path else APP_ROOT


def path_starts_with(path: str, prefix: str) -> bool:
    return path.lower().startswith(prefix.lower())


def paths_equal(a: str, b: str) -> bool:
    return normalize_path(a).lower() == normalize_path(b).lower()


def is_url(value: str) -> bool:
    """True for ``http(s)://host/...`` and protocol-relative ``//host/...`` values."""
    return bool(_URL_RE.match(value or ""))


def insert_before_extension(path: str, marker: str) -> Optional[str]:
    """``~/a/b.js`` + ``-debug`` -> ``~/a/b-debug.js``; None when the file name has no extension."""
    slash = path.rfind("/")
    dot = path.rfind(".")
    if dot <= slash + 1:
        return None
    return path[:dot] + marker + path[dot:]
