"""Centralized customized exceptions for satchel.

All project-specific exceptions live in this module so callers can import
them from one place:

    from satchel.core.exception import MissingAssetError

Most errors also derive from the closest builtin (FileNotFoundError,
ValueError, KeyError) so existing ``except`` clauses keep working.
"""

from __future__ import annotations

from typing import Optional

__all__ = [
    "SatchelError",
    "PathNotFoundError",
    "DescriptorFormatError",
    "MissingAssetError",
    "ShouldReferenceNonMinifiedError",
    "ShouldReferenceDebugError",
    "DuplicateBundleError",
    "SpecError",
]


class SatchelError(Exception):
    """Base class for every error raised by satchel."""


class PathNotFoundError(SatchelError, FileNotFoundError):
    """Raised when a bundle path is neither an existing file nor a directory."""

    def __init__(self, path: str):
        super().__init__(f"Bundle path not found: \"{path}\" is neither a file nor a directory.")
        self.path = path


class DescriptorFormatError(SatchelError, ValueError):
    """Raised when a bundle descriptor file is malformed."""

    def __init__(self, message: str, *, source: Optional[str] = None, line_number: Optional[int] = None):
        where = ""
        if source:
            where = f" ({source}" + (f", line {line_number}" if line_number else "") + ")"
        super().__init__(message + where)
        self.reason = message
        self.source = source
        self.line_number = line_number


class MissingAssetError(SatchelError, FileNotFoundError):
    """Raised when an explicit asset filename matches no candidate file."""

    def __init__(self, *, bundle_path: str, filename: str, message: Optional[str] = None):
        msg = message or f"The asset file \"{filename}\" was not found for bundle \"{bundle_path}\"."
        super().__init__(msg)
        self.message = msg
        self.bundle_path = bundle_path
        # FileNotFoundError.__str__ switches to "[Errno None] ..." once filename is set
        self.filename = filename

    def __str__(self) -> str:
        return self.message


class _MisreferencedAssetError(MissingAssetError):
    def __init__(self, *, bundle_path: str, filename: str, suggestion: str):
        super().__init__(
            bundle_path=bundle_path,
            filename=filename,
            message=f"Bundle \"{bundle_path}\" references \"{filename}\" when it should reference \"{suggestion}\".",
        )
        self.suggestion = suggestion


class ShouldReferenceNonMinifiedError(_MisreferencedAssetError):
    """A minified file was listed but only its non-minified source exists."""


class ShouldReferenceDebugError(_MisreferencedAssetError):
    """A file was listed but only its ``-debug``/``.debug`` variant exists."""


class DuplicateBundleError(SatchelError, KeyError):
    """Raised when adding a bundle at a path that is taken and on_duplicate=error."""

    def __init__(self, path: str):
        super().__init__(path)
        self.path = path

    def __str__(self) -> str:
        return f"A bundle already exists at \"{self.path}\"."


class SpecError(SatchelError, ValueError):
    """Raised when a collection config or settings value is invalid (schema or semantic)."""
