"""satchel core package.

Public entrypoints:
- satchel.core.api: stable API surface for integrations/plugins
- satchel.core.collection.BundleCollection: add bundles programmatically

Internal modules may change without notice.
"""

from __future__ import annotations

# Ensure built-in bundle kinds are registered on import.
from satchel.core import builtins as _builtins  # noqa: F401

from satchel.core.collection import BundleCollection

__all__ = ["BundleCollection"]
