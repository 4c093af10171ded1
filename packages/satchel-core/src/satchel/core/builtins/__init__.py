"""Built-in bundle kinds (script, stylesheet, htmltemplate), registered on import."""

from satchel.core.builtins import kinds  # noqa: F401
