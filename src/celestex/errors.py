"""Exception hierarchy for celestex.

- :class:`CelestexError` — base class for everything raised here
- :class:`RenderContextError` — the pooled render context could not be built
- :class:`DimensionMismatchError` — a height grid does not match the requested size
- :class:`ColorParseError` — a colour value could not be interpreted
"""

from __future__ import annotations


class CelestexError(Exception):
    """Base class for celestex errors."""


class RenderContextError(CelestexError, RuntimeError):
    """No compatible rendering backend could be initialised."""


class DimensionMismatchError(CelestexError, ValueError):
    """A height grid's shape disagrees with the requested texture size."""


class ColorParseError(CelestexError, ValueError):
    """A colour-like value has an unsupported form."""
