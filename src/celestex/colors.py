"""Colour representation helpers.

Every colour inside celestex is an ``(R, G, B)`` tuple of ints in
``[0, 255]``.  Callers may supply colours in any of the forms accepted
by :func:`parse_color`; they are normalised before they reach the
classifier, the generators, or the cache key.

Functions
---------
- :func:`parse_color` — colour-like → ``(R, G, B)`` ints
- :func:`to_hex` — ``(R, G, B)`` → ``"#rrggbb"``
- :func:`lerp_rgb` — blend two colours, rounding half-up
- :func:`smoothstep` — Hermite ease between two edges
"""

from __future__ import annotations

import re
from typing import Sequence, Tuple, Union

from .errors import ColorParseError

RGB = Tuple[int, int, int]
ColorLike = Union[str, int, Sequence[int], Sequence[float]]

_HEX6 = re.compile(r"^#?([0-9a-fA-F]{2})([0-9a-fA-F]{2})([0-9a-fA-F]{2})$")
_HEX3 = re.compile(r"^#?([0-9a-fA-F])([0-9a-fA-F])([0-9a-fA-F])$")


def parse_color(value: ColorLike) -> RGB:
    """Interpret *value* as an ``(R, G, B)`` colour.

    Accepted forms:

    - ``"#rrggbb"`` / ``"rrggbb"`` / ``"#rgb"`` / ``"0xrrggbb"`` strings
    - a 24-bit ``int`` such as ``0xffa366``
    - a 3-sequence of ints in ``[0, 255]``
    - a 3-sequence of floats in ``[0, 1]``

    Raises
    ------
    ColorParseError
        If *value* has none of the above forms.
    """
    if isinstance(value, bool):
        raise ColorParseError(f"Not a colour: {value!r}")

    if isinstance(value, int):
        if not 0 <= value <= 0xFFFFFF:
            raise ColorParseError(f"Colour int out of range: {value:#x}")
        return ((value >> 16) & 0xFF, (value >> 8) & 0xFF, value & 0xFF)

    if isinstance(value, str):
        text = value.strip()
        if text.lower().startswith("0x"):
            text = text[2:]
        m = _HEX6.match(text)
        if m:
            return (int(m.group(1), 16), int(m.group(2), 16), int(m.group(3), 16))
        m = _HEX3.match(text)
        if m:
            return tuple(int(c * 2, 16) for c in m.groups())  # type: ignore[return-value]
        raise ColorParseError(f"Unparseable colour string: {value!r}")

    try:
        parts = list(value)
    except TypeError:
        raise ColorParseError(f"Not a colour: {value!r}") from None
    if len(parts) != 3:
        raise ColorParseError(f"Colour needs 3 components, got {len(parts)}")

    if all(isinstance(p, int) and not isinstance(p, bool) for p in parts):
        if any(p < 0 or p > 255 for p in parts):
            raise ColorParseError(f"Colour components out of range: {value!r}")
        return (parts[0], parts[1], parts[2])

    if all(isinstance(p, (int, float)) and not isinstance(p, bool) for p in parts):
        if any(p < 0.0 or p > 1.0 for p in parts):
            raise ColorParseError(f"Float colour components must be in [0, 1]: {value!r}")
        return tuple(int(p * 255.0 + 0.5) for p in parts)  # type: ignore[return-value]

    raise ColorParseError(f"Not a colour: {value!r}")


def to_hex(rgb: RGB) -> str:
    """Format an ``(R, G, B)`` tuple as lower-case ``"#rrggbb"``."""
    r, g, b = rgb
    return f"#{r:02x}{g:02x}{b:02x}"


def lerp_rgb(a: RGB, b: RGB, t: float) -> RGB:
    """Blend *a* → *b* by *t* (clamped to ``[0, 1]``), rounding half-up."""
    t = max(0.0, min(1.0, t))
    return (
        int(a[0] + (b[0] - a[0]) * t + 0.5),
        int(a[1] + (b[1] - a[1]) * t + 0.5),
        int(a[2] + (b[2] - a[2]) * t + 0.5),
    )


def smoothstep(edge0: float, edge1: float, x: float) -> float:
    """Hermite ease ``t·t·(3 − 2t)`` of *x* between *edge0* and *edge1*.

    A zero-width band degrades to a hard step at *edge0*.
    """
    if edge1 == edge0:
        return 0.0 if x < edge0 else 1.0
    t = (x - edge0) / (edge1 - edge0)
    t = max(0.0, min(1.0, t))
    return t * t * (3.0 - 2.0 * t)
