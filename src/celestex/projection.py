"""Equirectangular ↔ unit-sphere projection.

Texture pixels address the sphere by ``(u, v)`` in ``[0, 1]²``: ``u``
runs around the equator, ``v`` from the north pole (``v = 0``) to the
south pole (``v = 1``).  Sampling 3-D noise at the projected point gives
a texture that wraps horizontally with no seam.  Both poles collapse to
a single point; the resulting pinch is accepted, not corrected.

Functions
---------
- :func:`equirect_to_sphere` — ``(u, v)`` → ``(x, y, z)``
- :func:`pixel_uv` — pixel index → ``(u, v)`` with the edges on 0 and 1
"""

from __future__ import annotations

import math
from typing import Tuple

_TWO_PI = 2.0 * math.pi


def equirect_to_sphere(u: float, v: float) -> Tuple[float, float, float]:
    """Map equirectangular ``(u, v)`` onto the unit sphere.

    ``φ = u·2π``, ``θ = v·π``; ``y`` is the polar axis.  ``u`` is taken
    modulo 1 so ``u = 1`` lands exactly on ``u = 0``.
    """
    phi = math.fmod(u, 1.0) * _TWO_PI
    theta = v * math.pi
    sin_theta = math.sin(theta)
    return (
        sin_theta * math.cos(phi),
        math.cos(theta),
        sin_theta * math.sin(phi),
    )


def pixel_uv(px: int, py: int, size: int) -> Tuple[float, float]:
    """Return ``(u, v)`` for pixel ``(px, py)`` of a *size*² texture.

    The first and last columns sit on ``u = 0`` and ``u = 1``, so they
    project to the same meridian.
    """
    if size <= 1:
        return (0.0, 0.0)
    span = float(size - 1)
    return (px / span, py / span)
