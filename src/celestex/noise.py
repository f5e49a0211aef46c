"""Noise primitives for surface synthesis.

Two families live here:

- **3-D coherent noise** (OpenSimplex) summed over octaves — the height
  source for noise-driven surfaces.  Points come from
  :mod:`projection`, so the field is seamless on the sphere.
- **2-D hashed value noise** (vectorised numpy) — the cheap lattice
  noise evaluated per texel by the parametric generators through the
  render context.

Nothing in this module reads the clock or an unseeded RNG; every output
is a pure function of its arguments.

Functions
---------
- :func:`noise3_source` — seeded 3-D noise function
- :func:`fbm_3d` — Fractal Brownian Motion on a 3-D point
- :func:`surface_height` — fbm remapped from ``[-1, 1]`` to ``[0, 1]``
- :func:`normalize` — rescale ``[a, b] → [c, d]`` with clamping
- :func:`hash_2d` — sine hash of 2-D points into ``[0, 1)``
- :func:`value_noise_2d` — smoothed lattice value noise
- :func:`fractal_value_noise_2d` — four-octave value noise
"""

from __future__ import annotations

import functools
from typing import Callable, Optional

import numpy as np
from opensimplex import OpenSimplex

# ═══════════════════════════════════════════════════════════════════
# Base noise source
# ═══════════════════════════════════════════════════════════════════


@functools.lru_cache(maxsize=32)
def _simplex(seed: int) -> OpenSimplex:
    return OpenSimplex(seed=seed)


def noise3_source(seed: int) -> Callable[[float, float, float], float]:
    """Return a 3-D noise function seeded with *seed*.

    Each seed gets its own :class:`opensimplex.OpenSimplex` instance, so
    two seeds can be sampled in the same process without reseeding
    module-level state.  Output is in roughly ``[-1, 1]``.
    """
    return _simplex(int(seed)).noise3


# ═══════════════════════════════════════════════════════════════════
# Fractal Brownian Motion
# ═══════════════════════════════════════════════════════════════════


def fbm_3d(
    x: float,
    y: float,
    z: float,
    *,
    octaves: int = 4,
    lacunarity: float = 2.0,
    persistence: float = 0.5,
    frequency: float = 1.0,
    seed: int = 42,
    noise3: Optional[Callable[[float, float, float], float]] = None,
) -> float:
    """3-D Fractal Brownian Motion — layered multi-octave noise.

    Amplitude starts at 1 and frequency at *frequency*; each octave adds
    ``noise(p·freq)·amp``, then amplitude is multiplied by *persistence*
    and frequency by *lacunarity*.  The sum is divided by the total
    amplitude, which bounds it to the theoretical ``[-1, 1]`` range of
    the base noise.

    Parameters
    ----------
    x, y, z : float
        Sample point, normally on the unit sphere.
    octaves : int
        Number of noise layers.  Zero octaves give ``0.0``.
    lacunarity : float
        Frequency multiplier between octaves.
    persistence : float
        Amplitude multiplier between octaves.
    frequency : float
        Base spatial frequency (the surface's ``scale``).
    seed : int
        Seed for the noise source.
    noise3 : callable, optional
        Pre-built source from :func:`noise3_source`; saves the lookup
        when sampling many points.

    Returns
    -------
    float
        A value in approximately ``[-1, 1]``.
    """
    if noise3 is None:
        noise3 = noise3_source(seed)
    value = 0.0
    amplitude = 1.0
    freq = frequency
    max_amp = 0.0

    for _ in range(octaves):
        value += noise3(x * freq, y * freq, z * freq) * amplitude
        max_amp += amplitude
        amplitude *= persistence
        freq *= lacunarity

    return value / max_amp if max_amp != 0 else 0.0


def surface_height(
    x: float,
    y: float,
    z: float,
    *,
    octaves: int = 4,
    lacunarity: float = 2.0,
    persistence: float = 0.5,
    frequency: float = 1.0,
    seed: int = 42,
    noise3: Optional[Callable[[float, float, float], float]] = None,
) -> float:
    """Height in ``[0, 1]`` at a sphere point.

    The fbm value is remapped from the fixed range ``[-1, 1]`` rather
    than from a measured per-texture min/max, so a given seed always
    produces the same heights regardless of texture size.
    """
    raw = fbm_3d(
        x, y, z,
        octaves=octaves,
        lacunarity=lacunarity,
        persistence=persistence,
        frequency=frequency,
        seed=seed,
        noise3=noise3,
    )
    return normalize(raw)


# ═══════════════════════════════════════════════════════════════════
# Normalize
# ═══════════════════════════════════════════════════════════════════


def normalize(
    value: float,
    *,
    src_min: float = -1.0,
    src_max: float = 1.0,
    dst_min: float = 0.0,
    dst_max: float = 1.0,
) -> float:
    """Linearly remap *value* from ``[src_min, src_max]`` to ``[dst_min, dst_max]``.

    Values outside the source range are clamped.
    """
    if src_max == src_min:
        return (dst_min + dst_max) / 2.0
    t = (value - src_min) / (src_max - src_min)
    t = max(0.0, min(1.0, t))
    return dst_min + t * (dst_max - dst_min)


# ═══════════════════════════════════════════════════════════════════
# 2-D hashed noise (vectorised)
# ═══════════════════════════════════════════════════════════════════


def _fract(a: np.ndarray) -> np.ndarray:
    return a - np.floor(a)


def hash_2d(x: np.ndarray, y: np.ndarray) -> np.ndarray:
    """``fract(sin(dot(p, (12.9898, 78.233))) · 43758.5453)`` per point."""
    x = np.asarray(x, dtype=np.float64)
    y = np.asarray(y, dtype=np.float64)
    return _fract(np.sin(x * 12.9898 + y * 78.233) * 43758.5453)


def _hash_1d(n: np.ndarray) -> np.ndarray:
    return _fract(np.sin(n) * 43758.5453123)


def value_noise_2d(
    x: np.ndarray,
    y: np.ndarray,
    *,
    seed: float = 0.0,
    period: Optional[int] = None,
) -> np.ndarray:
    """Smoothed lattice value noise in ``[0, 1]``.

    Lattice values are hashed from ``ix + 57·iy + seed`` and blended
    with a smoothstep-eased bilinear interpolation.

    Parameters
    ----------
    x, y : array_like
        Sample coordinates (lattice units).
    seed : float
        Offset added to every lattice hash.
    period : int, optional
        If given, the lattice repeats every *period* cells along ``x``,
        making the field tile horizontally.
    """
    x = np.asarray(x, dtype=np.float64)
    y = np.asarray(y, dtype=np.float64)
    ix = np.floor(x)
    iy = np.floor(y)
    fx = x - ix
    fy = y - iy
    fx = fx * fx * (3.0 - 2.0 * fx)
    fy = fy * fy * (3.0 - 2.0 * fy)

    ix1 = ix + 1.0
    if period is not None:
        ix = np.mod(ix, period)
        ix1 = np.mod(ix1, period)

    row0 = iy * 57.0 + seed
    row1 = row0 + 57.0
    a = _hash_1d(ix + row0)
    b = _hash_1d(ix1 + row0)
    c = _hash_1d(ix + row1)
    d = _hash_1d(ix1 + row1)

    top = a + (b - a) * fx
    bottom = c + (d - c) * fx
    return top + (bottom - top) * fy


def fractal_value_noise_2d(
    x: np.ndarray,
    y: np.ndarray,
    *,
    seed: float = 0.0,
    period: Optional[int] = None,
) -> np.ndarray:
    """Four octaves of :func:`value_noise_2d` weighted 1/2, 1/4, 1/8, 1/16.

    The result lies in ``[0, 0.9375]``.
    """
    total = np.zeros(np.broadcast(np.asarray(x), np.asarray(y)).shape)
    amplitude = 0.5
    scale = 1.0
    for _ in range(4):
        octave_period = None if period is None else int(period * scale)
        total += amplitude * value_noise_2d(
            np.asarray(x) * scale, np.asarray(y) * scale, seed=seed, period=octave_period,
        )
        amplitude *= 0.5
        scale *= 2.0
    return total
