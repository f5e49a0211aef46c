"""Tangent-space normal maps from height grids.

Slopes are central differences over the four axis neighbours.  Indexing
wraps toroidally, so the left edge reads the right edge and the top row
reads the bottom row; together with the seamless projection this keeps
the normal map free of edge artefacts.

Functions
---------
- :func:`compute_normals` — height grid → unit normal vectors
- :func:`encode_normals` — unit vectors → RGBA bytes
- :func:`decode_normals` — RGBA bytes → vectors
- :func:`synthesize_normal_map` — checked end-to-end conversion
"""

from __future__ import annotations

import numpy as np

from .errors import DimensionMismatchError

FLAT_NORMAL_RGBA = (128, 128, 255, 255)
"""Encoding of the flat normal ``(0, 0, 1)``."""

_EPSILON = 1e-12


def compute_normals(height_grid: np.ndarray, strength: float = 1.0) -> np.ndarray:
    """Per-cell unit normals for *height_grid*.

    For cell ``(px, py)``::

        dx = (h[py, px-1] − h[py, px+1]) · strength · 0.5
        dy = (h[py-1, px] − h[py+1, px]) · strength · 0.5
        n  = normalize((dx, dy, 1))

    Neighbour indices wrap modulo the grid size.  A vector of near-zero
    length becomes the flat normal ``(0, 0, 1)``.

    Returns
    -------
    numpy.ndarray
        Shape ``(H, W, 3)``, float64.
    """
    h = np.asarray(height_grid, dtype=np.float64)
    left = np.roll(h, 1, axis=1)
    right = np.roll(h, -1, axis=1)
    up = np.roll(h, 1, axis=0)
    down = np.roll(h, -1, axis=0)

    half = strength * 0.5
    vec = np.empty(h.shape + (3,), dtype=np.float64)
    vec[..., 0] = (left - right) * half
    vec[..., 1] = (up - down) * half
    vec[..., 2] = 1.0

    length = np.sqrt(np.sum(vec * vec, axis=-1, keepdims=True))
    degenerate = length[..., 0] < _EPSILON
    safe = np.where(length < _EPSILON, 1.0, length)
    normals = vec / safe
    normals[degenerate] = (0.0, 0.0, 1.0)
    return normals


def encode_normals(normals: np.ndarray) -> np.ndarray:
    """Pack unit vectors into RGBA bytes: ``rint((v·0.5 + 0.5)·255)``, A = 255."""
    h, w = normals.shape[:2]
    out = np.empty((h, w, 4), dtype=np.uint8)
    scaled = np.rint((normals * 0.5 + 0.5) * 255.0)
    out[..., :3] = np.clip(scaled, 0, 255).astype(np.uint8)
    out[..., 3] = 255
    return out


def decode_normals(buffer: np.ndarray) -> np.ndarray:
    """Inverse of :func:`encode_normals` (up to 8-bit quantisation)."""
    rgb = np.asarray(buffer[..., :3], dtype=np.float64)
    return (rgb / 255.0) * 2.0 - 1.0


def synthesize_normal_map(
    height_grid: np.ndarray,
    size: int,
    strength: float = 1.0,
) -> np.ndarray:
    """Build a ``(size, size, 4)`` uint8 normal map from *height_grid*.

    Raises
    ------
    DimensionMismatchError
        If *height_grid* is not exactly ``size × size``.
    """
    shape = np.shape(height_grid)
    if len(shape) != 2 or shape[0] != shape[1] or shape[0] != size or size < 1:
        raise DimensionMismatchError(
            f"Height grid is {'x'.join(str(s) for s in shape)}, "
            f"expected {size}x{size} for normal map synthesis"
        )
    return encode_normals(compute_normals(height_grid, strength))
