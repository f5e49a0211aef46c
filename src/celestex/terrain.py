"""Noise-driven surface textures for terrestrial-like bodies.

One pass over the texture projects each pixel onto the sphere, samples
a height from the octave noise field and classifies it into a colour.
A second pass turns the finished height grid into a normal map.

Usage
-----
>>> from celestex.models import SurfaceParameters, PlanetType
>>> params = SurfaceParameters(PlanetType.OCEAN, texture_size=64)
>>> bundle = build_terrain_texture(7, params)
>>> bundle.color_buffer.shape
(64, 64, 4)
"""

from __future__ import annotations

import logging
import time
from typing import Optional, Tuple

import numpy as np

from .classifier import BlendPolicy, resolve_policy
from .models import CelestialCategory, SurfaceParameters, TextureBundle
from .noise import noise3_source, surface_height
from .normalmap import synthesize_normal_map
from .projection import equirect_to_sphere, pixel_uv

logger = logging.getLogger(__name__)


def build_height_and_color(
    seed: int,
    params: SurfaceParameters,
    *,
    policy: Optional[BlendPolicy] = None,
) -> Tuple[np.ndarray, np.ndarray]:
    """Sample heights and colours for every pixel.

    *policy* defaults to :func:`~classifier.resolve_policy` of *params*.

    Returns
    -------
    (color_buffer, height_grid)
        ``(size, size, 4)`` uint8 RGBA and ``(size, size)`` float64.
    """
    size = params.texture_size
    if policy is None:
        policy = resolve_policy(params)
    noise3 = noise3_source(seed)

    heights = np.zeros((size, size), dtype=np.float64)
    colors = np.empty((size, size, 4), dtype=np.uint8)
    colors[..., 3] = 255

    for py in range(size):
        for px in range(size):
            u, v = pixel_uv(px, py, size)
            x, y, z = equirect_to_sphere(u, v)
            h = surface_height(
                x, y, z,
                octaves=params.octaves,
                lacunarity=params.lacunarity,
                persistence=params.persistence,
                frequency=params.scale,
                noise3=noise3,
            )
            heights[py, px] = h
            colors[py, px, :3] = policy.color_at(h)

    return colors, heights


def build_terrain_texture(
    seed: int,
    params: SurfaceParameters,
    *,
    policy: Optional[BlendPolicy] = None,
) -> TextureBundle:
    """Build the colour, normal and height data for one surface.

    Parameters
    ----------
    seed : int
        Noise seed.  Identical ``(seed, params)`` give identical bytes.
    params : SurfaceParameters
        Surface description; ``texture_size`` fixes every dimension.
    policy : BlendPolicy, optional
        Pre-resolved colour policy for *params*.
    """
    start = time.perf_counter()
    colors, heights = build_height_and_color(seed, params, policy=policy)
    normals = synthesize_normal_map(heights, params.texture_size, params.normal_strength)
    logger.debug(
        "Built %s terrain texture %dx%d (seed=%d) in %.3fs",
        params.surface_type, params.texture_size, params.texture_size,
        seed, time.perf_counter() - start,
    )
    return TextureBundle(
        color_buffer=colors,
        normal_buffer=normals,
        height_grid=heights,
        category=CelestialCategory.TERRESTRIAL,
    )
