"""Parametric surface generators — gas giants, stars, space rocks.

These bodies are not coloured from a height grid.  Each generator
describes its surface as a vectorised fragment function over ``(u, v)``
and draws it through the shared :class:`~render_context.RenderContext`.
The scalar field behind the colours is returned as the bundle's height
grid, and the normal map is synthesised from it like any other surface.

Functions
---------
- :func:`generate_gas_giant_texture` — latitude bands warped by noise
- :func:`generate_star_texture` — hashed granulation with an edge glow
- :func:`generate_space_rock_texture` — fractal noise with crater pits
- :func:`spectral_class_color` — photosphere colour per spectral class
- :func:`rock_base_color` — default albedo per rock composition
- :func:`resolve_gas_giant_params`, :func:`resolve_star_params`,
  :func:`resolve_space_rock_params` — parameters with colour defaults filled in
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, replace
from typing import Dict, Optional

import numpy as np

from .colors import RGB, ColorLike, parse_color, to_hex
from .errors import ColorParseError
from .models import (
    CelestialCategory,
    GasGiantClass,
    GasGiantParameters,
    RockyType,
    SpaceRockParameters,
    SpectralClass,
    StarParameters,
    TextureBundle,
)
from .noise import fractal_value_noise_2d, hash_2d, value_noise_2d
from .normalmap import synthesize_normal_map
from .render_context import RenderContext

logger = logging.getLogger(__name__)

_FRACTAL_MAX = 0.9375  # sum of the four fractal_value_noise_2d weights
_STORM_DEFAULT: RGB = (200, 80, 50)
_FEATURE_DEFAULT: RGB = (0x55, 0x55, 0x55)


# ═══════════════════════════════════════════════════════════════════
# Helpers
# ═══════════════════════════════════════════════════════════════════


def _smoothstep(edge0: float, edge1: float, x: np.ndarray) -> np.ndarray:
    t = np.clip((x - edge0) / (edge1 - edge0), 0.0, 1.0)
    return t * t * (3.0 - 2.0 * t)


def _mix(a: np.ndarray, b: np.ndarray, t: np.ndarray) -> np.ndarray:
    return a + (b - a) * t


def _rgb01(rgb: RGB) -> np.ndarray:
    return np.array(rgb, dtype=np.float64) / 255.0


def _color_or_default(value: Optional[ColorLike], default: RGB, what: str) -> RGB:
    if value is None:
        return default
    try:
        return parse_color(value)
    except ColorParseError as exc:
        logger.warning("Unusable %s (%s); using %s", what, exc, default)
        return default


def _bundle(
    color: np.ndarray,
    field: np.ndarray,
    strength: float,
    category: CelestialCategory,
    *,
    emissive: bool = False,
) -> TextureBundle:
    heights = np.clip(field, 0.0, 1.0)
    normals = synthesize_normal_map(heights, heights.shape[0], strength)
    return TextureBundle(
        color_buffer=color,
        normal_buffer=normals,
        height_grid=heights,
        emissive_buffer=color if emissive else None,
        category=category,
    )


# ═══════════════════════════════════════════════════════════════════
# Gas giants
# ═══════════════════════════════════════════════════════════════════


@dataclass(frozen=True)
class GasGiantClassConfig:
    """Banding behaviour and palette for one gas giant class.

    Attributes
    ----------
    band_frequency : float
        Number of half-waves of the band pattern from pole to pole.
    turbulence : float
        How far (in radians / π) noise bends the bands.
    detail : float
        Strength of the fine cloud texture modulating brightness.
    base_color, secondary_color : str
        Default band colours.
    """

    band_frequency: float
    turbulence: float
    detail: float
    base_color: str
    secondary_color: str


GAS_GIANT_CLASSES: Dict[GasGiantClass, GasGiantClassConfig] = {
    GasGiantClass.CLASS_I: GasGiantClassConfig(14.0, 0.9, 0.25, "#ffffe0", "#d2b48c"),
    GasGiantClass.CLASS_II: GasGiantClassConfig(10.0, 0.6, 0.20, "#f0d0b0", "#fefefe"),
    GasGiantClass.CLASS_III: GasGiantClassConfig(5.0, 0.15, 0.08, "#a0c0e0", "#d0e0f0"),
    GasGiantClass.CLASS_IV: GasGiantClassConfig(8.0, 0.4, 0.15, "#98b8d8", "#e0f0ff"),
    GasGiantClass.CLASS_V: GasGiantClassConfig(12.0, 1.2, 0.30, "#8b5a2b", "#e0e0e0"),
}

_BAND_PERIOD = 8     # warp lattice cells around the equator
_DETAIL_PERIOD = 32  # fine-detail lattice cells around the equator


def generate_gas_giant_texture(
    seed: int,
    params: GasGiantParameters,
    context: RenderContext,
) -> TextureBundle:
    """Render a banded gas giant.

    The band field is ``0.5 + 0.5·sin(v·π·f + turbulence·π·w)`` where
    ``w`` is horizontally periodic value noise, so the texture wraps in
    ``u``.  With a ``storm_color`` an oval storm is painted at a
    seed-derived position.
    """
    config = GAS_GIANT_CLASSES[params.gas_giant_class]
    base = _rgb01(_color_or_default(params.base_color, parse_color(config.base_color), "base colour"))
    secondary = _rgb01(
        _color_or_default(params.secondary_color, parse_color(config.secondary_color), "secondary colour")
    )
    storm = None
    if params.storm_color is not None:
        storm = _rgb01(_color_or_default(params.storm_color, _STORM_DEFAULT, "storm colour"))

    s = float(seed)
    storm_u = float(hash_2d(s, 1.0))
    storm_v = 0.3 + 0.4 * float(hash_2d(1.0, s))
    field_holder: Dict[str, np.ndarray] = {}

    def shader(u: np.ndarray, v: np.ndarray) -> np.ndarray:
        warp = value_noise_2d(u * _BAND_PERIOD, v * _BAND_PERIOD * 2.0, seed=s, period=_BAND_PERIOD)
        bands = 0.5 + 0.5 * np.sin(
            v * math.pi * config.band_frequency + config.turbulence * math.pi * (warp * 2.0 - 1.0)
        )
        fine = fractal_value_noise_2d(
            u * _DETAIL_PERIOD, v * _DETAIL_PERIOD, seed=s + 17.0, period=_DETAIL_PERIOD,
        ) / _FRACTAL_MAX
        shade = 1.0 - config.detail * 0.5 + config.detail * fine
        color = _mix(base, secondary, bands[..., None]) * shade[..., None]

        if storm is not None:
            du = np.abs(u - storm_u)
            du = np.minimum(du, 1.0 - du)
            dist = np.sqrt((du / 0.08) ** 2 + ((v - storm_v) / 0.04) ** 2)
            mask = 1.0 - _smoothstep(0.6, 1.0, dist)
            color = _mix(color, storm, (mask * 0.85)[..., None])

        field_holder["field"] = bands
        return color

    pixels = context.render(shader, params.texture_size)
    return _bundle(pixels, field_holder["field"], 0.0, CelestialCategory.GAS_GIANT)


# ═══════════════════════════════════════════════════════════════════
# Stars
# ═══════════════════════════════════════════════════════════════════

_SPECTRAL_COLORS: Dict[SpectralClass, int] = {
    SpectralClass.O: 0x9BB0FF,  # blue
    SpectralClass.B: 0xAABFFF,  # blue-white
    SpectralClass.A: 0xCAD7FF,  # white
    SpectralClass.F: 0xF8F7FF,  # yellow-white
    SpectralClass.G: 0xFFF4EA,  # yellow
    SpectralClass.K: 0xFFD2A1,  # orange
    SpectralClass.M: 0xFFA366,  # red
    SpectralClass.L: 0xFF6633,  # red-brown
    SpectralClass.T: 0xCC3333,  # magenta-brown
    SpectralClass.Y: 0xAA3333,  # dark red
}


def spectral_class_color(spectral_class: SpectralClass) -> RGB:
    """Photosphere colour for *spectral_class*; white if unknown."""
    return parse_color(_SPECTRAL_COLORS.get(spectral_class, 0xFFFFFF))


def generate_star_texture(
    seed: int,
    params: StarParameters,
    context: RenderContext,
) -> TextureBundle:
    """Render a star surface.

    Granulation is a per-texel sine hash; the brightness pattern is
    ``mix(1 − spot·0.2, 1, noise)``.  A radial glow
    ``1 − smoothstep(0.4, 0.5, r)`` brightens the disc relative to the
    corners.  The colour buffer doubles as the emissive buffer.
    """
    base = _rgb01(
        _color_or_default(params.base_color, spectral_class_color(params.spectral_class), "base colour")
    )
    s = float(seed)
    low = 1.0 - params.spot_intensity * 0.2
    field_holder: Dict[str, np.ndarray] = {}

    def shader(u: np.ndarray, v: np.ndarray) -> np.ndarray:
        noise = hash_2d(u * 100.0 + s, v * 100.0 + s)
        pattern = _mix(low, 1.0, noise)
        color = base * params.surface_intensity * pattern[..., None]
        dist = np.sqrt((u - 0.5) ** 2 + (v - 0.5) ** 2)
        glow = 1.0 - _smoothstep(0.4, 0.5, dist)
        color = _mix(color * 0.8, color * 1.2, glow[..., None])
        field_holder["field"] = noise
        return color

    pixels = context.render(shader, params.texture_size)
    return _bundle(pixels, field_holder["field"], 0.0, CelestialCategory.STAR, emissive=True)


# ═══════════════════════════════════════════════════════════════════
# Space rocks
# ═══════════════════════════════════════════════════════════════════

_ROCK_COLORS: Dict[RockyType, int] = {
    RockyType.ICE: 0xD0E0F0,
    RockyType.METALLIC: 0x8C8C8C,
    RockyType.LIGHT_ROCK: 0xB0A090,
    RockyType.DARK_ROCK: 0x605040,
    RockyType.ICE_DUST: 0xB0B8C0,
    RockyType.DUST: 0xA09080,
}

ROCK_NORMAL_SCALE = 8.0
"""Normal strength per unit of roughness."""


def rock_base_color(rocky_type: RockyType) -> RGB:
    """Default albedo for *rocky_type*; mid grey if unknown."""
    return parse_color(_ROCK_COLORS.get(rocky_type, 0x808080))


def generate_space_rock_texture(
    seed: int,
    params: SpaceRockParameters,
    context: RenderContext,
) -> TextureBundle:
    """Render an asteroid / comet / ring-particle surface.

    ``n`` is four-octave value noise at ``uv·10``; craters are where
    ``value_noise(uv·8)`` crosses ``smoothstep(0.4, 0.6)``.  Colour is
    ``mix(base, feature, n·0.5)`` darkened toward ``feature·0.8`` in
    craters.  Metallic bodies are pulled toward their own luminance.
    The height grid is ``n`` with craters pressed in.
    """
    base = _rgb01(_color_or_default(params.base_color, rock_base_color(params.rocky_type), "base colour"))
    feature = _rgb01(_color_or_default(params.feature_color, _FEATURE_DEFAULT, "feature colour"))
    s = float(seed)
    metalness = float(params.metalness or 0.0)
    field_holder: Dict[str, np.ndarray] = {}

    def shader(u: np.ndarray, v: np.ndarray) -> np.ndarray:
        n = fractal_value_noise_2d(u * 10.0, v * 10.0, seed=s)
        craters = _smoothstep(0.4, 0.6, value_noise_2d(u * 8.0, v * 8.0, seed=s))
        color = _mix(base, feature, (n * 0.5)[..., None])
        color = _mix(color, feature * 0.8, (craters * 0.3)[..., None])
        if metalness > 0.0:
            lum = color @ np.array([0.2126, 0.7152, 0.0722])
            color = _mix(color, lum[..., None], metalness * 0.3)
        field_holder["field"] = (n / _FRACTAL_MAX) * (1.0 - 0.3 * craters)
        return color

    pixels = context.render(shader, params.texture_size)
    return _bundle(
        pixels,
        field_holder["field"],
        ROCK_NORMAL_SCALE * params.roughness,
        CelestialCategory.SPACE_ROCK,
    )


# ═══════════════════════════════════════════════════════════════════
# Resolution
# ═══════════════════════════════════════════════════════════════════

def resolve_gas_giant_params(params: GasGiantParameters) -> GasGiantParameters:
    """Return *params* with class-default and fallback colours written in."""
    config = GAS_GIANT_CLASSES[params.gas_giant_class]
    storm = None
    if params.storm_color is not None:
        storm = to_hex(_color_or_default(params.storm_color, _STORM_DEFAULT, "storm colour"))
    return replace(
        params,
        base_color=to_hex(
            _color_or_default(params.base_color, parse_color(config.base_color), "base colour")
        ),
        secondary_color=to_hex(
            _color_or_default(
                params.secondary_color, parse_color(config.secondary_color), "secondary colour"
            )
        ),
        storm_color=storm,
    )


def resolve_star_params(params: StarParameters) -> StarParameters:
    """Return *params* with the spectral-class colour written in."""
    base = _color_or_default(
        params.base_color, spectral_class_color(params.spectral_class), "base colour"
    )
    return replace(params, base_color=to_hex(base))


def resolve_space_rock_params(params: SpaceRockParameters) -> SpaceRockParameters:
    """Return *params* with composition-default and fallback colours written in."""
    base = _color_or_default(params.base_color, rock_base_color(params.rocky_type), "base colour")
    feature = _color_or_default(params.feature_color, _FEATURE_DEFAULT, "feature colour")
    return replace(params, base_color=to_hex(base), feature_color=to_hex(feature))
