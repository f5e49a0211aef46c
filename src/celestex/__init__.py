"""Celestex — deterministic procedural textures for celestial bodies.

Public API is organised into layers:

- **Core** — parameter types, texture bundles, colours, errors
- **Synthesis** — projection, noise, colour classification, normal maps
- **Generators** — terrain builder and parametric category generators
- **Service** — render context, cache, factory
"""

# ── Core ────────────────────────────────────────────────────────────
from .models import (
    CelestialCategory,
    PlanetType,
    GasGiantClass,
    SpectralClass,
    RockyType,
    SurfaceParameters,
    GasGiantParameters,
    StarParameters,
    SpaceRockParameters,
    TextureBundle,
)
from .colors import parse_color, to_hex, lerp_rgb, smoothstep
from .errors import (
    CelestexError,
    RenderContextError,
    DimensionMismatchError,
    ColorParseError,
)

# ── Synthesis ───────────────────────────────────────────────────────
from .projection import equirect_to_sphere, pixel_uv
from .noise import (
    noise3_source,
    fbm_3d,
    surface_height,
    normalize as noise_normalize,
    hash_2d,
    value_noise_2d,
    fractal_value_noise_2d,
)
from .classifier import (
    MultiBandPolicy,
    TwoTonePolicy,
    FlatPolicy,
    SURFACE_POLICIES,
    resolve_policy,
    resolve_surface_params,
    classify,
)
from .normalmap import (
    FLAT_NORMAL_RGBA,
    compute_normals,
    encode_normals,
    decode_normals,
    synthesize_normal_map,
)

# ── Generators ──────────────────────────────────────────────────────
from .terrain import build_height_and_color, build_terrain_texture
from .generators import (
    GAS_GIANT_CLASSES,
    GasGiantClassConfig,
    generate_gas_giant_texture,
    generate_star_texture,
    generate_space_rock_texture,
    spectral_class_color,
    rock_base_color,
    resolve_gas_giant_params,
    resolve_star_params,
    resolve_space_rock_params,
)
from .presets import SurfacePreset, PRESETS, DEFAULT_TEXTURE_SIZE, surface_params_for

# ── Service ─────────────────────────────────────────────────────────
from .render_context import RenderContext, RenderTarget, available_backends, register_backend
from .cache import TextureCache, CacheStats, canonical_key
from .factory import TextureFactory

__all__ = [
    # Core
    "CelestialCategory",
    "PlanetType",
    "GasGiantClass",
    "SpectralClass",
    "RockyType",
    "SurfaceParameters",
    "GasGiantParameters",
    "StarParameters",
    "SpaceRockParameters",
    "TextureBundle",
    "parse_color",
    "to_hex",
    "lerp_rgb",
    "smoothstep",
    "CelestexError",
    "RenderContextError",
    "DimensionMismatchError",
    "ColorParseError",
    # Synthesis
    "equirect_to_sphere",
    "pixel_uv",
    "noise3_source",
    "fbm_3d",
    "surface_height",
    "noise_normalize",
    "hash_2d",
    "value_noise_2d",
    "fractal_value_noise_2d",
    "MultiBandPolicy",
    "TwoTonePolicy",
    "FlatPolicy",
    "SURFACE_POLICIES",
    "resolve_policy",
    "resolve_surface_params",
    "classify",
    "FLAT_NORMAL_RGBA",
    "compute_normals",
    "encode_normals",
    "decode_normals",
    "synthesize_normal_map",
    # Generators
    "build_height_and_color",
    "build_terrain_texture",
    "GAS_GIANT_CLASSES",
    "GasGiantClassConfig",
    "generate_gas_giant_texture",
    "generate_star_texture",
    "generate_space_rock_texture",
    "spectral_class_color",
    "rock_base_color",
    "resolve_gas_giant_params",
    "resolve_star_params",
    "resolve_space_rock_params",
    "SurfacePreset",
    "PRESETS",
    "DEFAULT_TEXTURE_SIZE",
    "surface_params_for",
    # Service
    "RenderContext",
    "RenderTarget",
    "available_backends",
    "register_backend",
    "TextureCache",
    "CacheStats",
    "canonical_key",
    "TextureFactory",
]
