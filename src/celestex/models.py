"""Core data types: celestial classifications, parameter sets, texture bundles.

Parameter objects are frozen dataclasses — once handed to a generation
call they cannot change, which is what lets the cache key on them.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Optional, Tuple

import numpy as np

from .colors import ColorLike

if TYPE_CHECKING:
    from PIL import Image


# ═══════════════════════════════════════════════════════════════════
# Classifications
# ═══════════════════════════════════════════════════════════════════


class CelestialCategory(str, Enum):
    TERRESTRIAL = "terrestrial"
    GAS_GIANT = "gas-giant"
    STAR = "star"
    SPACE_ROCK = "space-rock"


class PlanetType(str, Enum):
    """Surface-type tags understood by the colour classifier."""

    BARREN = "BARREN"
    ROCKY = "ROCKY"
    TERRESTRIAL = "TERRESTRIAL"
    DESERT = "DESERT"
    ICE = "ICE"
    LAVA = "LAVA"
    OCEAN = "OCEAN"


class GasGiantClass(str, Enum):
    """Sudarsky-style gas giant classes."""

    CLASS_I = "CLASS_I"      # ammonia clouds (Jupiter)
    CLASS_II = "CLASS_II"    # water clouds (Saturn)
    CLASS_III = "CLASS_III"  # cloudless ice giant
    CLASS_IV = "CLASS_IV"    # alkali metals
    CLASS_V = "CLASS_V"      # silicate clouds


class SpectralClass(str, Enum):
    O = "O"
    B = "B"
    A = "A"
    F = "F"
    G = "G"
    K = "K"
    M = "M"
    L = "L"
    T = "T"
    Y = "Y"


class RockyType(str, Enum):
    ICE = "ICE"
    METALLIC = "METALLIC"
    LIGHT_ROCK = "LIGHT_ROCK"
    DARK_ROCK = "DARK_ROCK"
    ICE_DUST = "ICE_DUST"
    DUST = "DUST"


def _check_size(texture_size: int) -> None:
    if texture_size < 1:
        raise ValueError("texture_size must be >= 1")


# ═══════════════════════════════════════════════════════════════════
# Parameter sets
# ═══════════════════════════════════════════════════════════════════


@dataclass(frozen=True)
class SurfaceParameters:
    """Declarative description of a noise-driven (terrestrial-like) surface.

    Attributes
    ----------
    surface_type : str
        Surface-type tag, normally a :class:`PlanetType` value.  Unknown
        tags are accepted and render flat grey.
    colors : tuple
        Colour stops.  Multi-band types read five stops (lowest first);
        two-tone types read ``(below_threshold, above_threshold)``.
        Missing or unparseable entries fall back to per-type defaults.
    threshold, blend_width : float, optional
        Two-tone overrides (e.g. an ocean's land ratio).
    octaves, persistence, lacunarity, scale : noise controls
    normal_strength : float
        Slope multiplier for normal synthesis.
    texture_size : int
        Width and height of every produced buffer.
    """

    surface_type: str = PlanetType.ROCKY.value
    colors: Tuple[Optional[ColorLike], ...] = ()
    threshold: Optional[float] = None
    blend_width: Optional[float] = None
    octaves: int = 4
    persistence: float = 0.5
    lacunarity: float = 2.0
    scale: float = 1.0
    normal_strength: float = 1.0
    texture_size: int = 256

    def __post_init__(self) -> None:
        if isinstance(self.surface_type, Enum):
            object.__setattr__(self, "surface_type", self.surface_type.value)
        object.__setattr__(self, "colors", tuple(self.colors))
        _check_size(self.texture_size)
        if self.octaves < 0:
            raise ValueError("octaves must be >= 0")


@dataclass(frozen=True)
class GasGiantParameters:
    """Banded gas giant.  Colours default to the class palette."""

    gas_giant_class: GasGiantClass = GasGiantClass.CLASS_I
    base_color: Optional[ColorLike] = None
    secondary_color: Optional[ColorLike] = None
    storm_color: Optional[ColorLike] = None
    texture_size: int = 256

    def __post_init__(self) -> None:
        object.__setattr__(self, "gas_giant_class", GasGiantClass(self.gas_giant_class))
        _check_size(self.texture_size)


@dataclass(frozen=True)
class StarParameters:
    """Granulated stellar photosphere.  Colour defaults to the spectral class."""

    spectral_class: SpectralClass = SpectralClass.G
    base_color: Optional[ColorLike] = None
    surface_intensity: float = 0.8
    spot_intensity: float = 0.5
    texture_size: int = 256

    def __post_init__(self) -> None:
        object.__setattr__(self, "spectral_class", SpectralClass(self.spectral_class))
        _check_size(self.texture_size)


@dataclass(frozen=True)
class SpaceRockParameters:
    """Asteroid, comet nucleus or ring particle surface."""

    rocky_type: RockyType = RockyType.LIGHT_ROCK
    base_color: Optional[ColorLike] = None
    feature_color: ColorLike = "#555555"
    roughness: float = 0.8
    metalness: Optional[float] = None
    texture_size: int = 256

    def __post_init__(self) -> None:
        object.__setattr__(self, "rocky_type", RockyType(self.rocky_type))
        _check_size(self.texture_size)
        if self.metalness is None:
            metal = 0.6 if self.rocky_type is RockyType.METALLIC else 0.1
            object.__setattr__(self, "metalness", metal)


# ═══════════════════════════════════════════════════════════════════
# Texture bundle
# ═══════════════════════════════════════════════════════════════════


@dataclass(frozen=True, eq=False)
class TextureBundle:
    """Generated buffers for one body.

    ``color_buffer`` and ``normal_buffer`` are ``(size, size, 4)`` uint8
    RGBA arrays; ``height_grid`` is ``(size, size)`` float64 in ``[0, 1]``.
    All arrays are made read-only on construction.
    """

    color_buffer: np.ndarray
    normal_buffer: np.ndarray
    height_grid: np.ndarray
    emissive_buffer: Optional[np.ndarray] = None
    category: CelestialCategory = CelestialCategory.TERRESTRIAL
    key: Optional[str] = field(default=None)

    def __post_init__(self) -> None:
        size = self.height_grid.shape[0]
        for name in ("color_buffer", "normal_buffer", "emissive_buffer"):
            arr = getattr(self, name)
            if arr is not None and arr.shape[:2] != (size, size):
                raise ValueError(
                    f"{name} has shape {arr.shape[:2]}, expected {(size, size)}"
                )
        for arr in (self.color_buffer, self.normal_buffer, self.height_grid, self.emissive_buffer):
            if arr is not None:
                arr.setflags(write=False)

    @property
    def size(self) -> int:
        return int(self.height_grid.shape[0])

    @property
    def nbytes(self) -> int:
        total = self.color_buffer.nbytes + self.normal_buffer.nbytes + self.height_grid.nbytes
        if self.emissive_buffer is not None and self.emissive_buffer is not self.color_buffer:
            total += self.emissive_buffer.nbytes
        return total

    def to_images(self) -> dict[str, "Image.Image"]:
        """Return Pillow RGBA images of the colour, normal and emissive buffers."""
        from PIL import Image

        images = {
            "color": Image.fromarray(np.ascontiguousarray(self.color_buffer)),
            "normal": Image.fromarray(np.ascontiguousarray(self.normal_buffer)),
        }
        if self.emissive_buffer is not None:
            images["emissive"] = Image.fromarray(
                np.ascontiguousarray(self.emissive_buffer)
            )
        return images
