"""Per-planet-type surface presets.

Usage
-----
>>> from celestex.presets import surface_params_for
>>> params = surface_params_for("LAVA", texture_size=512)
>>> params.normal_strength
1.8

To override noise controls or colours::

    surface_params_for(PlanetType.OCEAN, threshold=0.45, colors=("#003366",))
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Dict, Union

from .models import PlanetType, SurfaceParameters

DEFAULT_TEXTURE_SIZE = 256


@dataclass(frozen=True)
class SurfacePreset:
    """Noise and bump defaults for one planet type.

    Attributes
    ----------
    normal_strength : float
        Normal-map bump strength.
    octaves, persistence, lacunarity, scale : noise controls
    """

    normal_strength: float = 1.5
    octaves: int = 4
    persistence: float = 0.5
    lacunarity: float = 2.0
    scale: float = 1.0


ROCKY = SurfacePreset(normal_strength=2.0, octaves=6)
BARREN = SurfacePreset(normal_strength=2.0, octaves=5, persistence=0.55)
TERRESTRIAL = SurfacePreset(normal_strength=1.5, octaves=6, scale=1.5)
DESERT = SurfacePreset(normal_strength=1.5, octaves=4, scale=2.0)
ICE = SurfacePreset(normal_strength=1.2, octaves=4, persistence=0.45)
LAVA = SurfacePreset(normal_strength=1.8, octaves=5, scale=1.5)
OCEAN = SurfacePreset(normal_strength=1.5, octaves=5)

PRESETS: Dict[str, SurfacePreset] = {
    PlanetType.ROCKY.value: ROCKY,
    PlanetType.BARREN.value: BARREN,
    PlanetType.TERRESTRIAL.value: TERRESTRIAL,
    PlanetType.DESERT.value: DESERT,
    PlanetType.ICE.value: ICE,
    PlanetType.LAVA.value: LAVA,
    PlanetType.OCEAN.value: OCEAN,
}


def surface_params_for(
    planet_type: Union[PlanetType, str],
    **overrides,
) -> SurfaceParameters:
    """Build :class:`SurfaceParameters` from the preset for *planet_type*.

    Unknown planet types get a neutral :class:`SurfacePreset`.  Keyword
    *overrides* replace any field of the result.
    """
    tag = planet_type.value if isinstance(planet_type, PlanetType) else str(planet_type)
    preset = PRESETS.get(tag, SurfacePreset())
    params = SurfaceParameters(
        surface_type=tag,
        octaves=preset.octaves,
        persistence=preset.persistence,
        lacunarity=preset.lacunarity,
        scale=preset.scale,
        normal_strength=preset.normal_strength,
        texture_size=DEFAULT_TEXTURE_SIZE,
    )
    return replace(params, **overrides) if overrides else params
