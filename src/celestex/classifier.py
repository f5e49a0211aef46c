"""Height → colour classification for noise-driven surfaces.

Each surface type maps to one blend *policy*:

- :class:`MultiBandPolicy` — five ordered stops at thresholds
  ``0, .3, .5, .7, .9``; interior thresholds blend over a ±0.05 band
  with a smoothstep ease, the ends are flat.
- :class:`TwoTonePolicy` — a single smoothstep transition between two
  colours centred on a type-specific threshold.
- :class:`FlatPolicy` — one colour everywhere; the fallback for
  unrecognised surface tags.

:data:`SURFACE_POLICIES` holds the default policy for each tag.  Adding
a surface type means adding one entry there.

Functions
---------
- :func:`resolve_policy` — defaults + caller colours → concrete policy
- :func:`classify` — ``(height, params)`` → ``(R, G, B)``
- :func:`resolve_surface_params` — params with every colour default filled in
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from typing import Dict, Optional, Sequence, Tuple, Union

from .colors import RGB, ColorLike, lerp_rgb, parse_color, smoothstep, to_hex
from .errors import ColorParseError
from .models import PlanetType, SurfaceParameters

logger = logging.getLogger(__name__)

NEUTRAL_GREY: RGB = (128, 128, 128)


# ═══════════════════════════════════════════════════════════════════
# Policies
# ═══════════════════════════════════════════════════════════════════


@dataclass(frozen=True)
class MultiBandPolicy:
    """Banded gradient over ordered colour stops.

    ``stops[i]`` is the flat colour above ``thresholds[i]``; crossing an
    interior threshold blends from ``stops[i-1]`` to ``stops[i]`` over
    ``[threshold − band/2, threshold + band/2]``.
    """

    stops: Tuple[RGB, ...]
    thresholds: Tuple[float, ...] = (0.0, 0.3, 0.5, 0.7, 0.9)
    band: float = 0.1

    def color_at(self, height: float) -> RGB:
        half = self.band / 2.0
        for i in range(1, len(self.thresholds)):
            t = self.thresholds[i]
            if height < t - half:
                return self.stops[i - 1]
            if height < t + half:
                factor = smoothstep(t - half, t + half, height)
                return lerp_rgb(self.stops[i - 1], self.stops[i], factor)
        return self.stops[-1]


@dataclass(frozen=True)
class TwoTonePolicy:
    """``color_a`` below *threshold*, ``color_b`` above, eased over *width*."""

    color_a: RGB
    color_b: RGB
    threshold: float
    width: float

    def color_at(self, height: float) -> RGB:
        if self.width <= 0.0:
            factor = 0.0 if height < self.threshold else 1.0
        else:
            # centred on the threshold so that t is exactly 0.5 there
            t = 0.5 + (height - self.threshold) / self.width
            t = max(0.0, min(1.0, t))
            factor = t * t * (3.0 - 2.0 * t)
        return lerp_rgb(self.color_a, self.color_b, factor)


@dataclass(frozen=True)
class FlatPolicy:
    color: RGB = NEUTRAL_GREY

    def color_at(self, height: float) -> RGB:
        return self.color


BlendPolicy = Union[MultiBandPolicy, TwoTonePolicy, FlatPolicy]


def _multi_band(*hexes: str) -> MultiBandPolicy:
    return MultiBandPolicy(stops=tuple(parse_color(h) for h in hexes))


def _two_tone(a: str, b: str, threshold: float, width: float) -> TwoTonePolicy:
    return TwoTonePolicy(parse_color(a), parse_color(b), threshold, width)


_GREY_BANDS = ("#202020", "#404040", "#606060", "#a0a0a0", "#e0e0e0")

SURFACE_POLICIES: Dict[str, BlendPolicy] = {
    PlanetType.ROCKY.value: _multi_band(*_GREY_BANDS),
    PlanetType.TERRESTRIAL.value: _multi_band(*_GREY_BANDS),
    PlanetType.BARREN.value: _multi_band(*_GREY_BANDS),
    # (below, above, threshold, width)
    PlanetType.DESERT.value: _two_tone("#a0522d", "#c19a6b", 0.5, 0.4),
    PlanetType.ICE.value: _two_tone("#87ceeb", "#e0f0ff", 0.35, 0.3),
    PlanetType.LAVA.value: _two_tone("#303030", "#ff4500", 0.6, 0.1),
    PlanetType.OCEAN.value: _two_tone("#1e90ff", "#90ee90", 0.3, 0.05),
}
"""Default policy per surface-type tag."""


# ═══════════════════════════════════════════════════════════════════
# Resolution
# ═══════════════════════════════════════════════════════════════════


def _merge_colors(
    supplied: Sequence[Optional[ColorLike]],
    defaults: Sequence[RGB],
    surface_type: str,
) -> Tuple[RGB, ...]:
    merged = list(defaults)
    for i, raw in enumerate(supplied[: len(defaults)]):
        if raw is None:
            continue
        try:
            merged[i] = parse_color(raw)
        except ColorParseError as exc:
            logger.warning(
                "Surface %s: colour %d unusable (%s); using default %s",
                surface_type, i, exc, defaults[i],
            )
    if len(supplied) > len(defaults):
        logger.warning(
            "Surface %s: %d colours supplied, only %d used",
            surface_type, len(supplied), len(defaults),
        )
    return tuple(merged)


def resolve_policy(params: SurfaceParameters) -> BlendPolicy:
    """Build the concrete policy for *params*.

    Caller colours and two-tone overrides are laid over the defaults in
    :data:`SURFACE_POLICIES`.  Bad colour data is replaced by the
    default for that slot with a logged warning; an unknown surface tag
    yields a flat grey policy.  Never raises.
    """
    base = SURFACE_POLICIES.get(params.surface_type)
    if base is None:
        logger.warning(
            "Unknown surface type %r; rendering flat grey", params.surface_type
        )
        return FlatPolicy(NEUTRAL_GREY)

    if isinstance(base, MultiBandPolicy):
        stops = _merge_colors(params.colors, base.stops, params.surface_type)
        return replace(base, stops=stops)

    if isinstance(base, TwoTonePolicy):
        color_a, color_b = _merge_colors(
            params.colors, (base.color_a, base.color_b), params.surface_type
        )
        threshold = base.threshold if params.threshold is None else float(params.threshold)
        width = base.width if params.blend_width is None else float(params.blend_width)
        return TwoTonePolicy(color_a, color_b, threshold, max(0.0, width))

    return base


def classify(
    height: float,
    params: SurfaceParameters,
    *,
    policy: Optional[BlendPolicy] = None,
) -> RGB:
    """Colour for *height* on a surface described by *params*.

    Pass a pre-resolved *policy* when classifying many heights for the
    same surface.
    """
    if policy is None:
        policy = resolve_policy(params)
    return policy.color_at(height)


def resolve_surface_params(
    params: SurfaceParameters,
    policy: Optional[BlendPolicy] = None,
) -> SurfaceParameters:
    """Return *params* with the colours and blend settings of its policy.

    Two parameter sets that resolve to the same policy render the same
    texture and produce the same result here, so they share a cache key.
    """
    if policy is None:
        policy = resolve_policy(params)
    if isinstance(policy, MultiBandPolicy):
        return replace(
            params,
            colors=tuple(to_hex(c) for c in policy.stops),
            threshold=None,
            blend_width=None,
        )
    if isinstance(policy, TwoTonePolicy):
        return replace(
            params,
            colors=(to_hex(policy.color_a), to_hex(policy.color_b)),
            threshold=float(policy.threshold),
            blend_width=float(policy.width),
        )
    return replace(params, colors=(), threshold=None, blend_width=None)
