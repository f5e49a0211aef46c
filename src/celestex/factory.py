"""TextureFactory — one entry point for every celestial category.

The factory owns one :class:`~cache.TextureCache` per category and a
shared :class:`~render_context.RenderContext`.  Both are injectable so
that a renderer can construct them at start-up, and tests can run
independent factories side by side.

Requests are keyed on their resolved parameters: an omitted colour, its
explicit default and an unusable colour that falls back to that default
all map to the same cached bundle.

Usage
-----
>>> from celestex import TextureFactory, SurfaceParameters, StarParameters
>>> with TextureFactory() as factory:
...     planet = factory.generate(12345, SurfaceParameters("ROCKY", texture_size=64))
...     sun = factory.generate(7, StarParameters("G", texture_size=64))
"""

from __future__ import annotations

import dataclasses
import logging
from typing import Any, Callable, Dict, Mapping, Optional

from .cache import TextureCache, canonical_key
from .classifier import resolve_policy, resolve_surface_params
from .generators import (
    generate_gas_giant_texture,
    generate_space_rock_texture,
    generate_star_texture,
    resolve_gas_giant_params,
    resolve_space_rock_params,
    resolve_star_params,
)
from .models import (
    CelestialCategory,
    GasGiantParameters,
    SpaceRockParameters,
    StarParameters,
    SurfaceParameters,
    TextureBundle,
)
from .render_context import RenderContext
from .terrain import build_terrain_texture

logger = logging.getLogger(__name__)

_CATEGORY_BY_PARAMS: Dict[type, CelestialCategory] = {
    SurfaceParameters: CelestialCategory.TERRESTRIAL,
    GasGiantParameters: CelestialCategory.GAS_GIANT,
    StarParameters: CelestialCategory.STAR,
    SpaceRockParameters: CelestialCategory.SPACE_ROCK,
}


class TextureFactory:
    """Dispatches generation requests and memoises their results.

    Parameters
    ----------
    render_context : RenderContext, optional
        Pooled context for the parametric generators.  A numpy-backed
        context is created when omitted; if that fails the
        :class:`~errors.RenderContextError` propagates and no factory
        is built.
    caches : mapping, optional
        ``{CelestialCategory: TextureCache}``.  Categories left out get a
        fresh cache.
    """

    def __init__(
        self,
        render_context: Optional[RenderContext] = None,
        caches: Optional[Mapping[CelestialCategory, TextureCache]] = None,
    ) -> None:
        self._context = render_context if render_context is not None else RenderContext()
        supplied = dict(caches or {})
        self._caches: Dict[CelestialCategory, TextureCache] = {}
        for category in CelestialCategory:
            cache = supplied.get(category)
            self._caches[category] = cache if cache is not None else TextureCache(name=category.value)
        self._disposed = False

    # ── accessors ───────────────────────────────────────────────────

    @property
    def render_context(self) -> RenderContext:
        return self._context

    def cache(self, category: CelestialCategory) -> TextureCache:
        return self._caches[CelestialCategory(category)]

    @property
    def disposed(self) -> bool:
        return self._disposed

    # ── generation ──────────────────────────────────────────────────

    def _check_open(self) -> None:
        if self._disposed:
            raise RuntimeError("TextureFactory has been disposed")

    def _generate(
        self,
        category: CelestialCategory,
        seed: int,
        params: Any,
        build: Callable[[], TextureBundle],
    ) -> TextureBundle:
        key = canonical_key(category, seed, params)

        def create() -> TextureBundle:
            return dataclasses.replace(build(), key=key)

        return self._caches[category].get_or_create(key, create)

    def generate(self, seed: int, params: Any) -> TextureBundle:
        """Generate (or fetch) the bundle for *params*, dispatching on its type."""
        category = _CATEGORY_BY_PARAMS.get(type(params))
        if category is None:
            raise TypeError(f"Unsupported parameter type: {type(params).__name__}")
        if category is CelestialCategory.TERRESTRIAL:
            return self.generate_terrestrial(seed, params)
        if category is CelestialCategory.GAS_GIANT:
            return self.generate_gas_giant(seed, params)
        if category is CelestialCategory.STAR:
            return self.generate_star(seed, params)
        return self.generate_space_rock(seed, params)

    def generate_terrestrial(self, seed: int, params: SurfaceParameters) -> TextureBundle:
        self._check_open()
        policy = resolve_policy(params)
        resolved = resolve_surface_params(params, policy)
        return self._generate(
            CelestialCategory.TERRESTRIAL, seed, resolved,
            lambda: build_terrain_texture(seed, resolved, policy=policy),
        )

    def generate_gas_giant(self, seed: int, params: GasGiantParameters) -> TextureBundle:
        self._check_open()
        resolved = resolve_gas_giant_params(params)
        return self._generate(
            CelestialCategory.GAS_GIANT, seed, resolved,
            lambda: generate_gas_giant_texture(seed, resolved, self._context),
        )

    def generate_star(self, seed: int, params: StarParameters) -> TextureBundle:
        self._check_open()
        resolved = resolve_star_params(params)
        return self._generate(
            CelestialCategory.STAR, seed, resolved,
            lambda: generate_star_texture(seed, resolved, self._context),
        )

    def generate_space_rock(self, seed: int, params: SpaceRockParameters) -> TextureBundle:
        self._check_open()
        resolved = resolve_space_rock_params(params)
        return self._generate(
            CelestialCategory.SPACE_ROCK, seed, resolved,
            lambda: generate_space_rock_texture(seed, resolved, self._context),
        )

    # ── teardown ────────────────────────────────────────────────────

    def clear(self) -> None:
        """Empty every per-category cache.  Idempotent."""
        for cache in self._caches.values():
            cache.clear()

    def dispose(self) -> None:
        """Clear all caches and release the render context.  Idempotent."""
        if self._disposed:
            return
        for cache in self._caches.values():
            cache.dispose()
        self._context.dispose()
        self._disposed = True
        logger.info("TextureFactory disposed")

    def __enter__(self) -> "TextureFactory":
        return self

    def __exit__(self, *exc) -> None:
        self.dispose()
