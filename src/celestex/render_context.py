"""Pooled rendering context for the parametric generators.

A *shader* here is a vectorised fragment function: it receives the
per-texel ``u`` and ``v`` coordinate arrays of a render target and
returns an ``(H, W, 3)`` or ``(H, W, 4)`` float array of colours in
``[0, 1]``.  The context owns one :class:`RenderTarget` per texture
size and reuses it across calls and across generator categories; every
:meth:`RenderContext.render` returns a private copy of the pixels.

The context is an explicit object.  Build one at renderer start-up,
hand it to :class:`~celestex.factory.TextureFactory`, and call
:meth:`RenderContext.dispose` at shutdown.  A lock serialises drawing,
so one context may be shared between threads, though draws never
overlap.

Functions
---------
- :func:`register_backend` — make a backend constructible by name
- :func:`available_backends` — names that can be passed to the context
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional, Protocol

import numpy as np

from .errors import RenderContextError

logger = logging.getLogger(__name__)

Shader = Callable[[np.ndarray, np.ndarray], np.ndarray]


# ═══════════════════════════════════════════════════════════════════
# Render targets and backends
# ═══════════════════════════════════════════════════════════════════


@dataclass
class RenderTarget:
    """A square off-screen surface with precomputed texel-centre UVs."""

    size: int
    u: np.ndarray
    v: np.ndarray
    pixels: np.ndarray
    draws: int = field(default=0)

    def release(self) -> None:
        empty = np.empty((0, 0))
        self.u = empty
        self.v = empty
        self.pixels = np.empty((0, 0, 4), dtype=np.uint8)


class Backend(Protocol):
    name: str

    def create_target(self, size: int) -> RenderTarget:
        ...

    def draw(self, target: RenderTarget, shader: Shader) -> None:
        ...

    def shutdown(self) -> None:
        ...


class NumpyBackend:
    """CPU backend evaluating shaders with numpy."""

    name = "numpy"

    def create_target(self, size: int) -> RenderTarget:
        centres = (np.arange(size, dtype=np.float64) + 0.5) / size
        u, v = np.meshgrid(centres, centres)
        pixels = np.zeros((size, size, 4), dtype=np.uint8)
        return RenderTarget(size=size, u=u, v=v, pixels=pixels)

    def draw(self, target: RenderTarget, shader: Shader) -> None:
        rgba = np.asarray(shader(target.u, target.v), dtype=np.float64)
        size = target.size
        if rgba.shape[:2] != (size, size) or rgba.shape[-1] not in (3, 4):
            raise ValueError(
                f"Shader returned shape {rgba.shape}, expected ({size}, {size}, 3|4)"
            )
        channels = rgba.shape[-1]
        target.pixels[..., :channels] = np.rint(np.clip(rgba, 0.0, 1.0) * 255.0).astype(np.uint8)
        if channels == 3:
            target.pixels[..., 3] = 255
        target.draws += 1

    def shutdown(self) -> None:
        pass


_BACKENDS: Dict[str, Callable[[], Backend]] = {"numpy": NumpyBackend}


def register_backend(name: str, factory: Callable[[], Backend]) -> None:
    """Register *factory* under *name* for :class:`RenderContext`."""
    _BACKENDS[name] = factory


def available_backends() -> List[str]:
    return sorted(_BACKENDS)


# ═══════════════════════════════════════════════════════════════════
# RenderContext
# ═══════════════════════════════════════════════════════════════════


class RenderContext:
    """Shared drawing surface pool.

    Parameters
    ----------
    backend : str
        Backend name; see :func:`available_backends`.
    preallocate : int, optional
        Create the render target for this size up front.

    Raises
    ------
    RenderContextError
        If the backend is unknown or fails to start.
    """

    def __init__(self, backend: str = "numpy", *, preallocate: Optional[int] = None) -> None:
        factory = _BACKENDS.get(backend)
        if factory is None:
            raise RenderContextError(
                f"No rendering backend named {backend!r}. "
                f"Available: {available_backends()}"
            )
        try:
            self._backend = factory()
        except Exception as exc:
            raise RenderContextError(
                f"Failed to initialise rendering backend {backend!r}: {exc}"
            ) from exc

        self._targets: Dict[int, RenderTarget] = {}
        self._lock = threading.Lock()
        self._disposed = False
        logger.info("Render context created (backend=%s)", backend)

        if preallocate is not None:
            with self._lock:
                self._target(preallocate)

    @property
    def backend_name(self) -> str:
        return self._backend.name

    @property
    def disposed(self) -> bool:
        return self._disposed

    @property
    def target_sizes(self) -> List[int]:
        return sorted(self._targets)

    def _target(self, size: int) -> RenderTarget:
        target = self._targets.get(size)
        if target is None:
            target = self._backend.create_target(size)
            self._targets[size] = target
        return target

    def render(self, shader: Shader, size: int) -> np.ndarray:
        """Draw *shader* into the pooled *size*² target and read it back.

        Returns
        -------
        numpy.ndarray
            A fresh ``(size, size, 4)`` uint8 RGBA array.
        """
        if size < 1:
            raise ValueError("size must be >= 1")
        with self._lock:
            if self._disposed:
                raise RenderContextError("Render context has been disposed")
            target = self._target(size)
            self._backend.draw(target, shader)
            return target.pixels.copy()

    def dispose(self) -> None:
        """Release every render target and shut the backend down.  Idempotent."""
        with self._lock:
            if self._disposed:
                return
            for target in self._targets.values():
                target.release()
            self._targets.clear()
            self._backend.shutdown()
            self._disposed = True
        logger.info("Render context disposed")

    def __enter__(self) -> "RenderContext":
        return self

    def __exit__(self, *exc) -> None:
        self.dispose()
