"""Memoisation of generated texture bundles.

Keys are canonical JSON serialisations of ``(category, seed, params)``.
Canonicalisation normalises colours to ``#rrggbb`` and enum members to
their values, so ``"#FFF"``, ``0xffffff`` and ``(1.0, 1.0, 1.0)`` all
produce the same key.

:class:`TextureCache` computes each key at most once until it is
cleared, including when several threads ask for the same key at the
same time.
"""

from __future__ import annotations

import dataclasses
import json
import logging
import threading
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Dict, Iterator, List, Optional

from .colors import parse_color, to_hex
from .errors import ColorParseError
from .models import TextureBundle

logger = logging.getLogger(__name__)

ReleaseHook = Callable[[TextureBundle], None]


# ═══════════════════════════════════════════════════════════════════
# Canonical keys
# ═══════════════════════════════════════════════════════════════════


def _canonical_color(value: Any) -> Any:
    if value is None:
        return None
    try:
        return to_hex(parse_color(value))
    except ColorParseError:
        # Unusable colours still key distinctly; generation degrades them.
        return f"invalid:{value!r}"


def _is_color_field(name: str) -> bool:
    return name == "colors" or name.endswith("_color")


def _canonical_value(name: str, type_hint: str, value: Any) -> Any:
    if name == "colors":
        return [_canonical_color(c) for c in value]
    if _is_color_field(name):
        return _canonical_color(value)
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, bool) or value is None:
        return value
    if isinstance(value, (int, float)) and "float" in type_hint:
        return float(value)
    return value


def canonical_params(params: Any) -> Dict[str, Any]:
    """Flatten a parameter dataclass into a JSON-ready canonical dict."""
    if not dataclasses.is_dataclass(params):
        raise TypeError(f"Expected a parameter dataclass, got {type(params).__name__}")
    out: Dict[str, Any] = {}
    for f in dataclasses.fields(params):
        type_hint = f.type if isinstance(f.type, str) else getattr(f.type, "__name__", "")
        out[f.name] = _canonical_value(f.name, type_hint, getattr(params, f.name))
    return out


def canonical_key(category: str, seed: int, params: Any) -> str:
    """Stable cache key for one generation request."""
    if isinstance(category, Enum):
        category = category.value
    payload = {
        "category": category,
        "seed": int(seed),
        "params": canonical_params(params),
    }
    return json.dumps(payload, sort_keys=True, separators=(",", ":"))


# ═══════════════════════════════════════════════════════════════════
# Cache
# ═══════════════════════════════════════════════════════════════════


@dataclass
class CacheStats:
    hits: int = 0
    misses: int = 0
    size: int = 0
    nbytes: int = 0


class TextureCache:
    """Key → :class:`TextureBundle` store with single-flight creation.

    Parameters
    ----------
    name : str
        Label used in log messages.

    Release hooks registered with :meth:`add_release_hook` are called for
    every bundle dropped by :meth:`clear`, which is where a renderer
    frees GPU textures it built from the buffers.
    """

    def __init__(self, name: str = "textures") -> None:
        self.name = name
        self._entries: Dict[str, TextureBundle] = {}
        self._key_locks: Dict[str, threading.Lock] = {}
        self._lock = threading.Lock()
        self._release_hooks: List[ReleaseHook] = []
        self._hits = 0
        self._misses = 0

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: object) -> bool:
        return key in self._entries

    def __iter__(self) -> Iterator[str]:
        return iter(list(self._entries))

    def add_release_hook(self, hook: ReleaseHook) -> None:
        self._release_hooks.append(hook)

    def get(self, key: str) -> Optional[TextureBundle]:
        return self._entries.get(key)

    def get_or_create(self, key: str, factory_fn: Callable[[], TextureBundle]) -> TextureBundle:
        """Return the bundle for *key*, calling *factory_fn* only on a miss.

        Concurrent callers with the same key wait for the first one's
        result instead of computing their own.
        """
        with self._lock:
            bundle = self._entries.get(key)
            if bundle is not None:
                self._hits += 1
                logger.debug("[%s] cache hit", self.name)
                return bundle
            key_lock = self._key_locks.setdefault(key, threading.Lock())

        with key_lock:
            with self._lock:
                bundle = self._entries.get(key)
                if bundle is not None:
                    self._hits += 1
                    return bundle
            logger.debug("[%s] cache miss; generating", self.name)
            bundle = factory_fn()
            # On failure the key lock stays registered, so waiters holding
            # it and later callers retry one at a time.
            with self._lock:
                self._entries[key] = bundle
                self._misses += 1
                if self._key_locks.get(key) is key_lock:
                    del self._key_locks[key]
        return bundle

    def stats(self) -> CacheStats:
        with self._lock:
            return CacheStats(
                hits=self._hits,
                misses=self._misses,
                size=len(self._entries),
                nbytes=sum(b.nbytes for b in self._entries.values()),
            )

    def clear(self) -> None:
        """Drop every entry, running release hooks on each.  Idempotent."""
        with self._lock:
            dropped = list(self._entries.values())
            self._entries.clear()
        for bundle in dropped:
            for hook in self._release_hooks:
                hook(bundle)
        if dropped:
            logger.debug("[%s] cleared %d bundles", self.name, len(dropped))

    def dispose(self) -> None:
        """Clear the cache and forget its release hooks.  Idempotent."""
        self.clear()
        self._release_hooks.clear()
