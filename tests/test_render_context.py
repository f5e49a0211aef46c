"""Tests for render_context.py — pooled shader rendering."""

from __future__ import annotations

import logging
import threading

import numpy as np
import pytest

from celestex import render_context
from celestex.errors import RenderContextError
from celestex.render_context import RenderContext, available_backends


def _uv_shader(u, v):
    return np.stack([u, v, np.zeros_like(u)], axis=-1)


@pytest.fixture()
def ctx():
    context = RenderContext()
    yield context
    context.dispose()


# ═══════════════════════════════════════════════════════════════════
# Construction
# ═══════════════════════════════════════════════════════════════════


class TestConstruction:
    def test_default_backend(self, ctx):
        assert ctx.backend_name == "numpy"
        assert "numpy" in available_backends()
        assert not ctx.disposed

    def test_unknown_backend(self):
        with pytest.raises(RenderContextError, match="webgl"):
            RenderContext("webgl")

    def test_failing_backend(self, monkeypatch):
        def broken():
            raise OSError("no display")

        monkeypatch.setitem(render_context._BACKENDS, "broken", broken)
        with pytest.raises(RenderContextError, match="no display"):
            RenderContext("broken")

    def test_error_is_runtime_error(self):
        with pytest.raises(RuntimeError):
            RenderContext("missing")

    def test_preallocate(self):
        with RenderContext(preallocate=32) as context:
            assert context.target_sizes == [32]

    def test_logs_creation(self, caplog):
        with caplog.at_level(logging.INFO, logger="celestex.render_context"):
            RenderContext().dispose()
        assert "created" in caplog.text
        assert "disposed" in caplog.text


# ═══════════════════════════════════════════════════════════════════
# Rendering
# ═══════════════════════════════════════════════════════════════════


class TestRender:
    def test_output_shape(self, ctx):
        out = ctx.render(_uv_shader, 8)
        assert out.shape == (8, 8, 4)
        assert out.dtype == np.uint8

    def test_texel_centres(self, ctx):
        out = ctx.render(_uv_shader, 4)
        # u = (0 + 0.5) / 4 = 0.125 → 31.875
        assert out[0, 0, 0] == 32
        assert out[0, 3, 0] == 223
        assert out[3, 0, 1] == 223
        assert out[0, 0, 3] == 255

    def test_rgba_shader_keeps_alpha(self, ctx):
        out = ctx.render(lambda u, v: np.full(u.shape + (4,), 0.5), 2)
        assert np.all(out[..., 3] == 128)

    def test_clamps_out_of_range(self, ctx):
        out = ctx.render(lambda u, v: np.full(u.shape + (3,), 2.0), 2)
        assert np.all(out == 255)
        out = ctx.render(lambda u, v: np.full(u.shape + (3,), -1.0), 2)
        assert np.all(out[..., :3] == 0)

    def test_returns_copy(self, ctx):
        first = ctx.render(lambda u, v: np.zeros(u.shape + (3,)), 4)
        ctx.render(lambda u, v: np.ones(u.shape + (3,)), 4)
        assert np.all(first[..., :3] == 0)

    def test_targets_are_pooled(self, ctx):
        ctx.render(_uv_shader, 8)
        ctx.render(_uv_shader, 8)
        ctx.render(_uv_shader, 16)
        assert ctx.target_sizes == [8, 16]
        assert ctx._targets[8].draws == 2

    def test_bad_shader_shape(self, ctx):
        with pytest.raises(ValueError):
            ctx.render(lambda u, v: np.zeros((3, 3, 3)), 4)

    def test_bad_size(self, ctx):
        with pytest.raises(ValueError):
            ctx.render(_uv_shader, 0)

    def test_concurrent_renders(self, ctx):
        results = []

        def worker(level):
            results.append((level, ctx.render(lambda u, v: np.full(u.shape + (3,), level), 16)))

        threads = [threading.Thread(target=worker, args=(i / 10,)) for i in range(8)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()
        assert len(results) == 8
        for level, out in results:
            assert np.all(out[..., 0] == int(np.rint(level * 255)))


# ═══════════════════════════════════════════════════════════════════
# Disposal
# ═══════════════════════════════════════════════════════════════════


class TestDispose:
    def test_idempotent(self):
        context = RenderContext()
        context.render(_uv_shader, 4)
        context.dispose()
        context.dispose()
        assert context.disposed
        assert context.target_sizes == []

    def test_render_after_dispose(self):
        context = RenderContext()
        context.dispose()
        with pytest.raises(RenderContextError):
            context.render(_uv_shader, 4)
