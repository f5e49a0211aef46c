"""Tests for noise.py — seeded octave noise and hashed value noise."""

from __future__ import annotations

import math

import numpy as np
import pytest

from celestex.noise import (
    fbm_3d,
    fractal_value_noise_2d,
    hash_2d,
    noise3_source,
    normalize,
    surface_height,
    value_noise_2d,
)
from celestex.projection import equirect_to_sphere


def _sphere_points(n: int = 12):
    return [equirect_to_sphere(i / n, j / n) for i in range(n + 1) for j in range(n + 1)]


# ═══════════════════════════════════════════════════════════════════
# fbm_3d
# ═══════════════════════════════════════════════════════════════════


class TestFBM3D:
    def test_returns_float(self):
        assert isinstance(fbm_3d(0.1, 0.2, 0.3), float)

    def test_output_range(self):
        vals = [fbm_3d(x, y, z, octaves=6) for x, y, z in _sphere_points()]
        assert all(-1.01 <= v <= 1.01 for v in vals), (
            f"min={min(vals):.4f}, max={max(vals):.4f}"
        )

    def test_determinism(self):
        assert fbm_3d(0.3, -0.4, 0.5, seed=99) == fbm_3d(0.3, -0.4, 0.5, seed=99)

    def test_different_seeds(self):
        a = [fbm_3d(x, y, z, seed=1) for x, y, z in _sphere_points(4)]
        b = [fbm_3d(x, y, z, seed=2) for x, y, z in _sphere_points(4)]
        assert a != b

    def test_zero_octaves_returns_zero(self):
        assert fbm_3d(0.5, 0.5, 0.5, octaves=0) == 0.0

    def test_single_octave_is_base_noise(self):
        noise3 = noise3_source(7)
        assert fbm_3d(0.2, 0.4, 0.6, octaves=1, frequency=2.0, seed=7) == pytest.approx(
            noise3(0.4, 0.8, 1.2)
        )

    def test_prebuilt_source_matches_seed(self):
        noise3 = noise3_source(31)
        assert fbm_3d(0.1, 0.9, 0.3, seed=31) == fbm_3d(0.1, 0.9, 0.3, noise3=noise3)

    def test_seeds_do_not_interfere(self):
        """Sampling another seed in between must not change results."""
        before = fbm_3d(0.6, 0.1, 0.2, seed=5)
        fbm_3d(0.6, 0.1, 0.2, seed=6)
        assert fbm_3d(0.6, 0.1, 0.2, seed=5) == before


class TestSurfaceHeight:
    @pytest.mark.parametrize("octaves", [1, 2, 4, 8])
    def test_bounded(self, octaves):
        for x, y, z in _sphere_points(8):
            h = surface_height(x, y, z, octaves=octaves, seed=12345)
            assert 0.0 <= h <= 1.0

    def test_is_remapped_fbm(self):
        raw = fbm_3d(0.3, 0.3, 0.9, seed=4)
        assert surface_height(0.3, 0.3, 0.9, seed=4) == pytest.approx((raw + 1.0) / 2.0)


# ═══════════════════════════════════════════════════════════════════
# normalize
# ═══════════════════════════════════════════════════════════════════


class TestNormalize:
    def test_default_range(self):
        assert normalize(-1.0) == 0.0
        assert normalize(0.0) == 0.5
        assert normalize(1.0) == 1.0

    def test_clamps(self):
        assert normalize(-3.0) == 0.0
        assert normalize(2.5) == 1.0

    def test_custom_range(self):
        assert normalize(5.0, src_min=0.0, src_max=10.0, dst_min=100.0, dst_max=200.0) == 150.0

    def test_degenerate_source(self):
        assert normalize(3.0, src_min=1.0, src_max=1.0) == 0.5


# ═══════════════════════════════════════════════════════════════════
# 2-D value noise
# ═══════════════════════════════════════════════════════════════════


class TestHash2D:
    def test_range(self):
        x, y = np.meshgrid(np.linspace(-50, 50, 64), np.linspace(-50, 50, 64))
        h = hash_2d(x, y)
        assert h.min() >= 0.0
        assert h.max() < 1.0

    def test_known_value(self):
        expected = math.sin(12.9898 + 78.233) * 43758.5453
        expected -= math.floor(expected)
        assert float(hash_2d(1.0, 1.0)) == pytest.approx(expected, abs=1e-6)


class TestValueNoise:
    def test_range(self):
        x, y = np.meshgrid(np.linspace(0, 12, 50), np.linspace(0, 12, 50))
        n = value_noise_2d(x, y, seed=3.0)
        assert n.min() >= 0.0
        assert n.max() <= 1.0

    def test_lattice_points_hit_hash(self):
        n = value_noise_2d(np.array([2.0]), np.array([3.0]))
        expected = math.sin(2.0 + 3.0 * 57.0) * 43758.5453123
        expected -= math.floor(expected)
        assert float(n[0]) == pytest.approx(expected, abs=1e-6)

    def test_period_wraps_horizontally(self):
        y = np.linspace(0.0, 4.0, 17)
        left = value_noise_2d(np.zeros_like(y), y, seed=1.0, period=8)
        right = value_noise_2d(np.full_like(y, 8.0), y, seed=1.0, period=8)
        np.testing.assert_allclose(left, right)

    def test_seed_changes_field(self):
        x, y = np.meshgrid(np.linspace(0, 5, 20), np.linspace(0, 5, 20))
        assert not np.allclose(value_noise_2d(x, y, seed=0.0), value_noise_2d(x, y, seed=9.0))


class TestFractalValueNoise:
    def test_range(self):
        x, y = np.meshgrid(np.linspace(0, 10, 40), np.linspace(0, 10, 40))
        n = fractal_value_noise_2d(x, y, seed=2.0)
        assert n.shape == (40, 40)
        assert n.min() >= 0.0
        assert n.max() <= 0.9375 + 1e-12

    def test_periodic_version_wraps(self):
        y = np.linspace(0.0, 3.0, 9)
        left = fractal_value_noise_2d(np.zeros_like(y), y, period=4)
        right = fractal_value_noise_2d(np.full_like(y, 4.0), y, period=4)
        np.testing.assert_allclose(left, right)
