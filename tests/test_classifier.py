"""Tests for classifier.py — height → colour policies."""

from __future__ import annotations

import logging

import pytest

from celestex.classifier import (
    NEUTRAL_GREY,
    SURFACE_POLICIES,
    FlatPolicy,
    MultiBandPolicy,
    TwoTonePolicy,
    classify,
    resolve_policy,
    resolve_surface_params,
)
from celestex.colors import lerp_rgb
from celestex.models import PlanetType, SurfaceParameters


# ═══════════════════════════════════════════════════════════════════
# Policy table
# ═══════════════════════════════════════════════════════════════════


class TestPolicyTable:
    def test_every_planet_type_has_a_policy(self):
        for planet_type in PlanetType:
            assert planet_type.value in SURFACE_POLICIES

    @pytest.mark.parametrize("tag", ["ROCKY", "TERRESTRIAL", "BARREN"])
    def test_banded_types(self, tag):
        policy = SURFACE_POLICIES[tag]
        assert isinstance(policy, MultiBandPolicy)
        assert len(policy.stops) == 5

    @pytest.mark.parametrize(
        "tag, threshold, width",
        [("DESERT", 0.5, 0.4), ("ICE", 0.35, 0.3), ("LAVA", 0.6, 0.1), ("OCEAN", 0.3, 0.05)],
    )
    def test_two_tone_types(self, tag, threshold, width):
        policy = SURFACE_POLICIES[tag]
        assert isinstance(policy, TwoTonePolicy)
        assert policy.threshold == threshold
        assert policy.width == width


# ═══════════════════════════════════════════════════════════════════
# Multi-band
# ═══════════════════════════════════════════════════════════════════


class TestMultiBand:
    @pytest.fixture()
    def params(self):
        return SurfaceParameters(PlanetType.ROCKY)

    @pytest.mark.parametrize(
        "height, expected",
        [
            (0.0, (0x20, 0x20, 0x20)),
            (0.1, (0x20, 0x20, 0x20)),
            (0.4, (0x40, 0x40, 0x40)),
            (0.6, (0x60, 0x60, 0x60)),
            (0.8, (0xA0, 0xA0, 0xA0)),
            (0.95, (0xE0, 0xE0, 0xE0)),
            (1.0, (0xE0, 0xE0, 0xE0)),
        ],
    )
    def test_flat_bands(self, params, height, expected):
        assert classify(height, params) == expected

    def test_blends_at_threshold(self, params):
        # midway between #202020 and #404040
        assert classify(0.3, params) == (48, 48, 48)

    def test_monotonic_brightness(self, params):
        policy = resolve_policy(params)
        values = [policy.color_at(i / 100)[0] for i in range(101)]
        assert values == sorted(values)

    def test_caller_colors_override_slots(self):
        params = SurfaceParameters("ROCKY", colors=("#ff0000", None, "#00ff00"))
        policy = resolve_policy(params)
        assert policy.stops[0] == (255, 0, 0)
        assert policy.stops[1] == (0x40, 0x40, 0x40)
        assert policy.stops[2] == (0, 255, 0)


# ═══════════════════════════════════════════════════════════════════
# Two-tone
# ═══════════════════════════════════════════════════════════════════


class TestTwoTone:
    @pytest.mark.parametrize("tag", ["DESERT", "ICE", "LAVA", "OCEAN"])
    def test_default_threshold_is_even_blend(self, tag):
        policy = SURFACE_POLICIES[tag]
        expected = lerp_rgb(policy.color_a, policy.color_b, 0.5)
        assert classify(policy.threshold, SurfaceParameters(tag)) == expected

    @pytest.mark.parametrize(
        "threshold, width",
        [(0.37, 0.1), (0.61, 0.4), (0.1, 0.1), (0.35, 0.3), (0.73, 0.07), (0.2, 0.33)],
    )
    def test_override_threshold_is_even_blend(self, threshold, width):
        params = SurfaceParameters(
            "LAVA", colors=("#000000", "#010101"), threshold=threshold, blend_width=width,
        )
        assert classify(threshold, params) == (1, 1, 1)

    def test_ocean_far_from_threshold(self):
        params = SurfaceParameters(PlanetType.OCEAN)
        assert classify(0.1, params) == (0x1E, 0x90, 0xFF)
        assert classify(0.6, params) == (0x90, 0xEE, 0x90)

    def test_blend_midpoint(self):
        params = SurfaceParameters("OCEAN", colors=("#000000", "#64c832"))
        assert classify(0.3, params) == (50, 100, 25)

    def test_threshold_override(self):
        params = SurfaceParameters("OCEAN", threshold=0.8)
        assert classify(0.6, params) == (0x1E, 0x90, 0xFF)

    def test_zero_width_is_hard_edge(self):
        params = SurfaceParameters("LAVA", colors=("#000000", "#ffffff"), blend_width=0.0)
        assert classify(0.59, params) == (0, 0, 0)
        assert classify(0.61, params) == (255, 255, 255)


# ═══════════════════════════════════════════════════════════════════
# Degraded input
# ═══════════════════════════════════════════════════════════════════


class TestFallbacks:
    def test_unknown_surface_is_grey(self, caplog):
        params = SurfaceParameters("GLASS")
        with caplog.at_level(logging.WARNING, logger="celestex.classifier"):
            policy = resolve_policy(params)
        assert isinstance(policy, FlatPolicy)
        assert classify(0.2, params) == NEUTRAL_GREY
        assert classify(0.9, params) == NEUTRAL_GREY
        assert "GLASS" in caplog.text

    def test_bad_color_uses_default(self, caplog):
        params = SurfaceParameters("ROCKY", colors=("not-a-colour",))
        with caplog.at_level(logging.WARNING, logger="celestex.classifier"):
            assert classify(0.1, params) == (0x20, 0x20, 0x20)
        assert "unusable" in caplog.text

    def test_extra_colors_warn(self, caplog):
        params = SurfaceParameters("DESERT", colors=("#000000", "#111111", "#222222"))
        with caplog.at_level(logging.WARNING, logger="celestex.classifier"):
            policy = resolve_policy(params)
        assert policy.color_a == (0, 0, 0)
        assert policy.color_b == (0x11, 0x11, 0x11)
        assert "only 2 used" in caplog.text

    def test_explicit_policy(self):
        params = SurfaceParameters("ROCKY")
        assert classify(0.5, params, policy=FlatPolicy((1, 2, 3))) == (1, 2, 3)


# ═══════════════════════════════════════════════════════════════════
# Resolved parameters
# ═══════════════════════════════════════════════════════════════════


class TestResolveSurfaceParams:
    def test_banded_defaults_written_in(self):
        resolved = resolve_surface_params(SurfaceParameters("ROCKY", threshold=0.4))
        assert resolved.colors == ("#202020", "#404040", "#606060", "#a0a0a0", "#e0e0e0")
        assert resolved.threshold is None
        assert resolved.blend_width is None

    def test_two_tone_defaults_written_in(self):
        resolved = resolve_surface_params(SurfaceParameters("OCEAN", colors=(None, "#FFF")))
        assert resolved.colors == ("#1e90ff", "#ffffff")
        assert resolved.threshold == 0.3
        assert resolved.blend_width == 0.05

    def test_bad_color_resolves_to_default(self):
        resolved = resolve_surface_params(SurfaceParameters("ICE", colors=("nope",)))
        assert resolved == resolve_surface_params(SurfaceParameters("ICE"))

    def test_unknown_surface_drops_colors(self):
        resolved = resolve_surface_params(SurfaceParameters("GLASS", colors=("#123456",)))
        assert resolved.colors == ()
        assert resolved.surface_type == "GLASS"

    def test_resolution_is_stable(self):
        once = resolve_surface_params(SurfaceParameters("DESERT", colors=((1.0, 0.0, 0.0),)))
        assert resolve_surface_params(once) == once
        assert resolve_policy(once) == resolve_policy(SurfaceParameters("DESERT", colors=("#ff0000",)))
