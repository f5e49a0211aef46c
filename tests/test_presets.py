"""Tests for presets.py — per-planet-type surface defaults."""

from __future__ import annotations

import pytest

from celestex.models import PlanetType
from celestex.presets import DEFAULT_TEXTURE_SIZE, PRESETS, surface_params_for


def test_every_planet_type_has_preset():
    assert set(PRESETS) == {t.value for t in PlanetType}


@pytest.mark.parametrize("planet_type", list(PlanetType))
def test_params_carry_preset(planet_type):
    params = surface_params_for(planet_type)
    preset = PRESETS[planet_type.value]
    assert params.surface_type == planet_type.value
    assert params.octaves == preset.octaves
    assert params.normal_strength == preset.normal_strength
    assert params.texture_size == DEFAULT_TEXTURE_SIZE


def test_accepts_string_tag():
    assert surface_params_for("LAVA").normal_strength == 1.8


def test_overrides():
    params = surface_params_for(PlanetType.OCEAN, threshold=0.45, texture_size=64, colors=("#003366",))
    assert params.threshold == 0.45
    assert params.texture_size == 64
    assert params.colors == ("#003366",)
    assert params.octaves == PRESETS["OCEAN"].octaves


def test_unknown_type_gets_neutral_preset():
    params = surface_params_for("GLASS")
    assert params.surface_type == "GLASS"
    assert params.octaves == 4
