"""Celestex command-line interface — preview generated textures as PNGs."""

from __future__ import annotations

import argparse
import logging
from pathlib import Path
from typing import List, Optional

from .factory import TextureFactory
from .models import (
    GasGiantClass,
    GasGiantParameters,
    PlanetType,
    RockyType,
    SpaceRockParameters,
    SpectralClass,
    StarParameters,
)
from .presets import surface_params_for


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Celestex texture previews")
    parser.add_argument("--verbose", "-v", action="store_true")
    sub = parser.add_subparsers(dest="command", required=True)

    def common(p: argparse.ArgumentParser) -> None:
        p.add_argument("--seed", type=int, default=12345)
        p.add_argument("--size", type=int, default=256)
        p.add_argument("--out", dest="output_dir", default="exports")

    terrain = sub.add_parser("terrain", help="Noise-driven planet surface")
    common(terrain)
    terrain.add_argument("--type", dest="planet_type", default=PlanetType.ROCKY.value,
                         choices=[t.value for t in PlanetType])
    terrain.add_argument("--octaves", type=int)
    terrain.add_argument("--scale", type=float)
    terrain.add_argument("--color", dest="colors", action="append",
                         help="Colour stop (repeatable, lowest first)")

    gas = sub.add_parser("gas-giant", help="Banded gas giant")
    common(gas)
    gas.add_argument("--class", dest="gas_class", default=GasGiantClass.CLASS_I.value,
                     choices=[c.value for c in GasGiantClass])
    gas.add_argument("--storm-color")

    star = sub.add_parser("star", help="Star photosphere")
    common(star)
    star.add_argument("--spectral-class", default=SpectralClass.G.value,
                      choices=[c.value for c in SpectralClass])

    rock = sub.add_parser("rock", help="Asteroid / comet surface")
    common(rock)
    rock.add_argument("--rocky-type", default=RockyType.LIGHT_ROCK.value,
                      choices=[t.value for t in RockyType])

    return parser


def _params_from_args(args: argparse.Namespace):
    if args.command == "terrain":
        overrides = {"texture_size": args.size}
        if args.octaves is not None:
            overrides["octaves"] = args.octaves
        if args.scale is not None:
            overrides["scale"] = args.scale
        if args.colors:
            overrides["colors"] = tuple(args.colors)
        return surface_params_for(args.planet_type, **overrides)
    if args.command == "gas-giant":
        return GasGiantParameters(args.gas_class, storm_color=args.storm_color,
                                  texture_size=args.size)
    if args.command == "star":
        return StarParameters(args.spectral_class, texture_size=args.size)
    return SpaceRockParameters(args.rocky_type, texture_size=args.size)


def main(argv: Optional[List[str]] = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    if args.size < 1:
        print("--size must be >= 1")
        raise SystemExit(1)

    params = _params_from_args(args)
    out_dir = Path(args.output_dir)
    out_dir.mkdir(parents=True, exist_ok=True)

    with TextureFactory() as factory:
        bundle = factory.generate(args.seed, params)
        for name, image in bundle.to_images().items():
            path = out_dir / f"{args.command}_{args.seed}_{name}.png"
            image.save(path)
            print(f"Wrote {path}")


if __name__ == "__main__":
    main()
