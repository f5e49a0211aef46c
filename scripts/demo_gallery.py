#!/usr/bin/env python3
"""Demo: contact sheet of every surface type, gas giant class, star and rock.

Usage
-----
    python scripts/demo_gallery.py --size 128 --out exports/gallery.png
    python scripts/demo_gallery.py --size 64 --seed 7 --normals --out exports/gallery_normals.png
"""

from __future__ import annotations

import argparse
import sys
import time
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(ROOT / "src"))

from PIL import Image, ImageDraw

from celestex import (
    GasGiantClass,
    GasGiantParameters,
    PlanetType,
    RockyType,
    SpaceRockParameters,
    SpectralClass,
    StarParameters,
    TextureFactory,
    surface_params_for,
)

LABEL_HEIGHT = 14


def _requests(size: int):
    for planet_type in PlanetType:
        yield planet_type.value, surface_params_for(planet_type, texture_size=size)
    for gas_class in GasGiantClass:
        yield gas_class.value, GasGiantParameters(gas_class, storm_color="#c05030", texture_size=size)
    for spectral_class in (SpectralClass.O, SpectralClass.G, SpectralClass.M):
        yield f"star {spectral_class.value}", StarParameters(spectral_class, texture_size=size)
    for rocky_type in (RockyType.METALLIC, RockyType.ICE, RockyType.DARK_ROCK):
        yield rocky_type.value, SpaceRockParameters(rocky_type, texture_size=size)


def main() -> None:
    parser = argparse.ArgumentParser(description="Celestex texture gallery")
    parser.add_argument("--size", type=int, default=128, help="Texture size per tile")
    parser.add_argument("--seed", type=int, default=12345)
    parser.add_argument("--cols", type=int, default=6)
    parser.add_argument("--normals", action="store_true", help="Show normal maps instead of colour")
    parser.add_argument("--out", default="exports/gallery.png")
    args = parser.parse_args()

    # ── 1. Generate ─────────────────────────────────────────────────
    tiles = []
    with TextureFactory() as factory:
        for label, params in _requests(args.size):
            start = time.perf_counter()
            bundle = factory.generate(args.seed, params)
            print(f"  {label:<12} {time.perf_counter() - start:6.2f}s")
            image = bundle.to_images()["normal" if args.normals else "color"]
            tiles.append((label, image))

    # ── 2. Assemble atlas ───────────────────────────────────────────
    rows = (len(tiles) + args.cols - 1) // args.cols
    cell_h = args.size + LABEL_HEIGHT
    sheet = Image.new("RGBA", (args.cols * args.size, rows * cell_h), (0, 0, 0, 255))
    draw = ImageDraw.Draw(sheet)
    for i, (label, image) in enumerate(tiles):
        x = (i % args.cols) * args.size
        y = (i // args.cols) * cell_h
        sheet.paste(image, (x, y))
        draw.text((x + 2, y + args.size + 1), label, fill=(220, 220, 220, 255))

    Path(args.out).parent.mkdir(parents=True, exist_ok=True)
    sheet.save(args.out)
    print(f"Done ✓  →  {args.out}")


if __name__ == "__main__":
    main()
