#!/usr/bin/env python3
"""
Generate a heightmap PNG for a bounding box without running the API.

Usage:
    python generate_heightmap.py --north 41.9462 --south 41.8330 --east 12.5458 --west 12.3962

Prints the value range and content hash so repeated runs can be compared.
"""

import argparse
import sys
from pathlib import Path

sys.path.append(str(Path(__file__).parent))

from terrain_party.core.elevation import DEFAULT_SCALE
from terrain_party.core.encoding import encode_png
from terrain_party.core.synthesizer import (
    CANONICAL_GRID_SIZE,
    BoundingBox,
    GridSpec,
    HeightmapSynthesizer,
)
from terrain_party.exceptions import TerrainPartyError


def parse_arguments(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Generate a synthetic grayscale heightmap")
    parser.add_argument("--north", type=float, required=True, help="Northern latitude")
    parser.add_argument("--south", type=float, required=True, help="Southern latitude")
    parser.add_argument("--east", type=float, required=True, help="Eastern longitude")
    parser.add_argument("--west", type=float, required=True, help="Western longitude")
    parser.add_argument("--scale", type=float, default=DEFAULT_SCALE, help="Regional noise frequency")
    parser.add_argument("--size", type=int, default=CANONICAL_GRID_SIZE, help="Output width and height")
    parser.add_argument("--workers", type=int, default=1, help="Threads used for synthesis")
    parser.add_argument("--output", "-o", default=None, help="Output PNG path")
    return parser.parse_args(argv)


def main(argv=None) -> int:
    args = parse_arguments(argv)
    box = BoundingBox(north=args.north, south=args.south, east=args.east, west=args.west)

    lat_km, lon_km = box.approximate_extent_km()
    print(f"Generating {args.size}x{args.size} heightmap")
    print(f"  Bounds: N:{box.north} S:{box.south} E:{box.east} W:{box.west}")
    print(f"  Approximate area: {lat_km:.2f}km x {lon_km:.2f}km")

    try:
        synthesizer = HeightmapSynthesizer(GridSpec(args.size), scale=args.scale, workers=args.workers)
        buffer = synthesizer.synthesize(box)
        png = encode_png(buffer)
    except TerrainPartyError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    output = Path(args.output or f"heightmap_{box.north:.4f}_{box.west:.4f}.png")
    output.write_bytes(png)

    low, high = buffer.value_range()
    print(f"\nHeightmap statistics:")
    print(f"  Min value: {low}")
    print(f"  Max value: {high}")
    print(f"  Range: {high - low}")
    print(f"  SHA-256: {buffer.sha256()}")
    print(f"\nSaved to: {output} ({len(png)} bytes)")
    return 0


if __name__ == "__main__":
    sys.exit(main())
