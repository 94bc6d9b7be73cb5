#!/usr/bin/env python3
"""
Visualize synthetic heightmaps with a terrain colormap.
Renders the grayscale raster next to a colored relief with contour lines.
"""

import argparse
import sys
from pathlib import Path

import matplotlib

matplotlib.use("Agg")
import matplotlib.pyplot as plt
import numpy as np

sys.path.append(str(Path(__file__).parent))

from terrain_party.core.synthesizer import BoundingBox, GridSpec, synthesize

LOCATIONS = {
    "rome": BoundingBox(north=41.9462, south=41.8330, east=12.5458, west=12.3962),
    "milan": BoundingBox(north=45.5240, south=45.4108, east=9.2502, west=9.1008),
    "naples": BoundingBox(north=40.8889, south=40.7757, east=14.3158, west=14.1664),
    "new-york": BoundingBox(north=40.75, south=40.74, east=-74.00, west=-74.01),
}


def visualize_heightmap(box: BoundingBox, name: str, size=541, scale=50.0, output_file=None):
    """
    Generate and plot a heightmap.

    Args:
        box: Area to render
        name: Title used for the figure and default file name
        size: Grid resolution
        scale: Regional noise frequency
        output_file: PNG path for the figure
    """
    print(f"Generating {size}x{size} heightmap for {name} (scale={scale})...")
    buffer = synthesize(box, GridSpec(size), scale)
    pixels = buffer.pixels

    low, high = buffer.value_range()
    print(f"\nHeightmap statistics:")
    print(f"  Min value: {low}")
    print(f"  Max value: {high}")
    print(f"  Mean value: {np.mean(pixels):.1f}")
    print(f"  SHA-256: {buffer.sha256()[:16]}")

    fig, (ax1, ax2) = plt.subplots(1, 2, figsize=(16, 8))
    extent = (box.west, box.east, box.south, box.north)

    # Left plot: raw grayscale raster as the terrain editor sees it
    im1 = ax1.imshow(pixels, extent=extent, cmap="gray", vmin=0, vmax=255, origin="upper")
    plt.colorbar(im1, ax=ax1, label="Byte value")
    ax1.set_title("Grayscale heightmap")
    ax1.set_xlabel("Longitude")
    ax1.set_ylabel("Latitude")

    # Right plot: colored relief with contours
    im2 = ax2.imshow(pixels, extent=extent, cmap="terrain", vmin=0, vmax=255, origin="upper")
    lons = np.linspace(box.west, box.east, size)
    lats = np.linspace(box.north, box.south, size)
    contours = ax2.contour(lons, lats, pixels, levels=[64, 128, 192], colors="black", linewidths=0.5, alpha=0.5)
    ax2.clabel(contours, inline=True, fontsize=8)
    plt.colorbar(im2, ax=ax2, label="Elevation")
    ax2.set_title("Relief")
    ax2.set_xlabel("Longitude")
    ax2.set_ylabel("Latitude")

    fig.suptitle(f"Heightmap Visualization - {name}", fontsize=16)
    plt.tight_layout()

    output_file = output_file or f"heightmap_preview_{name}.png"
    plt.savefig(output_file, dpi=150, bbox_inches="tight")
    plt.close(fig)
    print(f"\nVisualization saved to: {output_file}")
    return output_file


def main(argv=None):
    parser = argparse.ArgumentParser(description="Preview synthetic heightmaps")
    parser.add_argument("locations", nargs="*", default=sorted(LOCATIONS), help="Named locations to render")
    parser.add_argument("--size", type=int, default=541)
    parser.add_argument("--scale", type=float, default=50.0)
    args = parser.parse_args(argv)

    for name in args.locations:
        if name not in LOCATIONS:
            parser.error(f"Unknown location '{name}', choose from {', '.join(sorted(LOCATIONS))}")
        visualize_heightmap(LOCATIONS[name], name, size=args.size, scale=args.scale)


if __name__ == "__main__":
    main()
