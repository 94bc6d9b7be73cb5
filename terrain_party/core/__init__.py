"""
Core heightmap synthesis functionality.
"""

from .elevation import DEFAULT_SCALE, elevation, octave
from .synthesizer import (
    CANONICAL_GRID_SIZE,
    BoundingBox,
    GridSpec,
    HeightmapBuffer,
    HeightmapSynthesizer,
    synthesize,
)
from .encoding import encode_png, decode_png

__all__ = ['DEFAULT_SCALE', 'elevation', 'octave',
           'CANONICAL_GRID_SIZE', 'BoundingBox', 'GridSpec', 'HeightmapBuffer',
           'HeightmapSynthesizer', 'synthesize', 'encode_png', 'decode_png']
