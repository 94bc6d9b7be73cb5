"""
Synthetic elevation function.

Elevation is a blend of three octaves of a closed-form trigonometric noise,
evaluated directly from latitude and longitude in degrees. The function has
no state, so identical coordinates always produce identical bytes, and two
points roughly one continental wavelength apart (2*pi/0.5 degrees) always
look different from one another.
"""

from typing import Union

import numpy as np

from ..exceptions import InvalidArgumentError

ArrayLike = Union[float, np.ndarray]

DEFAULT_SCALE = 50.0

# Scale-independent frequency separating far-apart regions
CONTINENTAL_FREQUENCY = 0.5

# Detail octave frequency relative to the regional scale
DETAIL_MULTIPLIER = 5.0

# Convex weights for (continental, regional, detail)
OCTAVE_WEIGHTS = (0.3, 0.4, 0.3)


def octave(lat: ArrayLike, lon: ArrayLike, frequency: float) -> ArrayLike:
    """One noise octave mapped into [0, 1]."""
    return np.sin(np.multiply(lat, frequency)) * np.cos(np.multiply(lon, frequency)) * 0.5 + 0.5


def validate_scale(scale: float) -> float:
    """Return ``scale`` as a float, rejecting non-positive or non-finite values."""
    try:
        value = float(scale)
    except (TypeError, ValueError):
        raise InvalidArgumentError(f"Scale must be a number, got {scale!r}")
    if not np.isfinite(value) or value <= 0:
        raise InvalidArgumentError(f"Scale must be a positive finite number, got {scale!r}")
    return value


def combined_noise(lat: ArrayLike, lon: ArrayLike, scale: float = DEFAULT_SCALE) -> ArrayLike:
    """
    Weighted sum of the continental, regional and detail octaves.

    Args:
        lat: Latitude(s) in degrees
        lon: Longitude(s) in degrees
        scale: Regional octave frequency

    Returns:
        Value(s) in [0, 1]
    """
    scale = validate_scale(scale)
    continental = octave(lat, lon, CONTINENTAL_FREQUENCY)
    regional = octave(lat, lon, scale)
    detail = octave(lat, lon, scale * DETAIL_MULTIPLIER)

    w_continental, w_regional, w_detail = OCTAVE_WEIGHTS
    return continental * w_continental + regional * w_regional + detail * w_detail


def elevation(lat: ArrayLike, lon: ArrayLike, scale: float = DEFAULT_SCALE) -> Union[int, np.ndarray]:
    """
    Byte-quantized elevation for a coordinate or a grid of coordinates.

    Scalars return an ``int`` in [0, 255]. Arrays are broadcast together and
    return a ``uint8`` array of the broadcast shape.
    """
    combined = combined_noise(lat, lon, scale)
    # floor(combined * 255); the weighted sum can overshoot 1.0 by an ulp
    quantized = np.clip(np.floor(np.multiply(combined, 255.0)), 0, 255).astype(np.uint8)

    if quantized.ndim == 0:
        return int(quantized)
    return quantized
