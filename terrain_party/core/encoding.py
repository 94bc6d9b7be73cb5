"""PNG encoding of heightmap buffers."""

import io
from typing import Optional, Union

import numpy as np
import structlog
from PIL import Image

from ..exceptions import EncodingFailureError
from .synthesizer import HeightmapBuffer

logger = structlog.get_logger()


def encode_png(buffer: Union[HeightmapBuffer, bytes, bytearray], size: Optional[int] = None) -> bytes:
    """
    Encode a heightmap as a single-channel 8-bit grayscale PNG.

    Args:
        buffer: HeightmapBuffer, or raw row-major bytes together with ``size``
        size: Raster width and height for raw bytes

    Returns:
        PNG file contents
    """
    if isinstance(buffer, HeightmapBuffer):
        pixels = buffer.pixels
    else:
        if size is None:
            raise EncodingFailureError("Raw heightmap bytes need an explicit size")
        expected = size * size
        if len(buffer) != expected:
            raise EncodingFailureError(
                f"Buffer size mismatch: expected {expected} bytes for {size}x{size}, got {len(buffer)}"
            )
        pixels = np.frombuffer(bytes(buffer), dtype=np.uint8).reshape(size, size)

    if pixels.dtype != np.uint8:
        raise EncodingFailureError(f"Expected uint8 pixels, got {pixels.dtype}")

    try:
        # 2-D uint8 arrays map to Pillow mode "L"
        image = Image.fromarray(pixels)
        output = io.BytesIO()
        image.save(output, format="PNG")
    except (OSError, ValueError, TypeError) as e:
        logger.error("PNG encoding failed", error=str(e))
        raise EncodingFailureError(f"PNG encoding failed: {e}") from e

    data = output.getvalue()
    logger.debug("Encoded heightmap", width=pixels.shape[1], height=pixels.shape[0], bytes=len(data))
    return data


def decode_png(data: bytes) -> np.ndarray:
    """Decode PNG bytes into a 2-D uint8 array."""
    with Image.open(io.BytesIO(data)) as image:
        if image.mode != "L":
            image = image.convert("L")
        return np.array(image, dtype=np.uint8)
