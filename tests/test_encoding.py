"""
Tests for PNG encoding of heightmaps.
"""

import io

import numpy as np
import pytest
from PIL import Image

from terrain_party.core.encoding import decode_png, encode_png
from terrain_party.core.synthesizer import BoundingBox, GridSpec, HeightmapBuffer, synthesize
from terrain_party.exceptions import EncodingFailureError

PNG_SIGNATURE = b"\x89PNG\r\n\x1a\n"


class TestEncodePng:
    """Test grayscale PNG output."""

    @pytest.fixture
    def buffer(self):
        box = BoundingBox(north=45.5240, south=45.4108, east=9.2502, west=9.1008)
        return synthesize(box, GridSpec(64), 50)

    def test_single_channel_png(self, buffer):
        data = encode_png(buffer)
        assert data.startswith(PNG_SIGNATURE)

        with Image.open(io.BytesIO(data)) as image:
            assert image.format == "PNG"
            assert image.mode == "L"
            assert image.size == (64, 64)

    def test_pixels_survive_encoding(self, buffer):
        decoded = decode_png(encode_png(buffer))
        np.testing.assert_array_equal(decoded, buffer.pixels)

    def test_raw_bytes_with_size(self):
        raw = bytes(range(16))
        decoded = decode_png(encode_png(raw, size=4))
        assert decoded[0, 0] == 0
        assert decoded[0, 3] == 3
        assert decoded[3, 0] == 12

    def test_identical_buffers_encode_identically(self, buffer):
        assert encode_png(buffer) == encode_png(HeightmapBuffer(buffer.pixels.copy()))

    def test_size_mismatch(self):
        with pytest.raises(EncodingFailureError, match="mismatch"):
            encode_png(bytes(15), size=4)

    def test_raw_bytes_need_size(self):
        with pytest.raises(EncodingFailureError):
            encode_png(bytes(16))
