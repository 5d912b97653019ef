"""Unit tests for frame encoding."""
import base64

import cv2
import numpy as np
import pytest

from modules.preprocessing import encode_png_base64, encode_preview_jpeg, to_canonical_raster

PNG_SIGNATURE = b"\x89PNG\r\n\x1a\n"


@pytest.mark.unit
class TestCanonicalRaster:
    def test_stretches_to_640x480(self):
        frame = np.zeros((720, 1280, 3), dtype=np.uint8)
        assert to_canonical_raster(frame).shape == (480, 640, 3)

    def test_canonical_frame_is_untouched(self):
        frame = np.zeros((480, 640, 3), dtype=np.uint8)
        assert to_canonical_raster(frame) is frame


@pytest.mark.unit
class TestEncodePng:
    def test_base64_png_at_canonical_size(self):
        frame = np.random.default_rng(0).integers(0, 255, (720, 1280, 3), dtype=np.uint8)
        data = encode_png_base64(frame)

        png = base64.b64decode(data)
        assert png.startswith(PNG_SIGNATURE)
        decoded = cv2.imdecode(np.frombuffer(png, dtype=np.uint8), cv2.IMREAD_COLOR)
        assert decoded.shape == (480, 640, 3)

    def test_png_is_lossless(self):
        frame = np.random.default_rng(1).integers(0, 255, (480, 640, 3), dtype=np.uint8)
        png = base64.b64decode(encode_png_base64(frame))
        decoded = cv2.imdecode(np.frombuffer(png, dtype=np.uint8), cv2.IMREAD_COLOR)
        assert np.array_equal(decoded, frame)


@pytest.mark.unit
class TestPreviewJpeg:
    def test_returns_jpeg_bytes(self):
        frame = np.zeros((480, 640, 3), dtype=np.uint8)
        jpeg = encode_preview_jpeg(frame, mirror=False)
        assert jpeg.startswith(b"\xff\xd8")

    def test_mirror_flips_horizontally(self):
        frame = np.zeros((480, 640, 3), dtype=np.uint8)
        frame[:, :320] = 255

        jpeg = encode_preview_jpeg(frame, mirror=True, quality=95)
        decoded = cv2.imdecode(np.frombuffer(jpeg, dtype=np.uint8), cv2.IMREAD_COLOR)
        assert decoded[:, 600:].mean() > 200
        assert decoded[:, :40].mean() < 50
