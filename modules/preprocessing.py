"""
前処理パイプライン
Frame preprocessing for the interpreter.

    1. Stretch the camera frame to the canonical raster (640×480)
    2. Encode losslessly as PNG
    3. Base64 the PNG bytes for transport

The preview path is separate: mirrored JPEG for the MJPEG stream.
"""
import base64

import cv2
import numpy as np

import config


class EncodeError(Exception):
    pass


def to_canonical_raster(
    frame: np.ndarray,
    width: int = config.PROCESS_WIDTH,
    height: int = config.PROCESS_HEIGHT,
) -> np.ndarray:
    """フレームを固定解像度に描画する（canvas drawImage と同じく伸縮）"""
    if frame.shape[1] == width and frame.shape[0] == height:
        return frame
    return cv2.resize(frame, (width, height), interpolation=cv2.INTER_AREA)


def encode_png_base64(
    frame: np.ndarray,
    width: int = config.PROCESS_WIDTH,
    height: int = config.PROCESS_HEIGHT,
) -> str:
    """
    フレームを PNG → base64 文字列に変換する。

    Args:
        frame: BGR 画像 (OpenCV)

    Returns:
        base64 エンコードされた PNG
    """
    raster = to_canonical_raster(frame, width, height)
    ok, buf = cv2.imencode(".png", raster)
    if not ok:
        raise EncodeError("PNG encode failed")
    return base64.b64encode(buf.tobytes()).decode("ascii")


def encode_preview_jpeg(
    frame: np.ndarray,
    mirror: bool = config.PREVIEW_MIRROR,
    quality: int = config.PREVIEW_JPEG_QUALITY,
) -> bytes | None:
    if mirror:
        frame = cv2.flip(frame, 1)
    ok, buf = cv2.imencode(".jpg", frame, [cv2.IMWRITE_JPEG_QUALITY, quality])
    if not ok:
        return None
    return buf.tobytes()
