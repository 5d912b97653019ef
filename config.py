"""
Sign Interpreter 設定ファイル
Configuration for the sign language interpreter capture station.

All values are read once from the environment at import time.
"""
import os


def _env_bool(name: str, default: str) -> bool:
    return os.environ.get(name, default).lower() in ("1", "true", "yes", "on")


# ── カメラ設定 ──
CAMERA_INDEX = int(os.environ.get("CAMERA_INDEX", "0"))
CAPTURE_INTERVAL_SEC = float(os.environ.get("CAPTURE_INTERVAL_SEC", "1.0"))

# ── 画像設定 ──
PROCESS_WIDTH = 640
PROCESS_HEIGHT = 480
PREVIEW_MIRROR = _env_bool("PREVIEW_MIRROR", "true")
PREVIEW_JPEG_QUALITY = 80
PREVIEW_FPS = 15

# ── Flask 設定 ──
FLASK_HOST = os.environ.get("FLASK_HOST", "127.0.0.1")
FLASK_PORT = int(os.environ.get("FLASK_PORT", "5000"))
FLASK_DEBUG = _env_bool("FLASK_DEBUG", "false")

LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO")

# ── Gemini API ──
GOOGLE_API_KEY = os.environ.get("GOOGLE_API_KEY", "")
GEMINI_MODEL = os.environ.get("GEMINI_MODEL", "gemini-1.5-flash")
REQUEST_TIMEOUT_SEC = float(os.environ.get("REQUEST_TIMEOUT_SEC", "120"))
