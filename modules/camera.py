"""
カメラモジュール
Camera source for the interpreter capture station.

The capture device is opened server-side with OpenCV. A background reader
thread keeps the most recent frame, which serves both the live preview
stream and the frame sampler. Nothing else touches the VideoCapture handle.
"""
import logging
import threading
import time

import cv2

import config
from modules.errors import DeviceAccessError

logger = logging.getLogger(__name__)


class CameraSource:
    """カメラの取得と解放を管理するクラス"""

    def __init__(self, device: int = config.CAMERA_INDEX, capture_factory=cv2.VideoCapture):
        self.device = device
        self._capture_factory = capture_factory
        self._cap = None
        self._latest = None
        self._lock = threading.Lock()
        self._stop_event = threading.Event()
        self._thread = None

    @property
    def is_open(self) -> bool:
        return self._cap is not None

    def open(self):
        """映像のみでカメラを開く。失敗時は DeviceAccessError"""
        if self.is_open:
            return

        try:
            cap = self._capture_factory(self.device)
        except cv2.error as e:
            logger.error("Error accessing camera %s: %s", self.device, e)
            raise DeviceAccessError(str(e)) from e

        if not cap.isOpened():
            cap.release()
            logger.error("Error accessing camera %s: device unavailable", self.device)
            raise DeviceAccessError(f"cannot open camera device {self.device}")

        self._cap = cap
        self._stop_event = threading.Event()
        self._thread = threading.Thread(
            target=self._read_loop, args=(cap, self._stop_event),
            name="camera-reader", daemon=True,
        )
        self._thread.start()
        logger.info("Camera %s opened", self.device)

    def _read_loop(self, cap, stop_event: threading.Event):
        # デバイスの解放は読み取りスレッド自身が最後に行う
        try:
            while not stop_event.is_set():
                ok, frame = cap.read()
                if not ok:
                    time.sleep(0.01)
                    continue
                with self._lock:
                    if stop_event.is_set():
                        break
                    self._latest = frame
        finally:
            cap.release()
            logger.info("Camera %s released", self.device)

    def latest_frame(self):
        """最新フレームのコピー（まだ無ければ None）"""
        with self._lock:
            if self._latest is None:
                return None
            return self._latest.copy()

    def close(self):
        """リーダースレッドを止める。デバイスはスレッド終了時に解放される"""
        if not self.is_open:
            return

        with self._lock:
            self._stop_event.set()
            self._latest = None

        thread = self._thread
        self._thread = None
        self._cap = None
        if thread is not None:
            thread.join(timeout=1.0)
            if thread.is_alive():
                logger.warning("Camera %s read still blocked; release deferred", self.device)

    def __repr__(self):
        return f"CameraSource(device={self.device}, open={self.is_open})"
