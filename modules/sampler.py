"""
フレームサンプラー
Frame sampler: periodic capture into an ordered, closable buffer.

While recording, one frame is taken from the camera every interval,
encoded (PNG + base64) and appended to the buffer. Encoding happens on the
sampler thread, so append order is capture order. The buffer is closed at
stop: a frame whose encode finishes after that is dropped.
"""
import base64
import logging
import threading
import time
from dataclasses import dataclass

import config
from modules.preprocessing import encode_png_base64

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class EncodedFrame:
    index: int
    data: str
    captured_at: float
    mime_type: str = "image/png"

    @property
    def png_bytes(self) -> bytes:
        return base64.b64decode(self.data, validate=True)


class FrameBuffer:
    """1回の録画分のフレーム列（追記のみ）
    Append-only frame sequence for one recording."""

    def __init__(self):
        self._frames: list[EncodedFrame] = []
        self._closed = True
        self._lock = threading.Lock()

    def reset(self):
        with self._lock:
            self._frames = []
            self._closed = False

    def append(self, data: str, captured_at: float) -> EncodedFrame | None:
        with self._lock:
            if self._closed:
                return None
            frame = EncodedFrame(index=len(self._frames), data=data, captured_at=captured_at)
            self._frames.append(frame)
            return frame

    def close(self) -> tuple[EncodedFrame, ...]:
        with self._lock:
            self._closed = True
            return tuple(self._frames)

    @property
    def closed(self) -> bool:
        return self._closed

    def __len__(self):
        with self._lock:
            return len(self._frames)


class FrameSampler:
    """一定間隔でフレームを取得するサンプラー"""

    def __init__(
        self,
        camera,
        interval: float = config.CAPTURE_INTERVAL_SEC,
        width: int = config.PROCESS_WIDTH,
        height: int = config.PROCESS_HEIGHT,
        encoder=encode_png_base64,
    ):
        self.camera = camera
        self.interval = interval
        self.width = width
        self.height = height
        self._encode = encoder
        self._buffer = FrameBuffer()
        self._stop_event = threading.Event()
        self._thread = None

    @property
    def is_recording(self) -> bool:
        return not self._buffer.closed

    @property
    def frame_count(self) -> int:
        return len(self._buffer)

    def start(self):
        """
        録画開始
        Clear the buffer, take one frame now, then arm the timer.

        Each recording owns its buffer and stop event, so a tick thread left
        over from an earlier recording can only append to its own closed
        buffer.
        """
        if self.is_recording:
            return

        buffer = FrameBuffer()
        buffer.reset()
        stop_event = threading.Event()
        self._buffer = buffer
        self._stop_event = stop_event

        try:
            self._capture_into(buffer)
        except Exception:
            logger.exception("Initial frame capture failed")

        self._thread = threading.Thread(
            target=self._run, args=(stop_event, buffer), name="frame-sampler", daemon=True
        )
        self._thread.start()
        logger.info("Recording started (interval %.2fs)", self.interval)

    def _run(self, stop_event: threading.Event, buffer: FrameBuffer):
        while not stop_event.wait(self.interval):
            try:
                self._capture_into(buffer)
            except Exception:
                logger.exception("Frame capture failed, skipping tick")

    def capture_once(self) -> EncodedFrame | None:
        """One tick into the current recording. None if skipped or dropped."""
        return self._capture_into(self._buffer)

    def _capture_into(self, buffer: FrameBuffer) -> EncodedFrame | None:
        frame = self.camera.latest_frame()
        if frame is None:
            logger.debug("No camera frame available, skipping tick")
            return None

        captured_at = time.monotonic()
        data = self._encode(frame, self.width, self.height)

        encoded = buffer.append(data, captured_at)
        if encoded is None:
            logger.info("Dropped frame encoded after recording stopped")
        return encoded

    def stop(self) -> tuple[EncodedFrame, ...]:
        """録画停止: disarm the timer, close the buffer and return its snapshot."""
        self._stop_event.set()
        frames = self._buffer.close()

        thread = self._thread
        self._thread = None
        if thread is not None and thread is not threading.current_thread():
            thread.join(timeout=max(self.interval, 1.0))
            if thread.is_alive():
                logger.warning("Sampler tick still encoding after stop; its frame will be dropped")

        logger.info("Recording stopped with %d frame(s)", len(frames))
        return frames
