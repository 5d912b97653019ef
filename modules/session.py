"""
インタープリタセッション
Interpreter session: presentation state and the start/stop controller.

The panel shows exactly one thing at a time, so state is a single tagged
value instead of separate recording/processing/error/result flags:

    Idle → Recording → Processing → Error(message) | Result(text)

Only start() leaves Error/Result, and it begins a fresh recording.
"""
import logging
import threading
from dataclasses import dataclass
from typing import ClassVar

from modules.errors import EmptyBatchError, InterpreterError, UnexpectedError
from modules.sampler import FrameSampler

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Idle:
    status: ClassVar[str] = "idle"


@dataclass(frozen=True)
class Recording:
    status: ClassVar[str] = "recording"


@dataclass(frozen=True)
class Processing:
    status: ClassVar[str] = "processing"
    frame_count: int = 0


@dataclass(frozen=True)
class Error:
    message: str
    status: ClassVar[str] = "error"


@dataclass(frozen=True)
class Result:
    text: str
    status: ClassVar[str] = "result"


SessionState = Idle | Recording | Processing | Error | Result


class InterpreterSession:
    """録画・送信・表示状態を管理するクラス"""

    def __init__(self, camera, submitter, sampler: FrameSampler | None = None):
        self.camera = camera
        self.submitter = submitter
        self.sampler = sampler or FrameSampler(camera)
        self._state: SessionState = Idle()
        self._lock = threading.Lock()

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def camera_ready(self) -> bool:
        return self.camera.is_open

    def open_camera(self) -> bool:
        """カメラを要求する。失敗時はエラー表示のまま待機"""
        with self._lock:
            try:
                self.camera.open()
            except InterpreterError as e:
                self._state = Error(e.message)
                return False
            if isinstance(self._state, Error):
                self._state = Idle()
            return True

    def start(self) -> bool:
        with self._lock:
            if not self.camera.is_open:
                logger.warning("Start ignored: camera is not available")
                return False
            if isinstance(self._state, (Recording, Processing)):
                logger.warning("Start ignored: session is %s", self._state.status)
                return False

            self._state = Recording()
            self.sampler.start()
            return True

    def stop(self) -> threading.Thread | None:
        """
        録画を停止し、バッチをバックグラウンドで送信する。

        Returns the submission thread, or None when nothing was submitted.
        """
        with self._lock:
            if not isinstance(self._state, Recording):
                return None

            frames = self.sampler.stop()
            if not frames:
                self._state = Error(EmptyBatchError().message)
                logger.error("Stopped with no frames captured")
                return None

            self._state = Processing(frame_count=len(frames))

        thread = threading.Thread(
            target=self._process, args=(frames,), name="batch-submit", daemon=True
        )
        thread.start()
        return thread

    def toggle(self):
        if isinstance(self._state, Recording):
            return self.stop()
        return self.start()

    def _process(self, frames):
        outcome: SessionState = Error(UnexpectedError("submission did not complete").message)
        try:
            outcome = Result(self.submitter.submit(frames))
        except InterpreterError as e:
            outcome = Error(e.message)
        finally:
            with self._lock:
                if isinstance(self._state, Processing):
                    self._state = outcome

    def snapshot(self) -> dict:
        state = self._state
        if isinstance(state, Recording):
            frames = self.sampler.frame_count
        elif isinstance(state, Processing):
            frames = state.frame_count
        else:
            frames = 0
        return {
            "status": state.status,
            "message": state.message if isinstance(state, Error) else None,
            "result": state.text if isinstance(state, Result) else None,
            "frames_captured": frames,
            "camera_ready": self.camera_ready,
        }

    def close(self):
        with self._lock:
            if isinstance(self._state, Recording):
                self.sampler.stop()
                self._state = Idle()
        self.camera.close()
