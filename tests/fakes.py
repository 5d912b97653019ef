"""
Test doubles for the camera and the interpretation service.
"""
import base64
import time

from modules.errors import DeviceAccessError


class FakeCamera:
    """Stands in for CameraSource; hands out queued frames one per read."""

    def __init__(self, frames=None, fail_open=False):
        self.frames = list(frames or [])
        self.fail_open = fail_open
        self.is_open = False
        self.open_calls = 0
        self.closed = False

    def open(self):
        self.open_calls += 1
        if self.fail_open:
            raise DeviceAccessError("permission denied")
        self.is_open = True

    def latest_frame(self):
        if not self.frames:
            return None
        return self.frames.pop(0)

    def close(self):
        self.is_open = False
        self.closed = True


class FakeClient:
    def __init__(self, reply="HELLO", error=None, gate=None):
        self.reply = reply
        self.error = error
        self.gate = gate
        self.calls = []

    def generate(self, parts):
        self.calls.append(parts)
        if self.gate is not None:
            self.gate.wait(timeout=5)
        if self.error is not None:
            raise self.error
        return self.reply


def b64_encoder(frame, width, height):
    """Test encoder: frames are raw bytes, encoded straight to base64."""
    return base64.b64encode(frame).decode("ascii")


def wait_for_status(session, statuses, timeout=5.0):
    deadline = time.monotonic() + timeout
    while session.state.status not in statuses:
        if time.monotonic() > deadline:
            raise AssertionError(f"session stuck in {session.state.status}")
        time.sleep(0.01)
    return session.state
