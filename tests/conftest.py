"""
Shared fixtures. No real camera and no real Gemini calls.
"""
import threading

import pytest

from modules.sampler import FrameSampler
from modules.session import InterpreterSession
from modules.vlm import BatchSubmitter
from tests.fakes import FakeCamera, FakeClient, b64_encoder


@pytest.fixture
def camera():
    return FakeCamera(frames=[b"A", b"B", b"C"])


@pytest.fixture
def client():
    return FakeClient()


@pytest.fixture
def sampler(camera):
    # long interval: ticks are driven by the test via capture_once()
    return FrameSampler(camera, interval=60, encoder=b64_encoder)


@pytest.fixture
def session(camera, client, sampler):
    s = InterpreterSession(camera, BatchSubmitter(client), sampler=sampler)
    s.open_camera()
    yield s
    s.close()


@pytest.fixture
def gate():
    return threading.Event()
