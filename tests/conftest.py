import json
import os
from unittest.mock import MagicMock

import pytest
import requests

from dingrobot.client import DingRobot
from dingrobot.ratelimit import WindowRateLimiter

WEBHOOK_URL = "https://oapi.dingtalk.com/robot/send?access_token=test-token"

CONFIG_ENV_KEYS = (
    "DINGROBOT_WEBHOOK_URL",
    "REQUEST_TIMEOUT_SECONDS",
    "RATE_LIMIT_MAX_CALLS",
    "RATE_LIMIT_WINDOW_SECONDS",
)


class FakeClock:
    def __init__(self, start: float = 1000.0) -> None:
        self.now = start
        self.sleeps = []

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds

    def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.now += seconds


def make_response(payload=None, text=None, status_code=200):
    response = MagicMock()
    response.status_code = status_code
    response.text = text if text is not None else json.dumps(payload)
    return response


@pytest.fixture
def fake_clock():
    return FakeClock()


@pytest.fixture
def session():
    """A stand-in requests.Session whose post() answers with errcode 0."""
    mock = MagicMock(spec=requests.Session)
    mock.post.return_value = make_response({"errcode": 0, "errmsg": "ok"})
    return mock


@pytest.fixture
def robot(session, fake_clock):
    limiter = WindowRateLimiter(clock=fake_clock, sleep=fake_clock.sleep)
    return DingRobot(WEBHOOK_URL, timeout_seconds=5.0, session=session, rate_limiter=limiter)


@pytest.fixture
def clean_env():
    for key in CONFIG_ENV_KEYS:
        os.environ.pop(key, None)
    yield
    for key in CONFIG_ENV_KEYS:
        os.environ.pop(key, None)


def sent_payload(session) -> dict:
    """Decode the JSON body of the most recent post() call."""
    _, kwargs = session.post.call_args
    return json.loads(kwargs["data"].decode("utf-8"))
