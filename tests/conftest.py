"""Shared fixtures: a controllable clock and timer scheduler, and mock HTTP plumbing."""

import json
from unittest.mock import MagicMock

import pytest
import requests


class FakeClock:
    def __init__(self):
        self.now = 0.0

    def __call__(self):
        return self.now


class FakeTimer:
    """Same surface as threading.Timer, driven by FakeScheduler.advance()."""

    def __init__(self, scheduler, interval, function):
        self.scheduler = scheduler
        self.interval = interval
        self.function = function
        self.due = None
        self.cancelled = False
        self.fired = False
        self.daemon = False

    def start(self):
        self.due = self.scheduler.clock.now + self.interval
        self.scheduler.timers.append(self)

    def cancel(self):
        self.cancelled = True


class FakeScheduler:
    def __init__(self):
        self.clock = FakeClock()
        self.timers = []

    def timer(self, interval, function):
        return FakeTimer(self, interval, function)

    def advance(self, seconds):
        self.clock.now += seconds
        due = [t for t in self.timers if not t.cancelled and not t.fired and t.due <= self.clock.now]
        for t in sorted(due, key=lambda t: t.due):
            t.fired = True
            t.function()


@pytest.fixture
def scheduler():
    return FakeScheduler()


def make_response(status=200, payload=None, text=None):
    response = MagicMock()
    response.status_code = status
    response.text = text if text is not None else json.dumps(payload)
    if status >= 400:
        response.raise_for_status.side_effect = requests.HTTPError(f"{status} Server Error")
    return response


def chat_payload(content):
    return {"choices": [{"message": {"role": "assistant", "content": content}}]}


@pytest.fixture
def session():
    """A mock requests.Session answering every POST with a fixed suggestion."""
    s = MagicMock()
    s.post.return_value = make_response(payload=chat_payload("return x;"))
    return s
