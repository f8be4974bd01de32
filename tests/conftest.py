import os

# Must be set before any app module loads its configuration
os.environ.setdefault("ENVIRONMENT", "test")

import random
import threading

import pytest
from fastapi.testclient import TestClient

from commons import limiter
from imposter.game.manager import GameManager
from imposter.game.store import clear_sessions
from imposter.game.topic_generator import ClassicContent, UndercoverContent


class StubProvider:
    """Deterministic materials provider; ``gate`` holds calls until set."""

    def __init__(self):
        self.calls = []
        self.hint_count = 0
        self.gate = None

    def _wait(self):
        if self.gate is not None:
            self.gate.wait(timeout=5)

    def generate_classic(self, category, difficulty, want_hint):
        self.calls.append(("classic", category, difficulty, want_hint))
        self._wait()
        return ClassicContent("Lion", "It has a mane" if want_hint else None)

    def generate_undercover(self, category, difficulty):
        self.calls.append(("undercover", category, difficulty))
        self._wait()
        return UndercoverContent("Apple", "Orange")

    def generate_hint(self, category, secret_word):
        self.calls.append(("hint", category, secret_word))
        self._wait()
        self.hint_count += 1
        return f"Question {self.hint_count}"

    def generate_imposter_hint(self, category, secret_word):
        self.calls.append(("imposter_hint", category, secret_word))
        return "It is round"


class ScriptedRandom(random.Random):
    """
    Random source that replays scripted ``randrange`` results and
    ``choice`` indices, then falls back to a seeded generator.
    """

    def __init__(self, ranges=(), choices=()):
        super().__init__(1234)
        self._ranges = list(ranges)
        self._choices = list(choices)

    def randrange(self, start, stop=None, step=1):
        if self._ranges:
            return self._ranges.pop(0)
        return super().randrange(start, stop, step)

    def choice(self, seq):
        if self._choices:
            return seq[self._choices.pop(0)]
        return super().choice(seq)


@pytest.fixture
def stub_provider():
    return StubProvider()


@pytest.fixture
def gate():
    event = threading.Event()
    try:
        yield event
    finally:
        event.set()


@pytest.fixture
def scripted_rng():
    return ScriptedRandom


@pytest.fixture
def client(monkeypatch, stub_provider):
    from main import app

    monkeypatch.setattr(GameManager, "provider", stub_provider)
    monkeypatch.setattr(limiter, "enabled", False)
    with TestClient(app) as test_client:
        yield test_client
    clear_sessions()
