import io
import json
import random

import pytest

from cyberbot.config import AppSettings
from cyberbot.terminal import TerminalSession, TypingRenderer


class RecordingSleep:
    def __init__(self):
        self.calls = []

    def __call__(self, seconds):
        self.calls.append(seconds)

    @property
    def total_ms(self):
        return sum(self.calls) * 1000


class LowRandom(random.Random):
    """Always picks the low end of a range and the first element of a sequence."""

    def randrange(self, start, stop=None, step=1):
        return start

    def choice(self, seq):
        return seq[0]


@pytest.fixture
def rng():
    return random.Random(1234)


@pytest.fixture
def sleeper():
    return RecordingSleep()


@pytest.fixture
def output():
    return io.StringIO()


@pytest.fixture
def stdin():
    return io.StringIO("")


@pytest.fixture
def terminal(output, stdin):
    return TerminalSession(stream=output, stdin=stdin, interactive=False, width=80)


@pytest.fixture
def renderer(terminal, rng, sleeper):
    return TypingRenderer(terminal, rng=rng, sleep=sleeper)


@pytest.fixture
def settings(tmp_path):
    return AppSettings(data_dir=tmp_path, audio=False)


@pytest.fixture
def write_json(tmp_path):
    def _write(name, data):
        path = tmp_path / name
        if isinstance(data, str):
            path.write_text(data, encoding="utf-8")
        else:
            path.write_text(json.dumps(data), encoding="utf-8")
        return path
    return _write


@pytest.fixture
def low_rng():
    return LowRandom()
