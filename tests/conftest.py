"""Shared fixtures."""

import io

import pytest

from taprunner.collaborators import ListErrorQueue, NullLeakDetector, StreamSink
from taprunner.config import RunnerConfig
from taprunner.core.driver import TestDriver
from taprunner.core.registry import Registry


class Harness:
    """A driver wired to in-memory streams."""

    def __init__(self, config=None, leak_detector=None, capacity=16):
        self.stdout = io.StringIO()
        self.stderr = io.StringIO()
        self.registry = Registry(capacity=capacity)
        self.errors = ListErrorQueue()
        self.driver = TestDriver(
            self.registry,
            config or RunnerConfig(leak_check=False),
            sink=StreamSink(self.stdout, self.stderr),
            error_queue=self.errors,
            leak_detector=leak_detector or NullLeakDetector(),
        )

    def main(self, prog_name="prog"):
        return self.driver.main(prog_name)

    @property
    def lines(self):
        return self.stdout.getvalue().splitlines()

    @property
    def error_lines(self):
        return self.stderr.getvalue().splitlines()


@pytest.fixture
def harness():
    return Harness()


@pytest.fixture
def make_harness():
    return Harness
