"""Interfaces the driver talks to, with default implementations.

The driver never formats, buffers or stores anything on its own: report
lines go to an OutputSink, per-test diagnostics are drained from an
ErrorQueue, and leak verdicts come from a LeakDetector.
"""

import sys
import tracemalloc
from abc import ABC, abstractmethod
from typing import Callable, Optional, TextIO

ErrorCallback = Callable[[str], None]


class OutputSink(ABC):
    """Destination for report lines and test diagnostics."""

    def open(self) -> None:
        """Prepare the sink before the first line is written."""

    def close(self) -> None:
        """Release the sink after the last line is written."""

    @abstractmethod
    def write_line(self, level: int, text: str) -> None:
        """Write one line to stdout, indented by ``level`` spaces."""
        pass

    @abstractmethod
    def write_error(self, level: int, text: str) -> None:
        """Write one line to stderr, indented by ``level`` spaces."""
        pass

    @abstractmethod
    def flush_stdout(self) -> None:
        pass

    @abstractmethod
    def flush_stderr(self) -> None:
        pass


class StreamSink(OutputSink):
    """Writes to a pair of text streams (the process streams by default)."""

    def __init__(self, stdout: Optional[TextIO] = None, stderr: Optional[TextIO] = None):
        self._stdout = stdout
        self._stderr = stderr

    @property
    def stdout(self) -> TextIO:
        return self._stdout if self._stdout is not None else sys.stdout

    @property
    def stderr(self) -> TextIO:
        return self._stderr if self._stderr is not None else sys.stderr

    def write_line(self, level: int, text: str) -> None:
        self.stdout.write(" " * level + text + "\n")

    def write_error(self, level: int, text: str) -> None:
        self.stderr.write(" " * level + text + "\n")

    def flush_stdout(self) -> None:
        self.stdout.flush()

    def flush_stderr(self) -> None:
        self.stderr.flush()

    def close(self) -> None:
        self.flush_stdout()
        self.flush_stderr()


class ErrorQueue(ABC):
    """Queue of diagnostics raised while a test was running."""

    @abstractmethod
    def push(self, message: str) -> None:
        pass

    @abstractmethod
    def clear(self) -> None:
        """Drop every queued message."""
        pass

    @abstractmethod
    def print_all(self, callback: ErrorCallback) -> None:
        """Hand each queued message to ``callback`` in order, then empty the queue."""
        pass


class ListErrorQueue(ErrorQueue):
    """In-memory error queue."""

    def __init__(self):
        self._messages: list[str] = []

    def __len__(self) -> int:
        return len(self._messages)

    def push(self, message: str) -> None:
        self._messages.append(message)

    def clear(self) -> None:
        self._messages.clear()

    def print_all(self, callback: ErrorCallback) -> None:
        messages, self._messages = self._messages, []
        for message in messages:
            callback(message)


class LeakDetector(ABC):
    """Reports memory that was not released by the end of the run."""

    @abstractmethod
    def arm(self) -> None:
        """Start tracking; called once before any test runs."""
        pass

    @abstractmethod
    def query_leaks(self, callback: ErrorCallback) -> int:
        """Report leaks through ``callback``.

        Returns:
            A positive value when no leak was found, zero or a negative
            value when leaks were detected.
        """
        pass


class NullLeakDetector(LeakDetector):
    """Never detects anything."""

    def arm(self) -> None:
        pass

    def query_leaks(self, callback: ErrorCallback) -> int:
        return 1


class TracemallocLeakDetector(LeakDetector):
    """Leak detector built on ``tracemalloc`` snapshots.

    Every allocation site whose net growth between ``arm`` and
    ``query_leaks`` exceeds ``threshold`` bytes is reported as a leak.
    Memory allocated while a module is being imported stays alive with the
    module and is not counted; ``frames`` must be deep enough to reach the
    import machinery from the allocation site.
    """

    IGNORED = (
        tracemalloc.Filter(False, "<frozen importlib._bootstrap>", all_frames=True),
        tracemalloc.Filter(False, "<frozen importlib._bootstrap_external>", all_frames=True),
        tracemalloc.Filter(False, "<unknown>"),
    )

    def __init__(self, threshold: int = 64 * 1024, frames: int = 32):
        self.threshold = threshold
        self.frames = frames
        self._baseline: Optional[tracemalloc.Snapshot] = None
        self._started = False

    def arm(self) -> None:
        if not tracemalloc.is_tracing():
            tracemalloc.start(self.frames)
            self._started = True
        self._baseline = self._snapshot()

    def query_leaks(self, callback: ErrorCallback) -> int:
        if self._baseline is None:
            return 1

        snapshot = self._snapshot()
        if self._started:
            tracemalloc.stop()
            self._started = False

        leaks = [
            stat
            for stat in snapshot.compare_to(self._baseline, "lineno")
            if stat.size_diff > self.threshold
        ]
        for stat in leaks:
            callback(f"leak: {stat}")
        return 0 if leaks else 1

    def _snapshot(self) -> tracemalloc.Snapshot:
        return tracemalloc.take_snapshot().filter_traces(self.IGNORED)
