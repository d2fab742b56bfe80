"""TAP line formatting on top of an output sink."""

from taprunner.collaborators import OutputSink
from taprunner.models import Verdict


class TapReporter:
    """Writes TAP plan, subtest and result lines to a sink.

    Every line is indented by the level it is written at; the reporter keeps
    no state of its own.
    """

    def __init__(self, sink: OutputSink):
        self.sink = sink

    def plan(self, level: int, count: int) -> None:
        self.sink.write_line(level, f"1..{count}")

    def skip_all(self, level: int, name: str) -> None:
        self.sink.write_line(level, f"1..0 # Skipped: {name}")

    def subtest(self, level: int, name: str) -> None:
        self.sink.write_line(level, f"# Subtest: {name}")

    def result(self, level: int, passed: bool, number: int, title: str) -> None:
        self.sink.write_line(level, f"{Verdict.of(passed).value} {number} - {title}")

    def comment(self, level: int, text: str) -> None:
        self.sink.write_line(level, f"# {text}")

    def diagnostic(self, level: int, text: str) -> None:
        """Write a diagnostic line to stderr, as a TAP comment."""
        self.sink.write_error(level, f"# {text}")

    def flush(self) -> None:
        self.sink.flush_stdout()
        self.sink.flush_stderr()
