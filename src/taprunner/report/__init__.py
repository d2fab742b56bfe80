"""TAP report output."""

from taprunner.report.tap import TapReporter

__all__ = ["TapReporter"]
