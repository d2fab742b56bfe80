"""Core test registration, ordering and execution."""

from taprunner.core.driver import TestDriver
from taprunner.core.registry import CapacityExceededError, InvalidTestError, Registry, TapRunnerError

__all__ = ["TestDriver", "Registry", "TapRunnerError", "CapacityExceededError", "InvalidTestError"]
