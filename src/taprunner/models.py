"""Data models for registered tests and run results."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Optional, Union


class Verdict(str, Enum):
    """TAP verdict of a single reported line."""

    OK = "ok"
    NOT_OK = "not ok"

    @classmethod
    def of(cls, passed: bool) -> "Verdict":
        return cls.OK if passed else cls.NOT_OK


@dataclass(frozen=True)
class InvocationResult:
    """What a test function hands back to the driver.

    A test may return a plain truthy/falsy value instead; ``title``
    replaces the label of the line reported for this invocation.
    """

    passed: bool
    title: Optional[str] = None

    def __bool__(self) -> bool:
        return self.passed


def classify(value: Any) -> InvocationResult:
    """Turn whatever a test function returned into an InvocationResult."""
    if isinstance(value, InvocationResult):
        return value
    return InvocationResult(passed=bool(value))


@dataclass(frozen=True)
class SimpleCase:
    """A test invoked once, with no arguments."""

    name: str
    fn: Callable[[], Any]

    @property
    def num_cases(self) -> int:
        return 1


@dataclass(frozen=True)
class ParameterizedCase:
    """A test invoked ``count`` times with an index in ``[0, count)``."""

    name: str
    fn: Callable[[int], Any]
    count: int
    subtest: bool = False

    @property
    def num_cases(self) -> int:
        return self.count


TestDescriptor = Union[SimpleCase, ParameterizedCase]


@dataclass
class RunState:
    """Mutable state of a single run, owned by the driver."""

    level: int = 0
    seed: int = 0
    failures: int = 0
    title: Optional[str] = None


@dataclass
class RunSummary:
    """Diagnostic record of a finished run."""

    total: int = 0
    failed: int = 0
    num_test_cases: int = 0
    seed: int = 0
    order: list[str] = field(default_factory=list)

    @property
    def passed(self) -> int:
        return self.total - self.failed

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "total": self.total,
            "passed": self.passed,
            "failed": self.failed,
            "num_test_cases": self.num_test_cases,
            "seed": self.seed,
            "order": list(self.order),
        }
