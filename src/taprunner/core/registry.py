"""Registration of test cases."""

import logging
from typing import Any, Callable, Iterator

from taprunner.config import DEFAULT_CAPACITY
from taprunner.models import ParameterizedCase, SimpleCase, TestDescriptor

logger = logging.getLogger(__name__)


class TapRunnerError(Exception):
    """Base class for configuration errors raised before any test runs."""

    pass


class CapacityExceededError(TapRunnerError):
    """Raised when registering more tests than the registry allows."""

    pass


class InvalidTestError(TapRunnerError):
    """Raised when a test is registered with an unusable definition."""

    pass


class Registry:
    """Ordered, append-only collection of test descriptors.

    Registration order is the order tests run in when no seed is set.
    """

    def __init__(self, capacity: int = DEFAULT_CAPACITY):
        if capacity < 1:
            raise ValueError("Capacity must be at least 1")
        self.capacity = capacity
        self.num_test_cases = 0
        self._tests: list[TestDescriptor] = []

    def __len__(self) -> int:
        return len(self._tests)

    def __iter__(self) -> Iterator[TestDescriptor]:
        return iter(self._tests)

    def __getitem__(self, index: int) -> TestDescriptor:
        return self._tests[index]

    @property
    def descriptors(self) -> tuple[TestDescriptor, ...]:
        return tuple(self._tests)

    def register(self, name: str, fn: Callable[[], Any]) -> SimpleCase:
        """Register a test that is run once."""
        self._check(name, fn)
        return self._append(SimpleCase(name=name, fn=fn))

    def register_parameterized(
        self,
        name: str,
        fn: Callable[[int], Any],
        count: int,
        subtest: bool = False,
    ) -> ParameterizedCase:
        """Register a test that is run once per index in ``[0, count)``.

        Args:
            name: Label used in the report
            fn: Test function, called with the index
            count: Number of sub-cases
            subtest: Report every sub-case as its own TAP line
        """
        self._check(name, fn)
        if count < 0:
            raise InvalidTestError(f"Test {name!r} has a negative count: {count}")
        return self._append(ParameterizedCase(name=name, fn=fn, count=count, subtest=subtest))

    def _check(self, name: str, fn: Callable) -> None:
        if len(self._tests) >= self.capacity:
            raise CapacityExceededError(
                f"Cannot register {name!r}: registry is full ({self.capacity} tests)"
            )
        if not name:
            raise InvalidTestError("Test name cannot be empty")
        if not callable(fn):
            raise InvalidTestError(f"Test {name!r} is not callable")

    def _append(self, descriptor: TestDescriptor) -> TestDescriptor:
        self._tests.append(descriptor)
        self.num_test_cases += descriptor.num_cases
        logger.debug("Registered %s (%d cases)", descriptor.name, descriptor.num_cases)
        return descriptor
