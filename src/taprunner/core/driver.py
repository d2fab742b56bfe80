"""Test execution driver.

A run goes through three steps:

    driver = TestDriver(registry, config)
    driver.setup()
    status = driver.finish(driver.run("my_tests"))

``main`` does all three. Tests run one at a time, in the order picked by
``taprunner.core.ordering``; output is flushed after every test so that
report lines and whatever the test printed itself never interleave.
"""

import logging
import random
import time
from typing import Optional

from taprunner import EXIT_FAILURE, EXIT_SUCCESS
from taprunner.collaborators import (
    ErrorQueue,
    LeakDetector,
    ListErrorQueue,
    NullLeakDetector,
    OutputSink,
    StreamSink,
)
from taprunner.config import RunnerConfig
from taprunner.core.ordering import choose_step, permutation, sub_indices
from taprunner.core.registry import Registry
from taprunner.models import (
    InvocationResult,
    ParameterizedCase,
    RunState,
    RunSummary,
    SimpleCase,
    classify,
)
from taprunner.report.tap import TapReporter

logger = logging.getLogger(__name__)

# Indentation added for every level of subtest nesting.
LEVEL_STEP = 4


class TestDriver:
    """Runs the tests of a registry and reports them as TAP."""

    __test__ = False

    def __init__(
        self,
        registry: Registry,
        config: Optional[RunnerConfig] = None,
        sink: Optional[OutputSink] = None,
        error_queue: Optional[ErrorQueue] = None,
        leak_detector: Optional[LeakDetector] = None,
    ):
        """Initialize the driver.

        Args:
            registry: Registered tests
            config: Run configuration (defaults when omitted)
            sink: Where report lines go (process streams when omitted)
            error_queue: Diagnostics drained after every test
            leak_detector: Consulted once the run is over
        """
        self.registry = registry
        self.config = config if config is not None else RunnerConfig()
        self.sink = sink if sink is not None else StreamSink()
        self.error_queue = error_queue if error_queue is not None else ListErrorQueue()
        self.leak_detector = leak_detector if leak_detector is not None else NullLeakDetector()
        self.reporter = TapReporter(self.sink)

        self.state = RunState()
        self.summary = RunSummary()
        self._rng: Optional[random.Random] = None

    @property
    def level(self) -> int:
        """Current subtest nesting level, in spaces."""
        return self.state.level

    @property
    def seed(self) -> int:
        return self.state.seed

    def setup(self) -> None:
        """Open the sink, seed the random order and arm leak checking."""
        self.sink.open()
        self.state = RunState(level=LEVEL_STEP * self.config.harness_level)

        if self.config.seed is not None:
            seed = self.config.seed
            if seed <= 0:
                seed = int(time.time())
            self.state.seed = seed
            self.reporter.comment(self.level, f"RAND SEED {seed}")
            self.sink.flush_stdout()
            self._rng = random.Random(seed)
            logger.info("Random test order, seed %d", seed)
        else:
            self._rng = None

        if self.config.leak_check:
            self.leak_detector.arm()
            logger.debug("Leak detector armed")

    def run(self, prog_name: str) -> int:
        """Run every registered test.

        Args:
            prog_name: Name of the test program, used in the plan line

        Returns:
            EXIT_SUCCESS when no test failed, EXIT_FAILURE otherwise
        """
        num_tests = len(self.registry)
        self.state.failures = 0
        self.summary = RunSummary(
            total=num_tests,
            num_test_cases=self.registry.num_test_cases,
            seed=self.state.seed,
        )

        if num_tests < 1:
            self.reporter.skip_all(self.level, prog_name)
        else:
            if self.level > 0:
                self.reporter.subtest(self.level, prog_name)
            self.reporter.plan(self.level, num_tests)
        self.sink.flush_stdout()

        order = permutation(num_tests, self._rng)
        for number, index in enumerate(order, start=1):
            test = self.registry[index]
            self.summary.order.append(test.name)
            if isinstance(test, ParameterizedCase):
                passed = self._run_parameterized(number, test)
            else:
                passed = self._run_simple(number, test)
            if not passed:
                self.state.failures += 1

        self.summary.failed = self.state.failures
        logger.info("%d of %d tests failed", self.state.failures, num_tests)

        if self.state.failures != 0:
            return EXIT_FAILURE
        return EXIT_SUCCESS

    def finish(self, ret: int) -> int:
        """Close the run; a detected leak fails it whatever ``ret`` is."""
        if self.config.leak_check and self.leak_detector.query_leaks(self._print_error) <= 0:
            logger.info("Leak detector reported leaks")
            ret = EXIT_FAILURE

        self.sink.close()
        return ret

    def main(self, prog_name: str) -> int:
        """Set up, run every test and finish."""
        self.setup()
        return self.finish(self.run(prog_name))

    def _run_simple(self, number: int, test: SimpleCase) -> bool:
        self.state.title = test.name
        result = self._invoke(test.fn)

        self.reporter.result(self.level, result.passed, number, self.state.title)
        self.reporter.flush()
        self._settle(result.passed)
        return result.passed

    def _run_parameterized(self, number: int, test: ParameterizedCase) -> bool:
        failed_inner = 0

        self.state.level += LEVEL_STEP
        if test.subtest:
            self.reporter.subtest(self.level, test.name)
            self.reporter.plan(self.level, test.count)
            self.sink.flush_stdout()

        step = choose_step(test.count, self._rng)
        logger.debug("Running %s: %d cases, step %d", test.name, test.count, step)

        for sub_number, index in enumerate(sub_indices(test.count, step), start=1):
            self.state.title = None
            result = self._invoke(test.fn, index)

            if not result.passed:
                failed_inner += 1
            self._settle(result.passed)

            if test.subtest:
                title = self.state.title
                if title is None:
                    title = f"iteration {index + 1}"
                self.reporter.result(self.level, result.passed, sub_number, title)
                self.sink.flush_stdout()

        self.state.level -= LEVEL_STEP
        passed = failed_inner == 0
        self.reporter.result(self.level, passed, number, test.name)
        self.sink.flush_stdout()
        return passed

    def _invoke(self, fn, *args) -> InvocationResult:
        result = classify(fn(*args))
        if result.title is not None:
            self.state.title = result.title

        self.reporter.flush()
        logger.debug(
            "%s%r: %s", getattr(fn, "__name__", fn), args, "passed" if result.passed else "failed"
        )
        return result

    def _settle(self, passed: bool) -> None:
        if passed:
            self.error_queue.clear()
        else:
            self.error_queue.print_all(self._print_error)

    def _print_error(self, message: str) -> None:
        self.reporter.diagnostic(self.level, message)
