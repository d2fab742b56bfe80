"""Tests for the data models."""

import pytest

from taprunner.models import (
    InvocationResult,
    ParameterizedCase,
    RunSummary,
    SimpleCase,
    Verdict,
    classify,
)


class TestVerdict:
    """Tests for Verdict enum."""

    def test_values(self):
        assert Verdict.OK.value == "ok"
        assert Verdict.NOT_OK.value == "not ok"

    def test_of(self):
        assert Verdict.of(True) is Verdict.OK
        assert Verdict.of(False) is Verdict.NOT_OK


class TestClassify:
    """Tests for classify."""

    @pytest.mark.parametrize("value", [True, 1, -1, "yes", [0]])
    def test_truthy_passes(self, value):
        assert classify(value) == InvocationResult(passed=True)

    @pytest.mark.parametrize("value", [False, 0, None, "", []])
    def test_falsy_fails(self, value):
        assert classify(value) == InvocationResult(passed=False)

    def test_result_passes_through(self):
        result = InvocationResult(False, title="t")
        assert classify(result) is result

    def test_result_truthiness(self):
        assert InvocationResult(True)
        assert not InvocationResult(False, title="x")


class TestDescriptors:
    """Tests for the descriptor types."""

    def test_num_cases(self):
        assert SimpleCase("a", lambda: True).num_cases == 1
        assert ParameterizedCase("b", lambda i: True, 6).num_cases == 6

    def test_subtest_default(self):
        assert ParameterizedCase("b", lambda i: True, 2).subtest is False


class TestRunSummary:
    """Tests for RunSummary."""

    def test_default_values(self):
        summary = RunSummary()
        assert summary.total == 0
        assert summary.passed == 0
        assert summary.order == []

    def test_to_dict(self):
        summary = RunSummary(total=3, failed=1, num_test_cases=10, seed=4, order=["a"])
        d = summary.to_dict()
        assert d["passed"] == 2
        assert d["num_test_cases"] == 10
        assert d["order"] == ["a"]
