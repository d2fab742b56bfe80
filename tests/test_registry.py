"""Tests for test registration."""

import pytest

from taprunner.core.registry import CapacityExceededError, InvalidTestError, Registry
from taprunner.models import ParameterizedCase, SimpleCase


def passing():
    return True


def passing_index(i):
    return True


class TestRegistry:
    """Tests for Registry."""

    def test_starts_empty(self):
        registry = Registry()
        assert len(registry) == 0
        assert registry.num_test_cases == 0
        assert registry.capacity == 1024

    def test_register_simple(self):
        """Test registering a simple test."""
        registry = Registry()
        case = registry.register("simple", passing)

        assert isinstance(case, SimpleCase)
        assert registry[0] is case
        assert registry.num_test_cases == 1

    def test_register_parameterized(self):
        """Test registering a parameterized test."""
        registry = Registry()
        case = registry.register_parameterized("param", passing_index, 5, subtest=True)

        assert isinstance(case, ParameterizedCase)
        assert case.count == 5
        assert case.subtest is True
        assert registry.num_test_cases == 5

    def test_registration_order_preserved(self):
        """Test that descriptors keep registration order."""
        registry = Registry()
        for name in ["c", "a", "b"]:
            registry.register(name, passing)

        assert [t.name for t in registry] == ["c", "a", "b"]
        assert [t.name for t in registry.descriptors] == ["c", "a", "b"]

    def test_zero_count_allowed(self):
        registry = Registry()
        registry.register_parameterized("empty", passing_index, 0)
        assert len(registry) == 1
        assert registry.num_test_cases == 0

    def test_negative_count_rejected(self):
        registry = Registry()
        with pytest.raises(InvalidTestError):
            registry.register_parameterized("bad", passing_index, -1)
        assert len(registry) == 0

    def test_capacity_exceeded(self):
        """Test that registering past capacity fails at registration time."""
        registry = Registry(capacity=2)
        registry.register("one", passing)
        registry.register_parameterized("two", passing_index, 3)

        with pytest.raises(CapacityExceededError):
            registry.register("three", passing)
        with pytest.raises(CapacityExceededError):
            registry.register_parameterized("four", passing_index, 1)

        assert len(registry) == 2
        assert registry.num_test_cases == 4

    def test_invalid_capacity(self):
        with pytest.raises(ValueError):
            Registry(capacity=0)

    def test_rejects_empty_name(self):
        with pytest.raises(InvalidTestError):
            Registry().register("", passing)

    def test_rejects_non_callable(self):
        with pytest.raises(InvalidTestError):
            Registry().register("not callable", 42)
