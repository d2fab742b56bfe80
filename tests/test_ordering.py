"""Tests for test and sub-case ordering."""

import random
from collections import Counter
from math import gcd

import pytest

from taprunner.core.ordering import choose_step, permutation, sub_indices


class TestPermutation:
    """Tests for the top-level order."""

    def test_identity_without_generator(self):
        assert permutation(5) == [0, 1, 2, 3, 4]

    def test_empty_and_single(self):
        rng = random.Random(1)
        assert permutation(0, rng) == []
        assert permutation(1, rng) == [0]

    def test_is_a_permutation(self):
        order = permutation(50, random.Random(7))
        assert sorted(order) == list(range(50))

    def test_reproducible_for_seed(self):
        """Test that the same seed gives the same order."""
        assert permutation(20, random.Random(1234)) == permutation(20, random.Random(1234))

    def test_backward_fisher_yates(self):
        """Test that the shuffle draws j in [0, i] from the last index down."""
        seed = 99
        expected = list(range(6))
        rng = random.Random(seed)
        for i in range(5, 0, -1):
            j = rng.randrange(i + 1)
            expected[i], expected[j] = expected[j], expected[i]

        assert permutation(6, random.Random(seed)) == expected

    def test_all_permutations_reachable(self):
        """Test that every ordering of three tests shows up."""
        rng = random.Random(5)
        seen = Counter(tuple(permutation(3, rng)) for _ in range(3000))
        assert len(seen) == 6
        assert min(seen.values()) > 350


class TestChooseStep:
    """Tests for the sub-case stride."""

    def test_step_one_without_generator(self):
        assert choose_step(10) == 1

    @pytest.mark.parametrize("count", [0, 1, 2])
    def test_step_one_for_small_counts(self, count):
        assert choose_step(count, random.Random(3)) == 1

    @pytest.mark.parametrize("count", [3, 4, 6, 10, 12, 30, 97])
    def test_step_is_coprime(self, count):
        rng = random.Random(count)
        for _ in range(50):
            step = choose_step(count, rng)
            assert 1 <= step < count
            assert gcd(count, step) == 1

    def test_reproducible_for_seed(self):
        rng_a, rng_b = random.Random(8), random.Random(8)
        steps_a = [choose_step(12, rng_a) for _ in range(10)]
        steps_b = [choose_step(12, rng_b) for _ in range(10)]
        assert steps_a == steps_b


class TestSubIndices:
    """Tests for the sub-case walk."""

    def test_sequential(self):
        assert list(sub_indices(4)) == [0, 1, 2, 3]

    def test_empty(self):
        assert list(sub_indices(0)) == []

    def test_walks_by_step(self):
        assert list(sub_indices(5, 2)) == [0, 2, 4, 1, 3]

    @pytest.mark.parametrize("count", [3, 4, 5, 8, 9, 12, 25])
    def test_coprime_step_visits_every_index_once(self, count):
        for step in range(1, count):
            if gcd(count, step) != 1:
                continue
            assert sorted(sub_indices(count, step)) == list(range(count))
