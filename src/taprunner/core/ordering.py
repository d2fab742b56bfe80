"""Execution order of tests and of parameterized sub-cases.

Both orders draw from the same seeded generator, so a run is reproducible
given the seed and the registration order.
"""

import random
from math import gcd
from typing import Iterator, Optional


def permutation(num_tests: int, rng: Optional[random.Random] = None) -> list[int]:
    """Return the order in which registered tests are run.

    Without a generator this is registration order. Otherwise the list is
    shuffled with a backward Fisher-Yates pass.
    """
    order = list(range(num_tests))
    if rng is None:
        return order

    for i in range(num_tests - 1, 0, -1):
        j = rng.randrange(i + 1)
        order[i], order[j] = order[j], order[i]
    return order


def choose_step(count: int, rng: Optional[random.Random] = None) -> int:
    """Pick the stride used to walk the sub-cases of a parameterized test.

    The stride must be coprime with ``count``; candidates are drawn until
    one is.
    """
    if rng is None or count < 3:
        return 1

    while True:
        step = rng.randrange(count)
        if step != 0 and gcd(count, step) == 1:
            return step


def sub_indices(count: int, step: int = 1) -> Iterator[int]:
    """Yield every index in ``[0, count)`` once, walking by ``step``."""
    for n in range(count):
        yield n * step % count
