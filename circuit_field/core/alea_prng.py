"""
Seeded random source for field generation.

Johannes Baagøe's Alea generator, kept in pure Python so that a given
seed always yields the same sequence on every platform. Every random
decision made while growing wires goes through one instance of this
class.
"""

from typing import Union

Seed = Union[int, str]


def _uint32(n):
    """Convert to unsigned 32-bit integer."""
    return int(n) & 0xFFFFFFFF


class _Mash:
    """Alea's string hash used to derive the initial state from a seed."""

    def __init__(self):
        self.n = 0xEFC8249D

    def __call__(self, data) -> float:
        for char in str(data):
            self.n += ord(char)
            h = 0.02519603282416938 * self.n
            self.n = _uint32(h)
            h -= self.n
            h *= self.n
            self.n = _uint32(h)
            h -= self.n
            self.n += h * 0x100000000  # 2^32
        return _uint32(self.n) * 2.3283064365386963e-10  # 2^-32


class AleaPRNG:
    """
    Deterministic PRNG with the small interface the generator needs.

    ``random()`` draws a float in [0, 1), ``random_int(n)`` an integer in
    [0, n) and ``set_seed()`` restarts the sequence.
    """

    def __init__(self, seed: Seed = "circuit42"):
        self.call_count = 0
        self.seed = seed
        self.set_seed(seed)

    def set_seed(self, seed: Seed) -> None:
        """Reinitialise the generator state from ``seed``."""
        mash = _Mash()
        self.s0 = mash(" ")
        self.s1 = mash(" ")
        self.s2 = mash(" ")
        self.c = 1

        self.s0 -= mash(seed)
        if self.s0 < 0:
            self.s0 += 1
        self.s1 -= mash(seed)
        if self.s1 < 0:
            self.s1 += 1
        self.s2 -= mash(seed)
        if self.s2 < 0:
            self.s2 += 1

        self.seed = seed
        self.call_count = 0

    def random(self) -> float:
        """Generate next random number in [0, 1)."""
        self.call_count += 1
        t = 2091639 * self.s0 + self.c * 2.3283064365386963e-10  # 2^-32
        self.s0 = self.s1
        self.s1 = self.s2
        self.c = int(t)
        self.s2 = t - self.c
        return self.s2

    def random_int(self, n: int) -> int:
        """Random integer in [0, n)."""
        return int(self.random() * n)
