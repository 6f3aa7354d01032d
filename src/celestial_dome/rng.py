"""
Deterministic random source for procedural catalog generation.

SplitMix64 (Steele, Lea & Flood 2014) is a counter-based 64-bit generator:
state advances by a fixed odd constant and each output is a bijective mix of
the counter. Implemented with plain integer arithmetic so the stream is
identical on every platform and interpreter.
"""

_MASK64 = 0xFFFFFFFFFFFFFFFF
_GOLDEN_GAMMA = 0x9E3779B97F4A7C15


def splitmix64(x: int) -> int:
    """Mix one 64-bit value (the SplitMix64 finalizer applied to x + gamma)."""
    x = (x + _GOLDEN_GAMMA) & _MASK64
    z = x
    z = (z ^ (z >> 30)) * 0xBF58476D1CE4E5B9 & _MASK64
    z = (z ^ (z >> 27)) * 0x94D049BB133111EB & _MASK64
    return (z ^ (z >> 31)) & _MASK64


def u01_from_u64(u: int) -> float:
    """Map a 64-bit integer to a double in [0, 1) using its top 53 bits."""
    return (u >> 11) * (1.0 / (1 << 53))


class SplitMix64:
    """Seeded SplitMix64 stream."""

    def __init__(self, seed: int):
        self.seed = int(seed) & _MASK64
        self._state = self.seed

    def next_u64(self) -> int:
        z = splitmix64(self._state)
        self._state = (self._state + _GOLDEN_GAMMA) & _MASK64
        return z

    def random(self) -> float:
        """Uniform double in [0, 1)."""
        return u01_from_u64(self.next_u64())

    def uniform(self, low: float, high: float) -> float:
        """Uniform double in [low, high)."""
        return low + self.random() * (high - low)

    def randrange(self, n: int) -> int:
        """Uniform integer in [0, n)."""
        if n <= 0:
            raise ValueError("randrange() needs a positive bound")
        return int(self.random() * n)
