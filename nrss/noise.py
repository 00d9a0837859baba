"""
xoshiro256** pseudo-random generator used to build randomized soups.
"""
import os
import struct

from .errors import EntropyError

MASK64 = (1 << 64) - 1


def _rotl(x, k):
    return ((x << k) | (x >> (64 - k))) & MASK64


def splitmix64(seed):
    """Yield the splitmix64 sequence for seed, used to expand a small seed into full state."""
    x = seed & MASK64
    while True:
        x = (x + 0x9E3779B97F4A7C15) & MASK64
        z = x
        z = ((z ^ (z >> 30)) * 0xBF58476D1CE4E5B9) & MASK64
        z = ((z ^ (z >> 27)) * 0x94D049BB133111EB) & MASK64
        yield z ^ (z >> 31)


class NoiseSource:
    def __init__(self, state):
        """
        Args:
            state: four 64-bit integers, not all zero
        """
        state = [int(s) & MASK64 for s in state]
        if len(state) != 4 or not any(state):
            raise ValueError('xoshiro256** needs four state words, not all zero')
        self.s = state

    @classmethod
    def from_entropy(cls):
        try:
            raw = os.urandom(32)
        except (OSError, NotImplementedError) as e:
            raise EntropyError(f'could not read the system entropy source: {e}') from e
        if len(raw) < 32:
            raise EntropyError('short read from the system entropy source')
        state = struct.unpack('<4Q', raw)
        if not any(state):
            raise EntropyError('system entropy source returned all zero bytes')
        return cls(state)

    @classmethod
    def from_seed(cls, seed):
        gen = splitmix64(seed)
        return cls([next(gen) for _ in range(4)])

    def next(self):
        s = self.s
        result = (_rotl((s[1] * 5) & MASK64, 7) * 9) & MASK64
        t = (s[1] << 17) & MASK64
        s[2] ^= s[0]
        s[3] ^= s[1]
        s[1] ^= s[2]
        s[0] ^= s[3]
        s[2] ^= t
        s[3] = _rotl(s[3], 45)
        return result

    def uniform(self, n):
        """Unbiased integer in [0, n); 0 when n is 0."""
        if n <= 0:
            return 0
        # largest multiple of n that fits in 64 bits
        limit = ((1 << 64) // n) * n
        value = self.next()
        while value >= limit:
            value = self.next()
        return value % n

    def randint(self, low, high):
        """Unbiased integer in [low, high]."""
        return low + self.uniform(high - low + 1)
