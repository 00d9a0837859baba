"""
Per-soup pattern cache that recognises oscillators and horizontal spaceships.

Every sampled generation the bounding box content is packed and hashed. A new
snapshot is compared against earlier ones from the most recent back; the first one
with the same shape decides the outcome:
    same position          -> oscillator, period = generation gap
    moved only along a row -> spaceship, (period, dx) optionally reduced by their gcd
    moved vertically       -> ignored, the search only looks for horizontal ships
"""
import math
from collections import defaultdict, namedtuple

import numpy as np

MASK64 = (1 << 64) - 1

OSCILLATOR = 'oscillator'
SPACESHIP = 'spaceship'


class Speed(namedtuple('Speed', ['dx', 'period'])):
    __slots__ = ()

    def __str__(self):
        return f'{self.dx}c/{self.period}'


Match = namedtuple('Match', ['kind', 'speed', 'generation'])


def reduce_speed(period, dx, reduce=True):
    """(period, dx) -> Speed, divided through by gcd(period, dx) when reduce is set."""
    if reduce and dx:
        g = math.gcd(period, dx)
        period, dx = period // g, dx // g
    return Speed(dx, period)


def rolling_hash(packed):
    """64-bit hash over packed bits, consumed as little-endian 32-bit words in groups of four."""
    n = -(-len(packed) // 16) * 4
    words = np.zeros(n, dtype='<u4')
    words.view(np.uint8)[:len(packed)] = packed
    h = 0
    for a, b, c, d in words.reshape(-1, 4).tolist():
        h = (h + (a << 32)) & MASK64
        h = (h + b) & MASK64
        h ^= c << 32
        h ^= d
        h = ((h << 16) | (h >> 48)) & MASK64
    return h


class PatternSnapshot:
    __slots__ = ('generation', 'top', 'left', 'height', 'width', 'population', 'packed', 'hash')

    def __init__(self, content, top, left, generation):
        content = np.asarray(content, dtype=np.uint8)
        self.generation = generation
        self.top = top
        self.left = left
        self.height, self.width = content.shape
        self.population = int(content.sum())
        self.packed = np.packbits(content, axis=None, bitorder='little')
        self.hash = rolling_hash(self.packed)

    @classmethod
    def from_lattice(cls, lattice, generation):
        top, _, left, _ = lattice.box
        return cls(lattice.content(), top, left, generation)

    def key(self):
        return (self.hash, self.population, self.height, self.width)

    def unpack(self):
        bits = np.unpackbits(self.packed, count=self.height * self.width, bitorder='little')
        return bits.reshape(self.height, self.width)


def compare(older, newer, reduce=True):
    """Match describing how newer repeats older, or None."""
    if older.key() != newer.key():
        return None
    if not np.array_equal(older.packed, newer.packed):
        return None
    if newer.top != older.top:
        return None
    dx = abs(newer.left - older.left)
    period = newer.generation - older.generation
    if dx == 0:
        return Match(OSCILLATOR, Speed(0, period), newer.generation)
    return Match(SPACESHIP, reduce_speed(period, dx, reduce), newer.generation)


class PatternCache:
    def __init__(self, reduce_speeds=True):
        self.reduce_speeds = reduce_speeds
        # snapshots bucketed by key, each bucket in generation order
        self._buckets = defaultdict(list)
        self.count = 0

    def __len__(self):
        return self.count

    def add(self, snapshot):
        """Store snapshot and return the Match against the nearest earlier repeat, if any."""
        bucket = self._buckets[snapshot.key()]
        found = None
        for older in reversed(bucket):
            found = compare(older, snapshot, self.reduce_speeds)
            if found is not None:
                break
        bucket.append(snapshot)
        self.count += 1
        return found

    def clear(self):
        self._buckets.clear()
        self.count = 0
