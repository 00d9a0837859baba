"""
Soup construction: K copies of the engine at chosen phases and offsets, either drawn
at random or enumerated exhaustively.

Engine 0 always starts at (start_x, start_y). Engine i > 0 sits gap_i rows below
engine i-1 with gap_i in [min_gap, max_gap], and x in [start_x, start_x + max_x_sep].
Overlapping engines are OR-merged, so the soup does not depend on placement order.
"""
from collections import namedtuple

Placement = namedtuple('Placement', ['x', 'y', 'phase'])


class MixedRadixCounter:
    """
    Counts through every digit vector with digit i in [0, radices[i]).
    Digit 0 is the least significant. Iterating yields each vector exactly once,
    starting from the all-zero vector, and stops after the last one.
    """

    def __init__(self, radices, start=0):
        self.radices = [int(r) for r in radices]
        if any(r < 1 for r in self.radices):
            raise ValueError(f'radices must be positive, got {self.radices}')
        self.total = 1
        for r in self.radices:
            self.total *= r
        self.seek(start)

    def seek(self, index):
        """Position the counter so the next vector yielded is number index."""
        if not 0 <= index <= self.total:
            raise ValueError(f'index {index} outside [0, {self.total}]')
        self.index = index
        self.digits = []
        for r in self.radices:
            self.digits.append(index % r)
            index //= r

    def __iter__(self):
        return self

    def __next__(self):
        if self.index >= self.total:
            raise StopIteration
        current = tuple(self.digits)
        self.index += 1
        for i, r in enumerate(self.radices):
            self.digits[i] += 1
            if self.digits[i] < r:
                break
            self.digits[i] = 0
        return current


class RandomSoupBuilder:
    def __init__(self, phases, config, noise):
        self.phases = phases
        self.config = config
        self.noise = noise
        self.total = None
        self.index = 0

    def next_soup(self):
        cfg = self.config
        self.index += 1
        if cfg.engine_count == 0:
            return []
        placements = [Placement(cfg.start_x, cfg.start_y, 0)]
        y = cfg.start_y
        for _ in range(1, cfg.engine_count):
            phase = self.noise.uniform(len(self.phases))
            x = cfg.start_x + self.noise.uniform(cfg.max_x_sep + 1)
            y += self.noise.randint(cfg.min_gap, cfg.max_gap)
            placements.append(Placement(x, y, phase))
        return placements


class ExhaustiveSoupBuilder:
    def __init__(self, phases, config):
        self.phases = phases
        self.config = config
        self.slots = max(config.engine_count - 1, 0)
        # per free engine: phase, then x offset, then y gap
        radices = [len(phases), config.max_x_sep + 1, config.max_gap - config.min_gap + 1] * self.slots
        self.counter = MixedRadixCounter(radices, start=config.start_index)

    @property
    def total(self):
        return self.counter.total

    @property
    def index(self):
        return self.counter.index

    def next_soup(self):
        """Next configuration, or None once every configuration has been produced."""
        try:
            digits = next(self.counter)
        except StopIteration:
            return None
        cfg = self.config
        if cfg.engine_count == 0:
            return []
        placements = [Placement(cfg.start_x, cfg.start_y, 0)]
        y = cfg.start_y
        for slot in range(self.slots):
            phase, dx, gap = digits[3 * slot:3 * slot + 3]
            y += cfg.min_gap + gap
            placements.append(Placement(cfg.start_x + dx, y, phase))
        return placements


def compose(lattice, phases, placements):
    """Write the engines into an empty lattice; the lattice box becomes the soup's box."""
    for p in placements:
        lattice.place(phases[p.phase].bits, p.y, p.x)


def describe(placements):
    return ' '.join(f'{p.x},{p.y},{p.phase}' for p in placements)
