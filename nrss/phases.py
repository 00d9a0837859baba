"""
Precomputed phases of the seed engine.
"""
from collections import namedtuple

import numpy as np

from .errors import SimulationAbort
from .lattice import Lattice
from . import rle

EnginePhase = namedtuple('EnginePhase', ['height', 'width', 'bits'])


def _freeze(bits):
    bits = np.array(bits, dtype=np.uint8)
    bits.flags.writeable = False
    return EnginePhase(bits.shape[0], bits.shape[1], bits)


class PhaseTable:
    """Read-only sequence of engine shapes, phase k being the engine after k steps."""

    def __init__(self, phases, lattice=None):
        self.phases = tuple(phases)
        # scratch lattice left on the phase after the last one, used by closes()
        self._lattice = lattice

    def __len__(self):
        return len(self.phases)

    def __getitem__(self, k):
        return self.phases[k]

    def __iter__(self):
        return iter(self.phases)

    @property
    def max_height(self):
        return max(p.height for p in self.phases)

    @property
    def max_width(self):
        return max(p.width for p in self.phases)

    @classmethod
    def build(cls, table, engine, count, lattice_bits=12):
        """
        Evolve an isolated engine and record its shape after every step.
        Args:
            table (TransitionTable): rule to evolve under
            engine: RLE string or 2D 0/1 array of the seed shape
            count (int): number of phases to record
            lattice_bits (int): scratch lattice size, the engine starts at its centre
        """
        if count < 1:
            raise ValueError('an engine needs at least one phase')
        if isinstance(engine, str):
            engine, _ = rle.decode(engine)
        lattice = Lattice(table, lattice_bits, lattice_bits)
        lattice.place(engine, lattice.height // 2, lattice.width // 2)
        if lattice.empty:
            raise ValueError('engine has no live cells')
        phases = [_freeze(lattice.content())]
        for k in range(1, count + 1):
            try:
                alive = lattice.step()
            except SimulationAbort as e:
                raise ValueError(f'engine grew out of a {lattice.height}x{lattice.width} '
                                 f'lattice after {k} steps') from e
            if not alive:
                raise ValueError(f'engine died after {k} steps')
            if k < count:
                phases.append(_freeze(lattice.content()))
        return cls(phases, lattice)

    def closes(self):
        """True if the phase after the last recorded one is the engine's phase 0 again."""
        if self._lattice is None:
            raise ValueError('phase table was not built from an engine')
        return np.array_equal(self._lattice.content(), self.phases[0].bits)

    def release(self):
        if self._lattice is not None:
            self._lattice.clear()
            self._lattice = None
