"""
Soup search for horizontal non-adjustable reduced speed spaceships (NRSS)
in two-state Moore-neighbourhood cellular automata.
"""
from .config import SearchConfig
from .detector import PatternCache, PatternSnapshot, Speed, reduce_speed
from .lattice import Lattice
from .ledger import Ledger
from .noise import NoiseSource
from .phases import PhaseTable
from .rules import TransitionTable
from .search import SearchContext

__version__ = '0.1.0'
