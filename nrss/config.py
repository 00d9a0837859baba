"""
Search settings and their defaults.
"""
from dataclasses import dataclass
from typing import Optional

from .errors import UsageError
from .lattice import MARGIN

# --- DEFAULTS ---
LATTICE_BITS   = 12           # lattice is 2^12 x 2^12 cells
START_X        = 64           # left edge of the first engine
MIN_GAP        = 7            # y distance between consecutive engines
MAX_GAP        = 12
ENGINE         = '2o$o$2o!'
ENGINE_PHASES  = 100
CHECK_INTERVAL = 1            # generations between pattern snapshots
STATUS_EVERY   = 10.0         # seconds between status lines


def default_start_y(lattice_bits):
    return (1 << lattice_bits) // 2 - 64


@dataclass
class SearchConfig:
    engine_count: int
    max_x_sep: int
    max_period: int
    randomize: bool
    state_file: str
    seed: Optional[int] = None
    check_interval: int = CHECK_INTERVAL
    min_gap: int = MIN_GAP
    max_gap: int = MAX_GAP
    phases: int = ENGINE_PHASES
    engine: str = ENGINE
    rule_file: Optional[str] = None
    lattice_bits: int = LATTICE_BITS
    start_x: int = START_X
    start_y: Optional[int] = None
    skip_oscillators: bool = True
    reduce_speeds: bool = True
    suppress_duplicates: bool = True
    start_index: int = 0
    status_every: float = STATUS_EVERY
    max_soups: Optional[int] = None
    stats_csv: Optional[str] = None

    def __post_init__(self):
        if self.start_y is None:
            self.start_y = default_start_y(self.lattice_bits)

    def validate(self, phase_height=0, phase_width=0):
        """
        Check settings, optionally against the largest engine phase.
        Raises UsageError on the first problem found.
        """
        for name in ('engine_count', 'max_x_sep', 'max_period', 'start_index'):
            if getattr(self, name) < 0:
                raise UsageError(f'{name} must be non-negative')
        if self.check_interval < 1:
            raise UsageError('check_interval must be at least 1')
        if self.phases < 1:
            raise UsageError('phases must be at least 1')
        if not 0 <= self.min_gap <= self.max_gap:
            raise UsageError(f'need 0 <= min_gap <= max_gap, got {self.min_gap} and {self.max_gap}')
        if not 3 <= self.lattice_bits <= 16:
            raise UsageError('lattice_bits must be between 3 and 16')
        if self.max_soups is not None and self.max_soups < 0:
            raise UsageError('max_soups must be non-negative')
        if self.randomize and self.start_index:
            raise UsageError('start_index only applies to exhaustive searches')
        size = 1 << self.lattice_bits
        # the soup must fit with room to grow by one cell before reaching the margin
        lowest = self.start_y + max(self.engine_count - 1, 0) * self.max_gap + phase_height
        rightmost = self.start_x + self.max_x_sep + phase_width
        if self.start_x < MARGIN + 1 or self.start_y < MARGIN + 1:
            raise UsageError(f'start position ({self.start_x}, {self.start_y}) is inside the lattice margin')
        if lowest > size - MARGIN - 1 or rightmost > size - MARGIN - 1:
            raise UsageError(f'{self.engine_count} engines do not fit a {size}x{size} lattice')
