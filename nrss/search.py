"""
Search driver: builds soups, evolves them and records new spaceship speeds.
"""
import csv
import os
import time
from collections import Counter, namedtuple

from .detector import OSCILLATOR, SPACESHIP, PatternCache, PatternSnapshot
from .errors import SimulationAbort, UsageError
from .lattice import Lattice
from .ledger import Ledger
from .noise import NoiseSource
from .phases import PhaseTable
from .rules import TransitionTable
from .soup import ExhaustiveSoupBuilder, RandomSoupBuilder, compose, describe

DIED_OUT = 'died_out'
LINEAR_GROWTH = 'linear_growth'
OTHERS = 'others'
OUTCOMES = [DIED_OUT, LINEAR_GROWTH, OSCILLATOR, SPACESHIP, OTHERS]

TrialResult = namedtuple('TrialResult', ['category', 'generation', 'speed'])


class SearchContext:
    """
    Owns everything a search mutates: lattice, engine phases, ledger, noise source
    and the stop flag. Create it, call run(), then close().
    """

    def __init__(self, config, table=None, noise=None, out=print):
        """
        Args:
            config (SearchConfig): validated search settings
            table (TransitionTable): rule; loaded from config.rule_file or the default table
            noise (NoiseSource): generator for randomized soups; seeded from config.seed
                or the system entropy source when omitted
            out: callable used for status lines
        """
        self.config = config
        self.out = out
        config.validate()
        if table is None:
            if config.rule_file:
                table = TransitionTable.load(config.rule_file)
            else:
                table = TransitionTable.default()
        self.table = table
        try:
            self.phases = PhaseTable.build(table, config.engine, config.phases, config.lattice_bits)
        except (ValueError, IndexError) as e:
            raise UsageError(f'bad engine: {e}') from e
        config.validate(self.phases.max_height, self.phases.max_width)
        if not self.phases.closes():
            self.out(f'warning: engine does not return to phase 0 after {config.phases} steps')
        self.lattice = Lattice(table, config.lattice_bits, config.lattice_bits)
        self.ledger = Ledger(config.state_file, config.suppress_duplicates).open()

        if config.randomize:
            if noise is None:
                if config.seed is not None:
                    noise = NoiseSource.from_seed(config.seed)
                else:
                    noise = NoiseSource.from_entropy()
            self.builder = RandomSoupBuilder(self.phases, config, noise)
        else:
            try:
                self.builder = ExhaustiveSoupBuilder(self.phases, config)
            except ValueError as e:
                raise UsageError(f'bad start_index: {e}') from e
        self.noise = noise

        self.cache = PatternCache(config.reduce_speeds)
        self.outcomes = Counter()
        self.soups = 0
        self.discoveries = 0
        self.stop_requested = False
        self.exhausted = False
        self.started = None
        self._last_status = None
        self._last_soups = 0

    def request_stop(self):
        """Ask run() to return after the current soup."""
        self.stop_requested = True

    def run_soup(self, placements):
        """Evolve one soup to its first conclusive outcome or the generation cap."""
        cfg = self.config
        lattice = self.lattice
        lattice.clear()
        self.cache.clear()
        compose(lattice, self.phases, placements)
        try:
            for generation in range(1, cfg.max_period + 1):
                try:
                    alive = lattice.step()
                except SimulationAbort:
                    return TrialResult(LINEAR_GROWTH, generation, None)
                if not alive:
                    return TrialResult(DIED_OUT, generation, None)
                if generation % cfg.check_interval:
                    continue
                match = self.cache.add(PatternSnapshot.from_lattice(lattice, generation))
                if match is None:
                    continue
                if match.kind == OSCILLATOR and cfg.skip_oscillators:
                    return TrialResult(OSCILLATOR, generation, match.speed)
                self.record(match, placements)
                return TrialResult(match.kind, generation, match.speed)
            return TrialResult(OTHERS, cfg.max_period, None)
        finally:
            lattice.clear()
            self.cache.clear()

    def record(self, match, placements):
        comments = [f'{match.speed} found at generation {match.generation}',
                    f'soup {describe(placements)}']
        added = self.ledger.add(match.speed, self.lattice.content(), self.table.rule, comments)
        if added:
            self.discoveries += 1
            self.out(f'{match.speed} found ({len(self.ledger)} NRSS total)!')
        return added

    def run(self):
        """Run soups until stopped, exhausted or max_soups is reached. Returns the soup count."""
        cfg = self.config
        self.started = self._last_status = time.monotonic()
        total = self.builder.total
        mode = 'random' if cfg.randomize else f'exhaustive, {total} soups'
        self.out(f'Searching {cfg.engine_count} engines, max x separation {cfg.max_x_sep}, '
                 f'max period {cfg.max_period} ({mode}), {len(self.ledger)} NRSS known')
        while not self.stop_requested:
            if cfg.max_soups is not None and self.soups >= cfg.max_soups:
                break
            placements = self.builder.next_soup()
            if placements is None:
                self.exhausted = True
                break
            result = self.run_soup(placements)
            self.outcomes[result.category] += 1
            self.soups += 1
            self.show_status()
        self.show_status(force=True)
        return self.soups

    def show_status(self, force=False):
        now = time.monotonic()
        if not force and now - self._last_status < self.config.status_every:
            return
        current = (self.soups - self._last_soups) / max(now - self._last_status, 1e-9)
        overall = self.soups / max(now - self.started, 1e-9)
        total = self.builder.total
        if total:
            done = self.builder.index / total * 100
            self.out(f'{self.soups} soups completed ({done:.3f}%, {current:.3f} soups/second current, '
                     f'{overall:.3f} overall)')
        else:
            self.out(f'{self.soups} soups completed ({current:.3f} soups/second current, '
                     f'{overall:.3f} overall)')
        self._last_status = now
        self._last_soups = self.soups

    def write_stats(self, path):
        """Append a summary row for this run to a CSV file, writing the header first if new."""
        cfg = self.config
        elapsed = time.monotonic() - self.started if self.started is not None else 0.0
        out_dir = os.path.dirname(path)
        if out_dir and not os.path.isdir(out_dir):
            os.makedirs(out_dir, exist_ok=True)
        write_header = not os.path.isfile(path)
        with open(path, 'a', newline='') as f:
            writer = csv.writer(f)
            if write_header:
                writer.writerow(['state_file', 'engine_count', 'max_x_sep', 'max_period', 'randomize',
                                 'soups', 'discoveries', 'known', 'exhausted', 'elapsed']
                                + OUTCOMES)
            writer.writerow([cfg.state_file, cfg.engine_count, cfg.max_x_sep, cfg.max_period,
                             int(cfg.randomize), self.soups, self.discoveries, len(self.ledger),
                             int(self.exhausted), f'{elapsed:.3f}']
                            + [self.outcomes[k] for k in OUTCOMES])

    def close(self):
        self.lattice.clear()
        self.cache.clear()
        self.phases.release()
