#!/usr/bin/env python3
"""
Command line entry point:

    nrss <engine-count> <max-x-separation> <max-period> <randomize-0-or-1> <state-file>

With randomize off every combination of engine phases and offsets is tried once and
the program exits when they run out. Ctrl-C stops after the current soup.
"""
import argparse
import signal
import sys

from . import config as defaults
from .config import SearchConfig
from .errors import NRSSError, UsageError
from .search import SearchContext


class ArgumentParser(argparse.ArgumentParser):
    """argparse that exits with status 1 on usage errors."""

    def error(self, message):
        self.print_usage(sys.stderr)
        self.exit(1, f'{self.prog}: error: {message}\n')


def non_negative(value):
    try:
        n = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f'{value!r} is not an integer')
    if n < 0:
        raise argparse.ArgumentTypeError(f'{value!r} is negative')
    return n


def build_parser():
    parser = ArgumentParser(prog='nrss', description='Search for horizontal NRSS in soups of engines')
    parser.add_argument('engine_count', type=non_negative, help='number of engines per soup')
    parser.add_argument('max_x_sep', type=non_negative, help='largest x offset of an engine')
    parser.add_argument('max_period', type=non_negative, help='generations to run each soup for')
    parser.add_argument('randomize', type=int, choices=[0, 1], help='1 for random soups, 0 to try every soup')
    parser.add_argument('state_file', type=str, help='ledger of discovered speeds, created if missing')
    parser.add_argument('--seed', type=int, default=None,
                        help='seed for random soups instead of the system entropy source')
    parser.add_argument('--check_interval', type=int, default=defaults.CHECK_INTERVAL,
                        help='generations between pattern snapshots')
    parser.add_argument('--min_gap', type=int, default=defaults.MIN_GAP, help='smallest y gap between engines')
    parser.add_argument('--max_gap', type=int, default=defaults.MAX_GAP, help='largest y gap between engines')
    parser.add_argument('--phases', type=int, default=defaults.ENGINE_PHASES, help='number of engine phases')
    parser.add_argument('--engine', type=str, default=defaults.ENGINE, help='engine pattern in RLE')
    parser.add_argument('--rule', type=str, default=None, help='JSON transition table (default: built-in rule)')
    parser.add_argument('--lattice_bits', type=int, default=defaults.LATTICE_BITS,
                        help='lattice is 2^bits cells on a side')
    parser.add_argument('--start_x', type=int, default=defaults.START_X, help='x of the first engine')
    parser.add_argument('--start_y', type=int, default=None, help='y of the first engine (default: mid-lattice - 64)')
    parser.add_argument('--keep_oscillators', action='store_true', help='record oscillators as 0c/p')
    parser.add_argument('--no_reduce', action='store_true', help='do not divide speeds by gcd(period, dx)')
    parser.add_argument('--allow_duplicates', action='store_true', help='record speeds already in the ledger')
    parser.add_argument('--start_index', type=non_negative, default=0,
                        help='skip this many soups of an exhaustive search')
    parser.add_argument('--status_every', type=float, default=defaults.STATUS_EVERY,
                        help='seconds between status lines')
    parser.add_argument('--max_soups', type=non_negative, default=None, help='stop after this many soups')
    parser.add_argument('--stats_csv', type=str, default=None, help='append a run summary row to this CSV')
    return parser


def parse_args(argv=None):
    return build_parser().parse_args(argv)


def build_config(args):
    return SearchConfig(
        engine_count=args.engine_count,
        max_x_sep=args.max_x_sep,
        max_period=args.max_period,
        randomize=bool(args.randomize),
        state_file=args.state_file,
        seed=args.seed,
        check_interval=args.check_interval,
        min_gap=args.min_gap,
        max_gap=args.max_gap,
        phases=args.phases,
        engine=args.engine,
        rule_file=args.rule,
        lattice_bits=args.lattice_bits,
        start_x=args.start_x,
        start_y=args.start_y,
        skip_oscillators=not args.keep_oscillators,
        reduce_speeds=not args.no_reduce,
        suppress_duplicates=not args.allow_duplicates,
        start_index=args.start_index,
        status_every=args.status_every,
        max_soups=args.max_soups,
        stats_csv=args.stats_csv,
    )


def main(argv=None):
    parser = build_parser()
    args = parser.parse_args(argv)
    cfg = build_config(args)
    try:
        ctx = SearchContext(cfg)
    except UsageError as e:
        parser.print_usage(sys.stderr)
        print(f'nrss: {e}', file=sys.stderr)
        return 1
    except NRSSError as e:
        print(f'nrss: {e}', file=sys.stderr)
        return 1

    def on_signal(signum, frame):
        print(f'\nReceived signal {signum}, stopping after the current soup')
        ctx.request_stop()

    previous = {sig: signal.signal(sig, on_signal) for sig in (signal.SIGINT, signal.SIGTERM)}
    try:
        ctx.run()
        if cfg.stats_csv:
            ctx.write_stats(cfg.stats_csv)
    except NRSSError as e:
        print(f'nrss: {e}', file=sys.stderr)
        return 1
    except OSError as e:
        print(f'nrss: could not write stats: {e}', file=sys.stderr)
        return 1
    finally:
        for sig, handler in previous.items():
            signal.signal(sig, handler)
        ctx.close()
    if ctx.exhausted:
        print('Search space exhausted')
    return 0


if __name__ == '__main__':
    sys.exit(main())
