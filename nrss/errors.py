"""
Exception types for the NRSS search.
Fatal errors end the process from the command line entry point; SimulationAbort is
local to one soup and only ever ends that trial.
"""


class NRSSError(Exception):
    """Base class for errors raised by the search."""


class UsageError(NRSSError):
    """Command line arguments or search settings do not make sense."""


class EntropyError(NRSSError):
    """The operating system entropy source could not be read."""


class RuleError(NRSSError):
    """A transition table could not be loaded or built."""


class RLEError(NRSSError):
    """Malformed run-length encoded pattern."""


class LedgerError(NRSSError):
    """The state file could not be read, written or parsed."""


class SimulationAbort(NRSSError):
    """A trial was abandoned before reaching a conclusion."""


class UnboundedGrowth(SimulationAbort):
    """The pattern reached the lattice margin."""

    def __init__(self, box):
        super().__init__(f'pattern reached the lattice margin at box {box}')
        self.box = box
