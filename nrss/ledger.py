"""
Persistent record of discovered speeds.

File layout:
    <count> NRSS
    <dx>c/<period> <dx>c/<period> ...
    <RLE block of the most recent discovery, with #C comment lines>

Each discovery rewrites the whole file through a temporary file and os.replace, then
reads it back so the in-memory state is always what is on disk. Several processes
may share one file; the last rewrite wins.
"""
import os
import re
import tempfile

from .detector import Speed
from .errors import LedgerError, RLEError
from . import rle

_COUNT = re.compile(r'^(\d+) NRSS$')
_SPEED = re.compile(r'^(\d+)c/(\d+)$')


def parse(text):
    """Return (speeds, pattern_block) from ledger text; raise LedgerError if malformed."""
    lines = text.split('\n')
    if len(lines) < 2:
        raise LedgerError('state file has no speed line')
    m = _COUNT.match(lines[0].strip())
    if not m:
        raise LedgerError(f'bad count line in state file: {lines[0]!r}')
    count = int(m.group(1))
    speeds = []
    for token in lines[1].split():
        s = _SPEED.match(token)
        if not s:
            raise LedgerError(f'bad speed {token!r} in state file')
        speeds.append(Speed(int(s.group(1)), int(s.group(2))))
    if len(speeds) != count:
        raise LedgerError(f'state file claims {count} speeds but lists {len(speeds)}')
    pattern = '\n'.join(lines[2:]).strip()
    if pattern:
        try:
            rle.decode(pattern)
        except RLEError as e:
            raise LedgerError(f'bad pattern block in state file: {e}') from e
    elif count:
        raise LedgerError('state file lists speeds but has no pattern')
    return speeds, pattern


def format_ledger(speeds, pattern):
    lines = [f'{len(speeds)} NRSS', ' '.join(str(s) for s in speeds)]
    if pattern:
        lines.append(pattern.strip())
    return '\n'.join(lines) + '\n'


class Ledger:
    def __init__(self, path, suppress_duplicates=True):
        self.path = path
        self.suppress_duplicates = suppress_duplicates
        self.speeds = []
        self.pattern = ''
        self.writes = 0

    def __len__(self):
        return len(self.speeds)

    def __contains__(self, speed):
        return Speed(*speed) in self.speeds

    def open(self):
        """Load an existing ledger, or create an empty one if the file does not exist."""
        if not os.path.exists(self.path):
            self._write([], '')
        self.load()
        return self

    def load(self):
        try:
            with open(self.path, 'r') as f:
                text = f.read()
        except OSError as e:
            raise LedgerError(f'could not read state file {self.path}: {e}') from e
        self.speeds, self.pattern = parse(text)

    def add(self, speed, cells, rule, comments=()):
        """
        Record a discovery with the pattern it was found in.
        Returns False when the speed is already known and duplicates are suppressed.
        """
        speed = Speed(*speed)
        if self.suppress_duplicates and speed in self.speeds:
            return False
        header = ''.join(f'#C {c}\n' for c in comments)
        self._write(self.speeds + [speed], header + rle.encode(cells, rule))
        self.load()
        return True

    def _write(self, speeds, pattern):
        directory = os.path.dirname(os.path.abspath(self.path))
        text = format_ledger(speeds, pattern)
        try:
            fd, tmp = tempfile.mkstemp(prefix='.nrss-', dir=directory)
            try:
                with os.fdopen(fd, 'w') as f:
                    f.write(text)
                    f.flush()
                    os.fsync(f.fileno())
                os.replace(tmp, self.path)
            except BaseException:
                os.unlink(tmp)
                raise
        except OSError as e:
            raise LedgerError(f'could not write state file {self.path}: {e}') from e
        self.writes += 1
