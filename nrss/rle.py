"""
Run-length encoded pattern notation: b = dead run, o = live run, $ = end of row,
! = end of pattern, with an optional "x = W, y = H, rule = R" header line.
"""
import re

import numpy as np

from .errors import RLEError

LINE_WIDTH = 70

_HEADER = re.compile(r'^x\s*=\s*(\d+)\s*,\s*y\s*=\s*(\d+)(?:\s*,\s*rule\s*=\s*(\S+))?\s*$')
_TOKEN = re.compile(r'(\d*)([bo$!])')


def _wrap(tokens):
    lines = []
    line = ''
    for tok in tokens:
        if len(line) + len(tok) > LINE_WIDTH:
            lines.append(line)
            line = ''
        line += tok
    lines.append(line)
    return lines


def encode(cells, rule):
    """Return header and body for a 2D 0/1 array."""
    cells = np.asarray(cells)
    h, w = cells.shape if cells.ndim == 2 else (0, 0)
    tokens = []
    blank_rows = 0
    for i in range(h):
        row = []
        for j in range(w):
            ch = 'o' if cells[i, j] else 'b'
            if row and row[-1][0] == ch:
                row[-1][1] += 1
            else:
                row.append([ch, 1])
        # trailing dead cells are implied
        if row and row[-1][0] == 'b':
            row.pop()
        if not row:
            blank_rows += 1
            continue
        ends = blank_rows + (1 if tokens else 0)
        if ends:
            tokens.append((str(ends) if ends > 1 else '') + '$')
        blank_rows = 0
        tokens.extend((str(n) if n > 1 else '') + ch for ch, n in row)
    tokens.append('!')
    header = f'x = {w}, y = {h}, rule = {rule}'
    return header + '\n' + '\n'.join(_wrap(tokens)) + '\n'


def decode(text):
    """
    Parse RLE text into (cells, rule). The header is optional; without it the
    pattern is sized to its body and rule is None.
    """
    lines = [ln.strip() for ln in text.strip().splitlines()]
    lines = [ln for ln in lines if ln and not ln.startswith('#')]
    if not lines:
        raise RLEError('empty pattern')
    width = height = None
    rule = None
    m = _HEADER.match(lines[0])
    if m:
        width, height = int(m.group(1)), int(m.group(2))
        rule = m.group(3)
        lines = lines[1:]
    elif lines[0].startswith('x'):
        raise RLEError(f'bad header line: {lines[0]!r}')
    body = ''.join(lines).replace(' ', '')
    if '!' not in body:
        raise RLEError('pattern has no terminating "!"')
    body = body[:body.index('!') + 1]

    live = []
    r = c = 0
    pos = 0
    cols = 0
    while pos < len(body):
        m = _TOKEN.match(body, pos)
        if not m:
            raise RLEError(f'unexpected {body[pos]!r} at offset {pos}')
        pos = m.end()
        count = int(m.group(1)) if m.group(1) else 1
        ch = m.group(2)
        if ch == 'o':
            live.extend((r, c + k) for k in range(count))
            c += count
        elif ch == 'b':
            c += count
        elif ch == '$':
            r += count
            c = 0
        else:
            break
        cols = max(cols, c)
    rows = r + 1 if c else r

    if width is None:
        width, height = cols, rows
    elif cols > width or rows > height:
        raise RLEError(f'pattern body is {cols}x{rows} but header says {width}x{height}')
    cells = np.zeros((height, width), dtype=np.uint8)
    for i, j in live:
        cells[i, j] = 1
    return cells, rule
