"""
Fixed-size cell lattice with an incrementally maintained bounding box.
"""
import numpy as np

from .errors import UnboundedGrowth

# cells this close to the edge are never alive; touching them aborts the trial
MARGIN = 2


class Lattice:
    def __init__(self, table, height_bits=12, width_bits=12):
        """
        Args:
            table (TransitionTable): rule applied on every step
            height_bits (int): base-2 logarithm of the number of rows
            width_bits (int): base-2 logarithm of the number of columns
        """
        if not 3 <= height_bits <= 16 or not 3 <= width_bits <= 16:
            raise ValueError(f'lattice size 2^{height_bits} x 2^{width_bits} out of range')
        self.table = table
        self.height = 1 << height_bits
        self.width = 1 << width_bits
        self.cells = np.zeros((self.height, self.width), dtype=np.uint8)
        # (top, bottom, left, right), inclusive; None while the lattice is empty
        self.box = None

    @property
    def empty(self):
        return self.box is None

    @property
    def population(self):
        return int(self.content().sum())

    def at_margin(self):
        if self.box is None:
            return False
        top, bottom, left, right = self.box
        return (top < MARGIN or left < MARGIN
                or bottom >= self.height - MARGIN or right >= self.width - MARGIN)

    def step(self):
        """
        Advance one generation. Only the bounding box plus a one cell border is
        re-evaluated. Returns False when every cell has died.
        Raises UnboundedGrowth when the new box touches the lattice margin.
        """
        if self.box is None:
            return False
        if self.at_margin():
            raise UnboundedGrowth(self.box)
        top, bottom, left, right = self.box
        window = self.cells[top - 2:bottom + 3, left - 2:right + 3].astype(np.uint16)
        # 3-bit contribution of every column (top, middle, bottom) for rows top-1..bottom+1
        columns = (window[:-2] << 2) | (window[1:-1] << 1) | window[2:]
        # slide the window: left column in the high bits, right column in the low bits
        codes = (columns[:, :-2] << 6) | (columns[:, 1:-1] << 3) | columns[:, 2:]
        new = self.table.table[codes]
        self.cells[top - 1:bottom + 2, left - 1:right + 2] = new

        rows = np.flatnonzero(new.any(axis=1))
        if rows.size == 0:
            self.box = None
            return False
        cols = np.flatnonzero(new.any(axis=0))
        self.box = (int(top - 1 + rows[0]), int(top - 1 + rows[-1]),
                    int(left - 1 + cols[0]), int(left - 1 + cols[-1]))
        if self.at_margin():
            raise UnboundedGrowth(self.box)
        return True

    def clear(self):
        """Kill every cell inside the last known box."""
        if self.box is not None:
            top, bottom, left, right = self.box
            self.cells[top:bottom + 1, left:right + 1] = 0
        self.box = None

    def place(self, bits, top, left):
        """
        OR a 2D 0/1 array into the lattice with its top-left corner at (top, left).
        Raises IndexError if any part of the array lies outside the usable area.
        """
        bits = np.asarray(bits, dtype=np.uint8)
        h, w = bits.shape
        if (top < MARGIN or left < MARGIN
                or top + h > self.height - MARGIN or left + w > self.width - MARGIN):
            raise IndexError(f'{h}x{w} block at ({top}, {left}) does not fit a '
                             f'{self.height}x{self.width} lattice')
        self.cells[top:top + h, left:left + w] |= bits
        rows = np.flatnonzero(bits.any(axis=1))
        if rows.size == 0:
            return
        cols = np.flatnonzero(bits.any(axis=0))
        placed = (top + int(rows[0]), top + int(rows[-1]), left + int(cols[0]), left + int(cols[-1]))
        if self.box is None:
            self.box = placed
        else:
            self.box = (min(self.box[0], placed[0]), max(self.box[1], placed[1]),
                        min(self.box[2], placed[2]), max(self.box[3], placed[3]))

    def content(self):
        """Copy of the cells inside the bounding box."""
        if self.box is None:
            return np.zeros((0, 0), dtype=np.uint8)
        top, bottom, left, right = self.box
        return self.cells[top:bottom + 1, left:right + 1].copy()
