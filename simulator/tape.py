from enum import Enum

import numpy as np

from simulator.errors import TapeResourceError

BLANK = "_"
WILDCARD = "*"

# Cells hold unicode code points so a slice can be decoded in one go.
CELL_DTYPE = np.dtype("<u4")
BLANK_CODE = ord(BLANK)
INITIAL_CAPACITY = 64


class Direction(Enum):
    LEFT = "l"
    RIGHT = "r"
    STAY = "*"

    @property
    def offset(self):
        return {"l": -1, "r": 1, "*": 0}[self.value]


class Tape:
    """
    Tape that is unbounded in both directions.

    Cells live in a numpy buffer addressed by index. Only the range
    [_lo, _hi] is materialized; moving past either end materializes one blank
    cell, doubling the buffer toward that side when it is full.
    """

    def __init__(self, max_cells=None):
        self.max_cells = max_cells
        self._cells = self._allocate(INITIAL_CAPACITY, 0)
        self._origin = INITIAL_CAPACITY // 2
        self._lo = self._hi = self._head = self._origin

    @classmethod
    def from_text(cls, text, max_cells=None):
        """Build a tape with one cell per character of text, skipping newlines."""
        tape = cls(max_cells=max_cells)
        symbols = [c for c in text if c not in "\r\n"]
        for i, symbol in enumerate(symbols):
            if i:
                tape.move(Direction.RIGHT)
            tape.write(symbol)
        tape.rewind_to_start()
        return tape

    def __len__(self):
        return self._hi - self._lo + 1

    def __repr__(self):
        return f"Tape({self.render()!r}, position={self.position}, cells={len(self)})"

    @property
    def position(self):
        """Carriage offset from the first input cell."""
        return self._head - self._origin

    def read(self):
        return chr(self._cells[self._head])

    def write(self, symbol):
        if not isinstance(symbol, str) or len(symbol) != 1:
            raise ValueError(f"Tape symbols are single characters, got {symbol!r}")
        if symbol == WILDCARD:
            return
        self._cells[self._head] = ord(symbol)

    def move(self, direction):
        offset = Direction(direction).offset
        if offset < 0 and self._head == self._lo:
            self._materialize_left()
        elif offset > 0 and self._head == self._hi:
            self._materialize_right()
        self._head += offset

    def rewind_to_start(self):
        self._head = self._lo

    def cells(self):
        """Every materialized symbol left to right, blanks included."""
        return self._decode(self._cells[self._lo:self._hi + 1])

    def render(self):
        """Every materialized symbol left to right with blanks elided."""
        cells = self._cells[self._lo:self._hi + 1]
        return self._decode(cells[cells != BLANK_CODE])

    def window(self, radius=10):
        """Return (symbols, carriage index) for the cells around the carriage."""
        start = max(self._lo, self._head - radius)
        stop = min(self._hi, self._head + radius) + 1
        return self._decode(self._cells[start:stop]), self._head - start

    # === Growth ===
    def _check_limit(self):
        if self.max_cells is not None and len(self) >= self.max_cells:
            raise TapeResourceError(len(self), reason=f"limit of {self.max_cells:,} cells reached")

    def _materialize_left(self):
        self._check_limit()
        if self._lo == 0:
            shift = len(self._cells)
            self._cells = self._allocate(shift * 2, shift, self._cells)
            self._origin += shift
            self._lo += shift
            self._hi += shift
            self._head += shift
        self._lo -= 1

    def _materialize_right(self):
        self._check_limit()
        if self._hi == len(self._cells) - 1:
            self._cells = self._allocate(len(self._cells) * 2, 0, self._cells)
        self._hi += 1

    def _allocate(self, capacity, at, old=None):
        try:
            cells = np.full(capacity, BLANK_CODE, dtype=CELL_DTYPE)
        except MemoryError:
            raise TapeResourceError(len(self) if old is not None else 0) from None
        if old is not None:
            cells[at:at + len(old)] = old
        return cells

    @staticmethod
    def _decode(cells):
        return cells.astype(CELL_DTYPE).tobytes().decode("utf-32-le")
