from .cells import BITS_PER_BYTE
from .errors import MisalignedAccessError


class Cursor:
    """Position of the next bit in a cell buffer.

    ``index`` is the cell, ``offset`` the 1-indexed bit inside it counted from
    the most significant bit. ``index == len(cells)`` means exhausted.
    """

    def __init__(self, cells):
        self.cells = cells
        self.index = 0
        self.offset = 1
        self._bits_per_cell = cells.bits_per_cell

    def advance(self, n=1):
        # at most one cell boundary is crossed per call
        self.offset += n
        if self._bits_per_cell < self.offset:
            self.index += 1
            self.offset = 1

    def align(self):
        skipped = self.remaining % BITS_PER_BYTE
        if 0 < skipped:
            self.advance(skipped)
        return skipped

    def is_exhausted(self):
        return len(self.cells) <= self.index

    def is_byte_aligned(self):
        return self.remaining % BITS_PER_BYTE == 0

    def require_byte_aligned(self):
        if not self.is_byte_aligned():
            raise MisalignedAccessError(
                "byte access at bit {:d} of cell {:d}".format(self.offset, self.index))

    @property
    def bytes_per_cell(self):
        return self.cells.bytes_per_cell

    @property
    def bits_per_cell(self):
        return self._bits_per_cell

    @property
    def remaining(self):
        all_bits = len(self.cells) * self._bits_per_cell
        return all_bits - self.index * self._bits_per_cell - self.offset + 1

    @property
    def byte_index(self):
        return self.index * self.bytes_per_cell + (self.offset - 1) // BITS_PER_BYTE

    @property
    def byte_count(self):
        return self.bytes_per_cell * len(self.cells)
