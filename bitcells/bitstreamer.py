import logging
import operator
from collections import namedtuple

import numpy

from .cells import BITS_PER_BYTE, open_cells
from .cursor import Cursor
from .errors import InsufficientDataError, InvalidArgumentError

logger = logging.getLogger(__name__)

BYTE_MASK = 0xff

# more=True carries a bit, more=False carries the number of bits iterated
BitStep = namedtuple("BitStep", ["more", "bit", "total"])


def collect_bits(bits):
    value = 0
    for bit in bits:
        value = (value << 1) | bit
    return value


def _check_count(n):
    if n < 0:
        raise InvalidArgumentError("n cannot be less than 0, got {:d}".format(n))


def _check_value(value):
    if value < 0:
        raise InvalidArgumentError("value must be unsigned, got {:d}".format(value))


def _as_int(value, what):
    try:
        return operator.index(value)
    except TypeError:
        raise InvalidArgumentError(
            "{:s} must be an integer, got {!r}".format(what, value)) from None


def _check_bit(bit):
    if _as_int(bit, "bit") not in (0, 1):
        raise InvalidArgumentError("bit must be 0 or 1, got {!r}".format(bit))


def _check_byte(byte):
    if not 0 <= _as_int(byte, "byte") < 256:
        raise InvalidArgumentError("byte must be in [0, 256), got {!r}".format(byte))


def _byte_shift(cursor):
    # bytes inside a multi-byte cell go most significant first
    bytes_per_cell = cursor.bytes_per_cell
    return (bytes_per_cell - 1 - cursor.byte_index % bytes_per_cell) * BITS_PER_BYTE


def _cursor_property(name):
    return property(lambda self: getattr(self.cursor, name))


class BitReader:
    """Reads bits from a uint8, uint16 or uint32 cell buffer.

    Bits are read from the *largest* to the *smallest* bit of each cell, and
    cells in index order. With ``numpy.array([1, 1 << 7], dtype=numpy.uint8)``
    the ``1`` is the last bit of the first cell and the first bit of the
    second one.

    Running out of data is not an error: ``read_bit`` and ``read_byte`` return
    ``None`` instead. Reads cannot be undone.
    """

    def __init__(self, buffer):
        self.cursor = Cursor(open_cells(buffer))
        self.produced = 0

    bytes_per_cell = _cursor_property("bytes_per_cell")
    bits_per_cell = _cursor_property("bits_per_cell")
    remaining = _cursor_property("remaining")
    byte_index = _cursor_property("byte_index")
    byte_count = _cursor_property("byte_count")

    def is_byte_aligned(self):
        return self.cursor.is_byte_aligned()

    collect_bits = staticmethod(collect_bits)

    def read_bit(self):
        cursor = self.cursor
        if cursor.is_exhausted():
            return None
        cell = cursor.cells.get(cursor.index)
        bit = (cell >> (cursor.bits_per_cell - cursor.offset)) & 1
        cursor.advance()
        return bit

    def read_bits(self, n):
        """Reads ``n`` bits into an int, first bit read being the largest.

        Raises InsufficientDataError before consuming anything when fewer
        than ``n`` bits remain.
        """
        _check_count(n)
        remaining = self.cursor.remaining
        if remaining < n:
            logger.debug("refused read of %d bits, %d remaining", n, remaining)
            raise InsufficientDataError(
                "cannot read {:d} bits, {:d} remaining".format(n, remaining))
        value = 0
        for _ in range(n):
            value = (value << 1) | self.read_bit()
        return value

    def read_bits_safe(self, n):
        _check_count(n)
        return [self.read_bit() for _ in range(n)]

    def read_byte(self):
        cursor = self.cursor
        cursor.require_byte_aligned()
        if cursor.is_exhausted():
            return None
        cell = cursor.cells.get(cursor.index)
        byte = (cell >> _byte_shift(cursor)) & BYTE_MASK
        cursor.advance(BITS_PER_BYTE)
        return byte

    def read_bytes(self, n):
        """Reads ``n`` bytes, padding with ``None`` once the data runs out."""
        _check_count(n)
        self.cursor.require_byte_aligned()
        return [self.read_byte() for _ in range(n)]

    def read_all(self):
        return self.read_bits(self.cursor.remaining)

    def align(self):
        """Skips to the next byte boundary, returning the bits discarded."""
        return self.cursor.align()

    def step(self):
        bit = self.read_bit()
        if bit is None:
            return BitStep(False, None, self.produced)
        self.produced += 1
        return BitStep(True, bit, None)

    def __iter__(self):
        return self

    def __next__(self):
        step = self.step()
        if not step.more:
            raise StopIteration(step.total)
        return step.bit


class BitWriter:
    """Writes bits into a uint8, uint16 or uint32 cell buffer.

    Bit order matches BitReader. The buffer is expected to be zeroed: bits are
    OR-ed in, so bits already set in ``buffer`` stay set.

    Running out of room is not an error. ``write_bit`` and ``write_byte``
    return False and the batch writes return how much was written.
    """

    def __init__(self, buffer):
        self.cursor = Cursor(open_cells(buffer, writable=True))

    bytes_per_cell = _cursor_property("bytes_per_cell")
    bits_per_cell = _cursor_property("bits_per_cell")
    remaining = _cursor_property("remaining")
    byte_index = _cursor_property("byte_index")
    byte_count = _cursor_property("byte_count")

    def is_byte_aligned(self):
        return self.cursor.is_byte_aligned()

    def write_bit(self, bit):
        _check_bit(bit)
        cursor = self.cursor
        if cursor.is_exhausted():
            return False
        cursor.cells.or_into(cursor.index, int(bit) << (cursor.bits_per_cell - cursor.offset))
        cursor.advance()
        return True

    def write_bits(self, bits, n=None):
        """Writes a sequence of bits, or the lowest ``n`` bits of an int.

        ``write_bits(0b1100, 5)`` and ``write_bits([0, 1, 1, 0, 0])`` are
        equivalent. ``n`` is needed because ``0`` alone can't tell leading
        zero bits from nothing.

        Bits that don't fit are dropped. Returns the number of bits written.
        """
        if n is None:
            bits = list(bits)
            for bit in bits:
                _check_bit(bit)
            writable = bits[:min(len(bits), self.cursor.remaining)]
            for bit in writable:
                self.write_bit(bit)
            if len(writable) < len(bits):
                logger.debug("truncated write of %d bits to %d", len(bits), len(writable))
            return len(writable)

        _check_count(n)
        _check_value(bits)
        for i in range(n):
            shift = n - i - 1
            if not self.write_bit((bits >> shift) & 1):
                logger.debug("buffer full after %d of %d bits", i, n)
                return i
        return n

    def write_byte(self, byte):
        _check_byte(byte)
        cursor = self.cursor
        cursor.require_byte_aligned()
        if cursor.is_exhausted():
            return False
        cursor.cells.or_into(cursor.index, int(byte) << _byte_shift(cursor))
        cursor.advance(BITS_PER_BYTE)
        return True

    def write_bytes(self, data, n=None):
        """Byte counterpart of ``write_bits``; ``n`` counts bytes of an int."""
        if n is None:
            data = list(data)
            for byte in data:
                _check_byte(byte)
            self.cursor.require_byte_aligned()
            writable = data[:min(len(data), self.cursor.remaining // BITS_PER_BYTE)]
            for byte in writable:
                self.write_byte(byte)
            if len(writable) < len(data):
                logger.debug("truncated write of %d bytes to %d", len(data), len(writable))
            return len(writable)

        _check_count(n)
        _check_value(data)
        self.cursor.require_byte_aligned()
        for i in range(n):
            shift = (n - i - 1) * BITS_PER_BYTE
            if not self.write_byte((data >> shift) & BYTE_MASK):
                logger.debug("buffer full after %d of %d bytes", i, n)
                return i
        return n

    def align(self):
        # the skipped bits are already zero
        return self.cursor.align()

    def get(self):
        cursor = self.cursor
        return numpy.copy(cursor.cells.array), cursor.offset - 1
