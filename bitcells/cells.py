import numpy

from .errors import UnsupportedBufferError

BITS_PER_BYTE = 8


class Cells:
    """Fixed-width unsigned cells over a one-dimensional numpy array.

    The array is borrowed, never copied or resized. Values are handled as
    python ints so the bit order follows the cell value, not host byte order.
    """
    BYTES_PER_CELL = 0
    DTYPE = None

    def __init__(self, array):
        self.array = array

    @property
    def bytes_per_cell(self):
        return self.BYTES_PER_CELL

    @property
    def bits_per_cell(self):
        return self.BYTES_PER_CELL * BITS_PER_BYTE

    def __len__(self):
        return len(self.array)

    def get(self, index):
        return int(self.array[index])

    def or_into(self, index, value):
        self.array[index] = self.DTYPE(int(self.array[index]) | value)


class Cells8(Cells):
    BYTES_PER_CELL = 1
    DTYPE = numpy.uint8


class Cells16(Cells):
    BYTES_PER_CELL = 2
    DTYPE = numpy.uint16


class Cells32(Cells):
    BYTES_PER_CELL = 4
    DTYPE = numpy.uint32


CELL_TYPES = {
    cell_type.BYTES_PER_CELL: cell_type
    for cell_type in (Cells8, Cells16, Cells32)
}


def _as_array(buffer):
    if isinstance(buffer, numpy.ndarray):
        return buffer
    try:
        # bytes, bytearray, array.array and memoryview share memory this way
        return numpy.asarray(memoryview(buffer))
    except TypeError:
        raise UnsupportedBufferError(
            "expected a numpy array or buffer, got {:s}".format(
                type(buffer).__name__)) from None


def open_cells(buffer, writable=False):
    array = _as_array(buffer)
    if array.ndim != 1:
        raise UnsupportedBufferError(
            "buffer must be one-dimensional, got {:d} dimensions".format(array.ndim))
    if array.dtype.kind != "u" or array.dtype.itemsize not in CELL_TYPES:
        raise UnsupportedBufferError(
            "unsupported cell type {:s}, use uint8, uint16 or uint32".format(
                str(array.dtype)))
    if writable and not array.flags.writeable:
        raise UnsupportedBufferError("buffer is read-only")
    return CELL_TYPES[array.dtype.itemsize](array)
