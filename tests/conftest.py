import numpy
import pytest

CELL_DTYPES = [numpy.uint8, numpy.uint16, numpy.uint32]


@pytest.fixture()
def zeroed():
    """Factory for zero-filled cell buffers."""
    def make(length, dtype=numpy.uint8):
        return numpy.zeros(length, dtype=dtype)
    return make


@pytest.fixture(params=CELL_DTYPES, ids=["uint8", "uint16", "uint32"])
def cell_dtype(request):
    return request.param
