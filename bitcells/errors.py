class BitCellsError(Exception):
    pass


class InvalidArgumentError(BitCellsError, ValueError):
    pass


class MisalignedAccessError(BitCellsError):
    """Byte access attempted while the cursor sits between byte boundaries."""


class InsufficientDataError(BitCellsError, EOFError):
    """More bits were requested than remain. Nothing is consumed."""


class UnsupportedBufferError(BitCellsError, TypeError):
    pass
