class NetworkError(Exception):
    """Base class for every error raised by the network code."""


class InvalidArgumentError(NetworkError, ValueError):
    pass


class DimensionMismatchError(NetworkError, ValueError):
    pass


class IndexOutOfRangeError(NetworkError, IndexError):
    pass
