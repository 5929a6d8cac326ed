class InvalidArgument(ValueError):
    """Malformed input to a constructor or operator."""


class IndexOutOfBounds(IndexError):
    """A position or count outside its valid range."""


class InvalidState(RuntimeError):
    """An object queried before it holds what the query needs."""
