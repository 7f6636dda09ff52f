class TableError(Exception):
    """Base class for errors raised by mixtable."""


class InvalidArgument(TableError, ValueError):
    """Raised when a slice, index or argument list cannot be applied to a table.

    Reads never raise this; missing keys and out of range indices give
    ``None``. Only requests that are malformed in themselves do, such as a
    negative slice length or a negative index with no element behind it.
    """
