from enum import Enum
from typing import Any, Hashable


class KeyKind(Enum):
    """How a key addresses a :class:`~mixtable.table.Table`.

    - ``INDEX``: a plain integer, addresses the sequence.
    - ``RANGE``: a ``slice`` or ``range``, addresses a run of the sequence.
    - ``SPAN``: a ``(start, length)`` pair of integers, also a run of the sequence.
    - ``NAME``: an identifier string, addresses a field and gets accessors.
    - ``OPAQUE``: any other hashable, addresses a field only.
    """

    INDEX = 'index'
    RANGE = 'range'
    SPAN = 'span'
    NAME = 'name'
    OPAQUE = 'opaque'


def classify_key(key: Any) -> KeyKind:
    match key:
        # bool is an int subclass but never a sequence index
        case bool():
            return KeyKind.OPAQUE
        case int():
            return KeyKind.INDEX
        case slice() | range():
            return KeyKind.RANGE
        case tuple((int() as start, int() as length)) if not (
            isinstance(start, bool) or isinstance(length, bool)
        ):
            # wrapped field keys are 1-tuples, so pairs never collide with them
            return KeyKind.SPAN
        case str() if key.isidentifier():
            return KeyKind.NAME
        case _:
            return KeyKind.OPAQUE


def wrap_key(key: Hashable) -> Hashable:
    """Wrap integer keys in a 1-tuple so they cannot be read back as indices."""
    if classify_key(key) is KeyKind.INDEX:
        return (key,)
    return key


def is_identifier(key: Any) -> bool:
    return classify_key(key) is KeyKind.NAME
