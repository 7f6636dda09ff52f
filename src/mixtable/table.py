# pyright: reportPrivateUsage=false
import functools
import inspect
import reprlib
import warnings
from logging import getLogger
from types import MappingProxyType
from typing import Any, Callable, Hashable, ItemsView, Iterable, Iterator, KeysView, Mapping

from mixtable.accessor import AccessorRegistry
from mixtable.errors import InvalidArgument
from mixtable.keys import KeyKind, classify_key, is_identifier, wrap_key
from mixtable.settings import resolve_setting

logger = getLogger(__name__)


class Table:
    """
    Ordered sequence of values combined with a mapping of named fields.

    Positional arguments are appended to the sequence; mapping arguments
    are merged into the fields. Field keys that are identifiers can also be
    read and written as attributes.

    Parameters
    ----------
    *items : Any
        Values and field bundles, processed left to right. Every
        ``Mapping`` is a field bundle, anything else is a value.

    Attributes
    ----------
    _values : list[Any]
        The ordered sequence. Gaps left by sparse writes hold ``None``.
    _fields : dict[Hashable, Any]
        The field mapping. Integer keys are stored as 1-tuples.
    _accessors : AccessorRegistry
        Accessors materialized for identifier keys of this table.

    Notes
    -----
    - Missing keys, out of range indices and unknown attributes read as
      ``None``. Only malformed requests raise :class:`InvalidArgument`.
    - Members of the class always win over fields. A field named ``size``
      is stored and readable as ``table['size']`` but ``table.size`` stays
      the sequence length. See :data:`RESERVED_NAMES`.
    - A bare integer field key ``3`` is stored as ``(3,)`` so that
      ``table[3]`` always means the fourth value.

    Examples
    --------
    >>> t = Table(1, 2, 3, {'a': '1', 'b': '2'}, 7, 8)
    >>> t
    Table[1, 2, 3, 7, 8, 'a'=>'1', 'b'=>'2']
    >>> t.size
    5
    >>> t.b
    '2'
    >>> t.b = Table(255, 0, 0, {'color': 'red'})
    >>> t.b.color
    'red'
    >>> t[-1]
    8
    """

    _values: list[Any]
    _fields: dict[Hashable, Any]
    _accessors: AccessorRegistry

    def __init__(self, *items: Any) -> None:
        # Use object.__setattr__ to keep __setattr__ field routing out of the way.
        object.__setattr__(self, '_values', [])
        object.__setattr__(self, '_fields', {})
        object.__setattr__(self, '_accessors', AccessorRegistry())
        self.extend(items)

    @classmethod
    def of(cls, *items: Any) -> 'Table':
        return cls(*items)

    # Attribute fallback

    def __getattr__(self, name: str) -> Any:
        # Only reached when regular lookup fails, so class members always win.
        if name.startswith('_'):
            raise AttributeError(f'{type(self).__name__!r} object has no attribute {name!r}')

        accessor = self._accessors.get(name)
        if accessor is None:
            return None
        return accessor.get(self)

    def __setattr__(self, name: str, value: Any) -> None:
        if name.startswith('_'):
            object.__setattr__(self, name, value)
            return

        if self._is_member(name):
            # Properties with setters keep working.
            member = inspect.getattr_static(type(self), name)
            if isinstance(member, property) and member.fset is not None:
                object.__setattr__(self, name, value)
                return
            raise AttributeError(f'{name!r} is a reserved {type(self).__name__} member')

        accessor = self._accessors.get(name)
        if accessor is not None:
            accessor.set(self, value)
        else:
            self[name] = value

    def __delattr__(self, name: str) -> None:
        if name.startswith('_') or self._is_member(name):
            object.__delattr__(self, name)
            return
        self.remove_at(name)

    def __dir__(self) -> Iterable[str]:
        return sorted(set(super().__dir__()) | set(self._accessors))

    def responds_to(self, name: str) -> bool:
        """Whether ``name`` is a class member or a materialized field accessor."""
        return name in self._accessors or self._is_member(name)

    def _is_member(self, name: str) -> bool:
        return any(name in vars(klass) for klass in type(self).__mro__)

    # Fields

    def merge_fields(self, bundle: Mapping[Any, Any]) -> 'Table':
        """Merge ``bundle`` into the fields, last write wins.

        Integer keys are wrapped as 1-tuples. Identifier keys get an
        accessor the first time they are merged, unless the name is
        reserved.
        """
        for key, value in bundle.items():
            key = wrap_key(key)
            self._fields[key] = value

            # _names stay out of the attribute namespace
            if not is_identifier(key) or key.startswith('_'):
                continue
            if self._is_member(key):
                self._skip_reserved(key)
                continue
            self._accessors.materialize(key)

        return self

    def _skip_reserved(self, name: str) -> None:
        logger.debug('Field %r collides with a %s member, no accessor created', name, type(self).__name__)
        if resolve_setting('warn_on_reserved_keys'):
            warnings.warn(
                f'Field "{name}" is shadowed by {type(self).__name__}.{name}, use table[{name!r}] to read it',
                RuntimeWarning,
                stacklevel=3,
            )

    # Indexed and keyed access

    def __getitem__(self, key: Any) -> Any:
        match classify_key(key):
            case KeyKind.INDEX:
                try:
                    return self._values[key]
                except IndexError:
                    return None
            case KeyKind.RANGE:
                return self._values[_as_slice(key)]
            case KeyKind.SPAN:
                return self.slice(*key)
            case _:
                return self._fields.get(key)

    def get(self, key: Any, default: Any = None) -> Any:
        match classify_key(key):
            case KeyKind.INDEX:
                if -len(self._values) <= key < len(self._values):
                    return self._values[key]
                return default
            case KeyKind.RANGE | KeyKind.SPAN:
                return self[key]
            case _:
                return self._fields.get(key, default)

    def _span(self, start: Any, length: int) -> slice | None:
        if classify_key(start) is not KeyKind.INDEX:
            raise InvalidArgument(f'Slice start must be an integer, got {type(start).__name__}')
        if length < 0:
            raise InvalidArgument(f'Negative slice length: {length}')

        size = len(self._values)
        if start < 0:
            start += size
        if start < 0 or start > size:
            return None
        return slice(start, start + length)

    def slice(self, start: Any, length: int | None = None) -> Any:
        """Return ``length`` values starting at ``start``.

        Without ``length`` this is the same as ``table[start]``, with it the
        same as ``table[start, length]``. A start before the beginning or
        past the end gives an empty list.

        Raises
        ------
        InvalidArgument
            If ``length`` is negative or ``start`` is not an integer.
        """
        if length is None:
            return self[start]

        span = self._span(start, length)
        if span is None:
            return []
        return self._values[span]

    def __setitem__(self, key: Any, value: Any) -> None:
        match classify_key(key):
            case KeyKind.INDEX:
                self._store(key, value)
            case KeyKind.RANGE:
                try:
                    self._values[_as_slice(key)] = value
                except ValueError as exc:
                    raise InvalidArgument(str(exc)) from exc
            case KeyKind.SPAN:
                span = self._span(*key)
                if span is None:
                    raise InvalidArgument(f'Span {key} is outside a table with {len(self._values)} values')
                self._values[span] = value
            case _:
                self.merge_fields({key: value})

    def set(self, key: Any, value: Any) -> 'Table':
        self[key] = value
        return self

    def _store(self, index: int, value: Any) -> None:
        size = len(self._values)
        if index < -size:
            raise InvalidArgument(f'Index {index} is before the start of a table with {size} values')
        if index >= size:
            self._pad(index - size)
            self._values.append(value)
        else:
            self._values[index] = value

    def _pad(self, gap: int) -> None:
        if gap <= 0:
            return

        max_gap = resolve_setting('max_sparse_gap')
        if max_gap is not None and gap > max_gap:
            raise InvalidArgument(f'Write would pad {gap} empty slots, max_sparse_gap is {max_gap}')

        logger.debug('Padding %d empty slots after index %d', gap, len(self._values) - 1)
        self._values.extend([None] * gap)

    def __delitem__(self, key: Any) -> None:
        self.remove_at(key)

    # Append, combine and remove

    def append(self, value: Any) -> 'Table':
        if isinstance(value, Mapping):
            return self.merge_fields(value)
        self._values.append(value)
        return self

    __lshift__ = append

    def extend(self, items: Iterable[Any]) -> 'Table':
        for item in items:
            self.append(item)
        return self

    def combine(self, other: 'Table') -> 'Table':
        """Return a new table: our values then ``other``'s, fields overlaid by ``other``."""
        if not isinstance(other, Table):
            raise TypeError(f'Cannot combine {type(self).__name__} with {type(other).__name__}')

        combined = type(self)()
        combined._values.extend(self._values)
        combined._values.extend(other._values)
        combined.merge_fields(self._fields)
        combined.merge_fields(other._fields)
        return combined

    def __add__(self, other: Any) -> 'Table':
        if not isinstance(other, Table):
            return NotImplemented
        return self.combine(other)

    def insert_at(self, index: Any, *values: Any) -> 'Table':
        """Insert ``values`` before ``index``, or merge a field for a non-integer key."""
        kind = classify_key(index)
        if kind in (KeyKind.RANGE, KeyKind.SPAN):
            raise InvalidArgument(f'Cannot insert at a run of values {index!r}, pass a single index')
        if kind is not KeyKind.INDEX:
            if len(values) != 1:
                raise InvalidArgument(f'Inserting field {index!r} takes exactly one value, got {len(values)}')
            return self.merge_fields({index: values[0]})

        size = len(self._values)
        if index < -size:
            raise InvalidArgument(f'Index {index} is before the start of a table with {size} values')
        if index > size:
            self._pad(index - size)
        self._values[index:index] = values
        return self

    def remove_at(self, key: Any) -> Any:
        """Remove and return the value at an index, a run of values, or a field."""
        match classify_key(key):
            case KeyKind.INDEX:
                if -len(self._values) <= key < len(self._values):
                    return self._values.pop(key)
                return None
            case KeyKind.RANGE:
                removed = self._values[_as_slice(key)]
                del self._values[_as_slice(key)]
                return removed
            case KeyKind.SPAN:
                span = self._span(*key)
                if span is None:
                    return []
                removed = self._values[span]
                del self._values[span]
                return removed
            case _:
                return self._fields.pop(key, None)

    def pop(self) -> Any:
        return self._values.pop() if self._values else None

    def shift(self) -> Any:
        return self._values.pop(0) if self._values else None

    def clear(self) -> 'Table':
        self._values.clear()
        self._fields.clear()
        return self

    def copy(self) -> 'Table':
        duplicate = type(self)()
        duplicate._values.extend(self._values)
        duplicate.merge_fields(self._fields)
        return duplicate

    __copy__ = copy

    # Iteration

    def __iter__(self) -> Iterator[Any]:
        return iter(self._values)

    def __reversed__(self) -> Iterator[Any]:
        return reversed(self._values)

    def __contains__(self, value: object) -> bool:
        return value in self._values

    def each_value(self) -> Iterator[Any]:
        yield from self._values

    def each_field(self) -> ItemsView[Hashable, Any]:
        return self._fields.items()

    def each_key(self) -> KeysView[Hashable]:
        return self._fields.keys()

    def sorted(
        self,
        comparator: Callable[[Any, Any], int] | None = None,
        *,
        key: Callable[[Any], Any] | None = None,
        reverse: bool = False,
    ) -> list[Any]:
        """Return the values sorted, leaving the table untouched.

        ``comparator`` is a two-argument function returning a negative,
        zero or positive number; ``key`` is a regular sort key. Pass at
        most one of them.
        """
        if comparator is not None:
            if key is not None:
                raise InvalidArgument('Pass either a comparator or a key function, not both')
            key = functools.cmp_to_key(comparator)
        return sorted(self._values, key=key, reverse=reverse)

    # Introspection

    def __len__(self) -> int:
        return len(self._values)

    def __bool__(self) -> bool:
        return bool(self._values or self._fields)

    @property
    def size(self) -> int:
        return len(self._values)

    length = size

    @property
    def first(self) -> Any:
        return self._values[0] if self._values else None

    @property
    def last(self) -> Any:
        return self._values[-1] if self._values else None

    @property
    def fields(self) -> Mapping[Hashable, Any]:
        return MappingProxyType(self._fields)

    def keys(self) -> list[Hashable]:
        return list(self._fields)

    def values(self) -> list[Any]:
        return list(self._fields.values())

    def to_list(self) -> list[Any]:
        return list(self._values)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Table):
            return NotImplemented
        return self._values == other._values and self._fields == other._fields

    __hash__ = None  # type: ignore[assignment]

    def describe(self) -> str:
        parts = [repr(value) for value in self._values]
        parts.extend(f'{key!r}=>{value!r}' for key, value in self._fields.items())
        return f'{type(self).__name__}[{", ".join(parts)}]'

    @reprlib.recursive_repr()
    def __repr__(self) -> str:
        return self.describe()


def _as_slice(key: slice | range) -> slice:
    if isinstance(key, range):
        return slice(key.start, key.stop, key.step)
    if key.step == 0:
        raise InvalidArgument('Slice step cannot be zero')
    return key


RESERVED_NAMES: frozenset[str] = frozenset(
    name for klass in Table.__mro__ for name in vars(klass) if not name.startswith('_')
)
"""Public members of :class:`Table`; field keys with these names get no accessor."""
