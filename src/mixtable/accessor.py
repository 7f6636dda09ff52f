# pyright: reportPrivateUsage=false
from dataclasses import dataclass
from functools import partial
from logging import getLogger
from typing import Any, Callable, Iterator

logger = getLogger(__name__)


@dataclass(frozen=True)
class FieldAccessor:
    """Getter/setter pair bound to a single field name.

    Accessors never capture a table instance; the table is passed in on
    every call. Copies and unpickled tables can therefore share or rebuild
    registries without the accessors pointing back at the original.

    Attributes
    ----------
    name:
        The field key, which is also the attribute name.
    fget:
        Called as ``fget(table)``, returns the field value or ``None``.
    fset:
        Called as ``fset(table, value)``, stores the field value.
    """

    name: str
    fget: Callable[[Any], Any]
    fset: Callable[[Any, Any], None]

    def get(self, table: Any) -> Any:
        return self.fget(table)

    def set(self, table: Any, value: Any) -> None:
        self.fset(table, value)


def _read_field(name: str, table: Any) -> Any:
    return table._fields.get(name)


def _write_field(name: str, table: Any, value: Any) -> None:
    table._fields[name] = value


def make_accessor(name: str) -> FieldAccessor:
    # accessors must stay picklable, so no closures
    return FieldAccessor(
        name=name,
        fget=partial(_read_field, name),
        fset=partial(_write_field, name),
    )


class AccessorRegistry:
    """Per-table registry of materialized field accessors.

    The registry belongs to exactly one table and is never shared through
    the class namespace, so materializing ``table.color`` on one table does
    not make ``color`` appear on any other.
    """

    _accessors: dict[str, FieldAccessor]

    def __init__(self) -> None:
        self._accessors = {}

    def __contains__(self, name: object) -> bool:
        return name in self._accessors

    def __iter__(self) -> Iterator[str]:
        return iter(self._accessors)

    def __len__(self) -> int:
        return len(self._accessors)

    def get(self, name: str) -> FieldAccessor | None:
        return self._accessors.get(name)

    def materialize(self, name: str) -> FieldAccessor:
        """Return the accessor for ``name``, creating it on first use."""
        accessor = self._accessors.get(name)
        if accessor is None:
            accessor = make_accessor(name)
            self._accessors[name] = accessor
            logger.debug('Materialized accessor for field %r', name)
        return accessor
