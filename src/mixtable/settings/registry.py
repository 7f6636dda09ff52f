from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class Setting:
    """Declaration of a library-wide setting.

    Instances of this dataclass describe a single option that changes how
    tables behave. The registry stores these entries so binding, validation
    and resolution can work from the key alone.

    Attributes
    ----------
    key:
        The name used when binding the setting.
    expected_type:
        The type (or tuple of types) a bound value must be an instance of.
    default:
        The value used while nothing has been bound for ``key``.
    doc:
        A one-line description.
    minimum:
        Smallest accepted value for numeric settings, ``None`` for no bound.
    """

    key: str
    expected_type: type[Any] | tuple[type[Any], ...]
    default: Any = None
    doc: str = ''
    minimum: int | float | None = None


_REGISTRY: dict[str, Setting] = {}


def register(entry: Setting) -> Setting:
    """Register a ``Setting`` entry in the global registry.

    Registering a key a second time replaces the earlier declaration.

    Parameters
    ----------
    entry:
        The ``Setting`` instance to register.

    Returns
    -------
    Setting
        ``entry``, so declarations can be assigned at module level.
    """

    _REGISTRY[entry.key] = entry
    return entry


def lookup(key: str) -> Setting | None:
    return _REGISTRY.get(key)


def all_registered() -> list[Setting]:
    """Return a shallow copy of all registered settings.

    Returns
    -------
    list[Setting]
        The registered settings in registration order.
    """

    return list(_REGISTRY.values())


WARN_ON_RESERVED_KEYS = register(
    Setting(
        key='warn_on_reserved_keys',
        expected_type=bool,
        default=False,
        doc='Emit a RuntimeWarning when a field key collides with a Table member.',
    )
)

MAX_SPARSE_GAP = register(
    Setting(
        key='max_sparse_gap',
        expected_type=(int, type(None)),
        default=None,
        doc='Largest number of None slots a single indexed write may pad.',
        minimum=0,
    )
)
