from types import MappingProxyType
from typing import Any, Mapping

from mixtable.errors import TableError
from mixtable.settings.registry import all_registered, lookup

_SETTINGS_CONTEXT: dict[str, Any] = {}


class SettingsValidationError(TableError):
    """Raised when settings validation fails.

    This exception is raised by :func:`ensure_valid_settings` when one or
    more bound settings are unknown or have a value of the wrong type.
    """


def bind_settings(**kwargs: Any) -> None:
    """Bind setting values for later resolution.

    Values are merged into the module-level settings context which
    :func:`resolve_setting` reads from. Keys bound earlier and not named
    here keep their values.

    Parameters
    ----------
    **kwargs:
        Setting keys and their values. Keys are not checked here; use
        :func:`ensure_valid_settings` for that.
    """
    _SETTINGS_CONTEXT.update(kwargs)


def reset_settings() -> None:
    """Drop every bound value so all settings fall back to their defaults."""
    _SETTINGS_CONTEXT.clear()


def get_settings() -> Mapping[str, Any]:
    """Return a read-only view of the bound setting values.

    Defaults of registered settings that were never bound are not part of
    the view; use :func:`resolve_setting` to read an effective value.
    """
    return MappingProxyType(_SETTINGS_CONTEXT)


def resolve_setting(key: str, *, settings: Mapping[str, Any] | None = None) -> Any:
    """Resolve the effective value of a setting.

    The bound value wins; otherwise the registered default is returned.

    Parameters
    ----------
    key:
        The setting key.
    settings:
        Mapping to search instead of the bound settings context.

    Returns
    -------
    Any
        The bound value or the registered default.

    Raises
    ------
    KeyError
        If ``key`` is neither bound nor registered.
    """
    if settings is None:
        settings = get_settings()

    if key in settings:
        return settings[key]

    entry = lookup(key)
    if entry is None:
        raise KeyError(f'No setting named {key}')
    return entry.default


def ensure_valid_settings(settings: Mapping[str, Any] | None = None) -> None:
    """Validate bound settings against the registered declarations.

    Every bound key must be registered and its value must be an instance
    of the registered ``expected_type``. Problems are accumulated and
    reported together.

    Parameters
    ----------
    settings:
        The mapping to validate, by default the bound settings context.

    Raises
    ------
    SettingsValidationError
        When a key is unknown, a value has the wrong type, or a value is
        below the registered minimum.
    """
    if settings is None:
        settings = get_settings()

    errors: list[str] = []

    for key, value in settings.items():
        entry = lookup(key)
        if entry is None:
            known = ', '.join(sorted(setting.key for setting in all_registered()))
            errors.append(f'Unknown setting {key} (known settings: {known})')
            continue

        # bool is an int subclass; int settings must not accept True/False
        rejects_bool = isinstance(value, bool) and not _accepts_bool(entry.expected_type)
        if rejects_bool or not isinstance(value, entry.expected_type):
            errors.append(_mismatch(key, entry.expected_type, value))
            continue

        if entry.minimum is not None and value is not None and value < entry.minimum:
            errors.append(f'Value for {key} must be at least {entry.minimum}, got {value}')

    if errors:
        raise SettingsValidationError('Settings validation failed:\n' + '\n'.join(errors))


def _accepts_bool(expected: type[Any] | tuple[type[Any], ...]) -> bool:
    if isinstance(expected, tuple):
        return bool in expected or object in expected
    return expected in (bool, object)


def _mismatch(key: str, expected: type[Any] | tuple[type[Any], ...], value: Any) -> str:
    if isinstance(expected, tuple):
        expected_name = ' | '.join(t.__name__ for t in expected)
    else:
        expected_name = expected.__name__
    return f'Type mismatch for {key}: expected {expected_name}, got {type(value).__name__}'
