import json
import tomllib
from logging import getLogger
from os import PathLike
from pathlib import Path
from typing import Any, Callable, Mapping

from mixtable.settings import bind_settings, ensure_valid_settings
from mixtable.table import Table

try:
    import yaml  # type: ignore
except Exception:
    yaml = None  # type: ignore

logger = getLogger(__name__)


def _parse_yaml(text: str) -> Any:
    if yaml is None:
        raise RuntimeError('PyYAML is required to load YAML config files')
    try:
        return yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise RuntimeError(f'Invalid YAML: {exc}') from exc


def _parse_json(text: str) -> Any:
    try:
        return json.loads(text)
    except json.JSONDecodeError as exc:
        raise RuntimeError(f'Invalid JSON: {exc}') from exc


def _parse_toml(text: str) -> Any:
    try:
        return tomllib.loads(text)
    except tomllib.TOMLDecodeError as exc:
        raise RuntimeError(f'Invalid TOML: {exc}') from exc


_PARSERS: dict[str, Callable[[str], Any]] = {
    '.yaml': _parse_yaml,
    '.yml': _parse_yaml,
    '.json': _parse_json,
    '.toml': _parse_toml,
}


def load_config_file(path: str | PathLike[str] | Path) -> Mapping[str, Any] | list[Any]:
    """Parse a JSON, YAML or TOML file whose top level is a mapping or a list.

    Raises
    ------
    FileNotFoundError
        If ``path`` does not exist.
    RuntimeError
        If the suffix is unsupported, the text does not parse, or the top
        level is a scalar.
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f'Config file not found: {path}')

    parse = _PARSERS.get(path.suffix.lower())
    if parse is None:
        supported = ', '.join(_PARSERS)
        raise RuntimeError(f'Unsupported config file type: {path.suffix}, supported extensions: {supported}')

    try:
        config = parse(path.read_text(encoding='utf-8'))
    except RuntimeError as exc:
        raise RuntimeError(f'{path}: {exc}') from exc

    if not isinstance(config, (Mapping, list)):
        raise RuntimeError(f'{path}: top level must be a mapping or a list, got {type(config).__name__}')

    return config


def to_table(data: Any, table_type: type[Table] = Table) -> Any:
    """Convert parsed config data into tables.

    Mappings become tables of fields and lists become tables of values,
    recursively. Anything else is returned unchanged.
    """
    if isinstance(data, Mapping):
        return table_type({key: to_table(value, table_type) for key, value in data.items()})

    if isinstance(data, list):
        table = table_type()
        for item in data:
            # Converted mappings are tables, so they land in the sequence.
            table.append(to_table(item, table_type))
        return table

    return data


def load_table(path: str | PathLike[str] | Path, table_type: type[Table] = Table) -> Table:
    config = load_config_file(path)
    logger.info('Loaded %s from %s', type(config).__name__, path)
    return to_table(config, table_type)


def load_settings(path: str | PathLike[str] | Path) -> None:
    """Bind settings from a config file.

    The settings are read from a top-level ``mixtable`` section when there
    is one, otherwise from the top level itself. They are validated before
    being bound.

    Raises
    ------
    RuntimeError
        If the file, or its ``mixtable`` section, is not a mapping.
    SettingsValidationError
        If a key is unknown or has a value of the wrong type.
    """
    config = load_config_file(path)
    if isinstance(config, Mapping) and isinstance(config.get('mixtable'), Mapping):
        config = config['mixtable']
    if not isinstance(config, Mapping):
        raise RuntimeError('Settings file must contain a mapping')

    settings = dict(config)
    ensure_valid_settings(settings)
    bind_settings(**settings)
    logger.info('Bound settings %s from %s', ', '.join(sorted(settings)) or '(none)', path)
