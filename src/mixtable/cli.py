import argparse
import logging
import sys
from pathlib import Path
from typing import Any, Iterator

from mixtable.errors import TableError
from mixtable.loader import load_settings, load_table
from mixtable.table import Table

logger = logging.getLogger(__name__)


def default_argparser(description: str = 'Load a config file into a table and describe it') -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='mixtable',
        description=description,
        epilog='Further --path value, --path=value or --flag arguments are written into the table. '
        'Paths are dotted, digits address values: --servers.0.port=8080.',
    )
    parser.add_argument(
        'file', type=Path, help='Path to the file to load (supported extensions: *.json, *.yaml/yml, *.toml)'
    )
    parser.add_argument(
        '-s',
        '--settings',
        type=Path,
        default=None,
        help='Optional, path to a file with mixtable settings.',
    )
    parser.add_argument('-v', '--verbose', action='store_true', help='Log debug messages.')

    return parser


def parse_overrides(args: list[str]) -> Iterator[tuple[str, Any]]:
    """Yield ``(path, value)`` for every ``--path`` argument.

    ``--path=value`` and ``--path value`` carry a value, a ``--path``
    followed by another option or nothing is a flag set to ``True``. Tokens
    that do not belong to an option are skipped.
    """
    tokens = iter(args)
    pending: str | None = None

    for token in tokens:
        if not token.startswith('--'):
            if pending is not None:
                yield pending, parse_scalar(token)
                pending = None
            continue

        if pending is not None:
            yield pending, True

        path, sep, text = token[2:].partition('=')
        if sep:
            yield path, parse_scalar(text)
            pending = None
        else:
            pending = path

    if pending is not None:
        yield pending, True


def parse_scalar(text: str) -> Any:
    match text.lower():
        case 'true':
            return True
        case 'false':
            return False
        case 'null' | 'none':
            return None

    for convert in (int, float):
        try:
            return convert(text)
        except ValueError:
            pass

    if len(text) >= 2 and text[0] == text[-1] and text[0] in '\'"':
        return text[1:-1]
    return text


def apply_overrides(table: Table, args: list[str]) -> Table:
    """Write ``--path value`` overrides into ``table``.

    Each dotted path segment is a field name, or a sequence index when it
    is all digits. Missing intermediate tables are created.
    """
    for path, value in parse_overrides(args):
        *parents, last = (_path_key(part) for part in path.split('.'))
        target = table
        for part in parents:
            child = target[part]
            if not isinstance(child, Table):
                child = type(target)()
                target[part] = child
            target = child

        logger.debug('Override %s = %r', path, value)
        target[last] = value

    return table


def _path_key(part: str) -> str | int:
    return int(part) if part.isdigit() else part


def main(argv: list[str] | None = None) -> int:
    argparser = default_argparser()
    namespace, rest_args = argparser.parse_known_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if namespace.verbose else logging.WARNING,
        format='%(levelname)s %(name)s: %(message)s',
    )

    try:
        if namespace.settings is not None:
            load_settings(namespace.settings)
        table = load_table(namespace.file)
        apply_overrides(table, rest_args)
    except (FileNotFoundError, RuntimeError, TableError) as exc:
        logger.error('%s', exc)
        return 1

    print(table.describe())
    return 0


if __name__ == '__main__':
    sys.exit(main())
