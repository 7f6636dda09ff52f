# pyright: reportUnusedImport=false
from mixtable.errors import InvalidArgument, TableError
from mixtable.keys import KeyKind, classify_key
from mixtable.loader import load_table, to_table
from mixtable.settings import SettingsValidationError, bind_settings, reset_settings
from mixtable.table import RESERVED_NAMES, Table
