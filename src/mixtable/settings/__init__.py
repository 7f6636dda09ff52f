# pyright: reportUnusedImport=false
from mixtable.settings.registry import MAX_SPARSE_GAP, WARN_ON_RESERVED_KEYS, Setting, all_registered, register
from mixtable.settings.validation import (
    SettingsValidationError,
    bind_settings,
    ensure_valid_settings,
    get_settings,
    reset_settings,
    resolve_setting,
)
