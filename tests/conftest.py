from collections.abc import Iterator

import pytest


@pytest.fixture(autouse=True)
def reset_settings_and_registry() -> Iterator[None]:
    """Reset module-level state in the settings modules around each test."""
    import mixtable.settings.registry as registry
    import mixtable.settings.validation as validation

    # Built-in settings are registered at import time, keep those
    saved = dict(registry._REGISTRY)  # pyright: ignore[reportPrivateUsage]
    validation._SETTINGS_CONTEXT.clear()  # pyright: ignore[reportPrivateUsage]

    yield

    registry._REGISTRY.clear()  # pyright: ignore[reportPrivateUsage]
    registry._REGISTRY.update(saved)  # pyright: ignore[reportPrivateUsage]
    validation._SETTINGS_CONTEXT.clear()  # pyright: ignore[reportPrivateUsage]
