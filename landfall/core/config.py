"""Runtime configuration singleton backed by the settings registry."""

from threading import Lock
from typing import Any, Dict, Optional, Tuple

from landfall.core.logger import setup_logger
from landfall.core.settings_registry import (
    HeadingField,
    SettingsField,
    get_all_settings_tabs,
    get_setting_value,
)

logger = setup_logger(__name__)

_MISSING = object()


class Config:
    """Resolves setting keys across all registered tabs.

    Lookup order per key is ENV var, then config file, then field default.
    Resolved values are cached until `refresh()` is called.
    """

    def __init__(self) -> None:
        self._cache: Dict[str, Any] = {}
        self._lock = Lock()
        self._loaded = False

    def _ensure_loaded(self) -> None:
        if self._loaded:
            return
        # Registers the settings tabs as an import side effect.
        import landfall.config.settings  # noqa: F401
        self._loaded = True

    def _find_field(self, key: str) -> Optional[Tuple[SettingsField, str]]:
        for tab in get_all_settings_tabs():
            for field in tab.fields:
                if not isinstance(field, HeadingField) and field.key == key:
                    return field, tab.name
        return None

    def get(self, key: str, default: Any = None) -> Any:
        self._ensure_loaded()
        with self._lock:
            if key in self._cache:
                return self._cache[key]

        found = self._find_field(key)
        if found is None:
            return default

        field, tab_name = found
        value = get_setting_value(field, tab_name)
        if value is None:
            return default

        with self._lock:
            self._cache[key] = value
        return value

    def refresh(self) -> None:
        with self._lock:
            self._cache.clear()
        logger.debug("Configuration cache cleared")

    def __getattr__(self, key: str) -> Any:
        if not key.isupper():
            raise AttributeError(key)
        value = self.get(key, _MISSING)
        if value is _MISSING:
            raise AttributeError(key)
        return value


config = Config()
