"""Settings registry with config file persistence.

Each tab is stored as `CONFIG_DIR/plugins/<tab>.json`. A value resolves from
its environment variable first, then the tab's file, then the field default.
"""

import json
import os
from dataclasses import dataclass, field
from pathlib import Path
from threading import Lock
from typing import Any, Callable, Dict, List, Optional, Union

from landfall.core.logger import setup_logger

logger = setup_logger(__name__)

_TRUE_STRINGS = ('true', '1', 'yes', 'on')


class ConfigurationError(RuntimeError):
    """Raised when a settings tab or value cannot be resolved."""


@dataclass
class FieldBase:
    """An editable setting.

    `key` names the value in the config file and, unless `env_var` says
    otherwise, the environment variable that overrides it.
    """
    key: str
    label: str
    description: str = ""
    default: Any = None
    env_var: Optional[str] = None
    env_supported: bool = True

    def get_env_var_name(self) -> str:
        return self.env_var or self.key

    def get_field_type(self) -> str:
        return type(self).__name__

    def parse_env(self, raw: str) -> Any:
        return raw


@dataclass
class TextField(FieldBase):
    placeholder: str = ""


@dataclass
class CheckboxField(FieldBase):
    default: bool = False

    def parse_env(self, raw: str) -> Any:
        return raw.strip().lower() in _TRUE_STRINGS


@dataclass
class HeadingField:
    """Section title shown between fields; holds no value."""
    key: str
    title: str
    description: str = ""

    def get_field_type(self) -> str:
        return "HeadingField"


SettingsField = Union[TextField, CheckboxField, HeadingField]


@dataclass
class SettingsTab:
    name: str
    display_name: str
    fields: List[SettingsField] = field(default_factory=list)
    order: int = 100

    def value_fields(self) -> Dict[str, FieldBase]:
        return {f.key: f for f in self.fields if isinstance(f, FieldBase)}


_SETTINGS_REGISTRY: Dict[str, SettingsTab] = {}
_REGISTRY_LOCK = Lock()


def register_settings(name: str, display_name: str, order: int = 100):
    """Register the fields returned by the decorated function as a tab."""

    def decorator(func: Callable[[], List[SettingsField]]):
        tab = SettingsTab(name=name, display_name=display_name, fields=func(), order=order)
        with _REGISTRY_LOCK:
            _SETTINGS_REGISTRY[name] = tab
        logger.debug(f"Registered settings tab: {name} ({len(tab.fields)} fields)")
        return func

    return decorator


def get_settings_tab(name: str) -> Optional[SettingsTab]:
    return _SETTINGS_REGISTRY.get(name)


def get_all_settings_tabs() -> List[SettingsTab]:
    with _REGISTRY_LOCK:
        tabs = list(_SETTINGS_REGISTRY.values())
    return sorted(tabs, key=lambda t: (t.order, t.name))


def _get_config_file_path(tab_name: str) -> Path:
    # Read lazily so CONFIG_DIR can be redirected after import.
    from landfall.config import env
    return Path(env.CONFIG_DIR) / "plugins" / f"{tab_name}.json"


def load_config_file(tab_name: str) -> Dict[str, Any]:
    path = _get_config_file_path(tab_name)
    if not path.exists():
        return {}

    try:
        with open(path, 'r') as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        logger.error(f"Invalid JSON in settings file {path}: {e}")
        return {}
    except OSError as e:
        logger.error(f"Cannot read settings file {path}: {e}")
        return {}

    if not isinstance(data, dict):
        logger.error(f"Settings file {path} does not hold an object, ignoring it")
        return {}
    return data


def save_config_file(tab_name: str, values: Dict[str, Any]) -> bool:
    """Merge `values` into the tab's file. Returns False if it cannot be written."""
    path = _get_config_file_path(tab_name)
    merged = {**load_config_file(tab_name), **values}

    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, 'w') as f:
            json.dump(merged, f, indent=2)
    except (OSError, TypeError) as e:
        logger.error(f"Could not write settings for {tab_name} to {path}: {e}")
        return False

    logger.info(f"Settings for {tab_name} written to {path}")
    return True


def is_value_from_env(field: SettingsField) -> bool:
    if not isinstance(field, FieldBase) or not field.env_supported:
        return False
    return field.get_env_var_name() in os.environ


def get_setting_value(field: SettingsField, tab_name: str) -> Any:
    if not isinstance(field, FieldBase):
        return None

    if is_value_from_env(field):
        return field.parse_env(os.environ[field.get_env_var_name()])

    stored = load_config_file(tab_name)
    return stored.get(field.key, field.default)


def serialize_field(field: SettingsField, tab_name: str, include_value: bool = True) -> Dict[str, Any]:
    if not isinstance(field, FieldBase):
        return {
            "type": field.get_field_type(),
            "key": field.key,
            "title": field.title,
            "description": field.description,
        }

    data: Dict[str, Any] = {
        "type": field.get_field_type(),
        "key": field.key,
        "label": field.label,
        "description": field.description,
        "default": field.default,
        "fromEnv": is_value_from_env(field),
    }
    if isinstance(field, TextField) and field.placeholder:
        data["placeholder"] = field.placeholder
    if include_value:
        data["value"] = get_setting_value(field, tab_name)
    return data


def serialize_tab(tab: SettingsTab, include_values: bool = True) -> Dict[str, Any]:
    return {
        "name": tab.name,
        "displayName": tab.display_name,
        "order": tab.order,
        "fields": [serialize_field(f, tab.name, include_values) for f in tab.fields],
    }


def update_settings(tab_name: str, values: Dict[str, Any]) -> Dict[str, Any]:
    """Persist new values for a tab and refresh the config cache.

    Keys the tab does not declare are ignored, as are keys pinned by an
    environment variable.
    """
    tab = get_settings_tab(tab_name)
    if tab is None:
        raise ConfigurationError(f"Unknown settings tab: {tab_name}")

    fields = tab.value_fields()
    unknown = [key for key in values if key not in fields]
    pinned = [key for key in values if key in fields and is_value_from_env(fields[key])]
    to_save = {key: value for key, value in values.items() if key in fields and key not in pinned}

    if unknown:
        logger.debug(f"Ignoring unknown settings for {tab_name}: {unknown}")

    suffix = f". Skipped (set via env): {', '.join(pinned)}" if pinned else ""

    if not to_save:
        return {"success": True, "message": "No settings to update" + suffix, "updated": []}

    if not save_config_file(tab_name, to_save):
        return {"success": False, "message": "Failed to save settings", "updated": []}

    from landfall.core.config import config
    config.refresh()

    return {
        "success": True,
        "message": f"Updated {len(to_save)} setting(s){suffix}",
        "updated": list(to_save),
    }
