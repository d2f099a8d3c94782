"""Bootstrap configuration read from environment variables.

Values here are needed before the settings registry is available (log and
config locations, HTTP bind address). Everything else lives in the
settings registry.
"""

import os
from pathlib import Path


def string_to_bool(s: str) -> bool:
    return s.strip().lower() in ["true", "yes", "1", "y", "on"]


CONFIG_DIR = Path(os.getenv("CONFIG_DIR", "/config"))
LOG_ROOT = Path(os.getenv("LOG_ROOT", "/var/log/"))
LOG_DIR = LOG_ROOT / "landfall"
LOG_FILE = LOG_DIR / "landfall.log"

ENABLE_LOGGING = string_to_bool(os.getenv("ENABLE_LOGGING", "true"))
DEBUG = string_to_bool(os.getenv("DEBUG", "false"))
LOG_LEVEL = "DEBUG" if DEBUG else os.getenv("LOG_LEVEL", "INFO").upper()

FLASK_HOST = os.getenv("FLASK_HOST", "0.0.0.0")
FLASK_PORT = int(os.getenv("FLASK_PORT", "8084"))


def is_config_dir_writable() -> bool:
    """True if CONFIG_DIR exists (or can be created) and accepts writes."""
    try:
        CONFIG_DIR.mkdir(parents=True, exist_ok=True)
        probe = CONFIG_DIR / ".write_test"
        probe.touch()
        probe.unlink()
        return True
    except OSError:
        return False
