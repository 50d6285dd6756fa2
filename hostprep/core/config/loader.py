"""
Settings loader — reads hostprep.yml into ``Settings``.

The file is optional: without one, defaults apply.  Environment
variables override whatever the file says.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path

import yaml
from pydantic import ValidationError

from hostprep.core.errors import SettingsError
from hostprep.core.models.settings import Settings

logger = logging.getLogger(__name__)

# Default config filename
SETTINGS_FILE = "hostprep.yml"

_BOOL_ENV = {
    "HOSTPREP_DEBUG": "debug",
    "HOSTPREP_INTERACTIVE": "interactive",
}
_STR_ENV = {
    "HOSTPREP_PROVIDERS_PATH": "providers_path",
}
_TRUE = ("1", "true", "yes", "on")
_FALSE = ("0", "false", "no", "off", "")


def find_settings_file(start_dir: Path | None = None) -> Path | None:
    """Search for hostprep.yml starting from the given directory, walking up.

    Args:
        start_dir: Directory to start searching from (default: cwd).

    Returns:
        Path to hostprep.yml, or None if not found.
    """
    current = (start_dir or Path.cwd()).resolve()

    for _ in range(20):  # safety limit
        candidate = current / SETTINGS_FILE
        if candidate.is_file():
            return candidate
        parent = current.parent
        if parent == current:
            break  # filesystem root
        current = parent

    return None


def _env_overrides(environ: dict[str, str]) -> dict[str, object]:
    overrides: dict[str, object] = {}
    for var, key in _BOOL_ENV.items():
        if var not in environ:
            continue
        value = environ[var].strip().lower()
        if value in _TRUE:
            overrides[key] = True
        elif value in _FALSE:
            overrides[key] = False
        else:
            raise SettingsError(f"{var} must be a boolean, got {environ[var]!r}")
    for var, key in _STR_ENV.items():
        if environ.get(var):
            overrides[key] = environ[var]
    return overrides


def load_settings(
    path: Path | None = None,
    *,
    environ: dict[str, str] | None = None,
) -> Settings:
    """Load and validate run settings.

    Args:
        path: Explicit path to a settings file.  If None, searches
            upward from cwd; no file found means defaults.
        environ: Environment to read overrides from (default:
            ``os.environ``).

    Returns:
        Validated Settings model.

    Raises:
        SettingsError: An explicit path is missing, or the file or an
            override is invalid.
    """
    environ = dict(os.environ) if environ is None else environ

    data: dict = {}
    if path is not None and not path.is_file():
        raise SettingsError(f"Settings file not found: {path}")

    if path is None:
        path = find_settings_file()

    if path is not None:
        logger.debug("Loading settings from %s", path)
        try:
            raw = path.read_text(encoding="utf-8")
        except OSError as e:
            raise SettingsError(f"Cannot read {path}: {e}") from e

        try:
            loaded = yaml.safe_load(raw)
        except yaml.YAMLError as e:
            raise SettingsError(f"Invalid YAML in {path}: {e}") from e

        if loaded is None:
            loaded = {}
        if not isinstance(loaded, dict):
            raise SettingsError(f"Expected a YAML mapping in {path}, got {type(loaded).__name__}")

        # The YAML may wrap everything under a "settings" key or be flat
        data = loaded["settings"] if "settings" in loaded else loaded
        if not isinstance(data, dict):
            raise SettingsError(f"'settings' in {path} must be a mapping")
        data = dict(data)

    data.update(_env_overrides(environ))

    try:
        settings = Settings.model_validate(data)
    except ValidationError as e:
        raise SettingsError(f"Invalid settings: {e}") from e

    logger.debug("Settings: %s", settings)
    return settings
