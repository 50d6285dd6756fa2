"""
Provider registry — name-keyed store of provider definitions.

Definitions come from two places, loaded in this order:

1. Built-ins shipped inside the package (``data/definitions/*.yaml``).
   A broken built-in file is logged and skipped.
2. The first existing user definitions directory (see
   :func:`default_search_dirs`).  A user definition replaces the
   built-in of the same name in full; fields are never merged.

The registry is owned by a ``ProvisionContext`` rather than living in
module state, so tests and callers can hold independent registries.
"""

from __future__ import annotations

import logging
import sys
import threading
from importlib import resources
from pathlib import Path
from typing import Any, Iterator

import yaml
from pydantic import ValidationError

from hostprep.core.errors import ProviderConfigError
from hostprep.core.models.provider import Provider
from hostprep.core.services.provisioning.data.constants import (
    DARWIN_PROVIDER_SEARCH_DIRS,
    PROVIDER_SEARCH_DIRS,
)
from hostprep.core.services.provisioning.detection.paths import find_tool
from hostprep.core.services.provisioning.detection.system_info import current_os

logger = logging.getLogger(__name__)

_DATA_PACKAGE = "hostprep.core.services.provisioning.data"
_DEFINITION_SUFFIXES = (".yaml", ".yml")


# ── Definition parsing ──────────────────────────────────────────


def parse_definition(data: Any, source: str) -> Provider:
    """Validate raw YAML data into a ``Provider``.

    Accepts either a top-level ``provider:`` mapping or a flat one.

    Raises:
        ProviderConfigError: Not a mapping, no name, or schema errors
            (including unknown step actions and missing step fields).
    """
    if not isinstance(data, dict):
        raise ProviderConfigError(
            f"Expected a YAML mapping in {source}, got {type(data).__name__}"
        )

    body = data.get("provider", data)
    if not isinstance(body, dict):
        raise ProviderConfigError(f"'provider' in {source} must be a mapping")

    body = dict(body)
    body.pop("bin_path", None)

    if not body.get("name"):
        raise ProviderConfigError(f"Provider name not set in {source}")

    try:
        return Provider.model_validate(body)
    except ValidationError as e:
        raise ProviderConfigError(f"Invalid provider definition in {source}: {e}") from e


def load_definition(path: Path) -> Provider:
    """Load one provider definition file."""
    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ProviderConfigError(f"Cannot read {path}: {e}") from e

    try:
        data = yaml.safe_load(raw)
    except yaml.YAMLError as e:
        raise ProviderConfigError(f"Invalid YAML in {path}: {e}") from e

    provider = parse_definition(data, str(path))
    logger.debug(
        "Loaded provider %s with binary %s from %s",
        provider.name, provider.detection.binary, path,
    )
    return provider


def builtin_definition_files() -> dict[str, str]:
    """Filename → YAML text of every built-in definition."""
    root = resources.files(_DATA_PACKAGE) / "definitions"
    files: dict[str, str] = {}
    for entry in sorted(root.iterdir(), key=lambda e: e.name):
        if entry.is_file() and entry.name.endswith(_DEFINITION_SUFFIXES):
            files[entry.name] = entry.read_text(encoding="utf-8")
    return files


# ── Search locations ────────────────────────────────────────────


def default_search_dirs(providers_path: str = "") -> list[Path]:
    """User definition directories in search order."""
    dirs: list[Path] = []
    if providers_path:
        dirs.append(Path(providers_path).expanduser())

    dirs.append(Path.cwd() / "providers")
    if sys.argv and sys.argv[0]:
        dirs.append(Path(sys.argv[0]).resolve().parent / "providers")

    dirs.extend(Path(d).expanduser() for d in PROVIDER_SEARCH_DIRS)
    if current_os() == "darwin":
        dirs.extend(Path(d) for d in DARWIN_PROVIDER_SEARCH_DIRS)
    return dirs


# ── Registry ────────────────────────────────────────────────────


class ProviderRegistry:
    """Name-keyed provider definitions.

    Args:
        search_dirs: User definition directories to search, in order.
            Defaults to :func:`default_search_dirs`.
        providers_path: Extra directory searched first when
            ``search_dirs`` is not given.
        load_builtins: Load the packaged definitions on initialize.
    """

    def __init__(
        self,
        *,
        search_dirs: list[Path] | None = None,
        providers_path: str = "",
        load_builtins: bool = True,
    ):
        self._providers: dict[str, Provider] = {}
        self._lock = threading.Lock()
        self._initialized = False
        self._search_dirs = search_dirs
        self._providers_path = providers_path
        self._load_builtins = load_builtins

    # ── Loading ──

    def initialize(self) -> None:
        """Load built-in then user definitions.

        Idempotent: once a non-empty registry exists, later calls do
        nothing.

        Raises:
            ProviderConfigError: No providers at all after both passes.
        """
        with self._lock:
            if self._initialized and self._providers:
                return

            if self._load_builtins:
                self._load_builtin_definitions()

            user_dir = self.find_user_dir()
            if user_dir is None:
                logger.debug("No user provider directory found")
            else:
                try:
                    self.load_directory(user_dir)
                except ProviderConfigError as e:
                    logger.warning("Failed to load providers from %s: %s", user_dir, e)

            self._initialized = True

            if not self._providers:
                raise ProviderConfigError("No providers found (built-in or filesystem)")

            logger.debug("Registry holds %d providers: %s", len(self._providers), self.names())

    def _load_builtin_definitions(self) -> None:
        try:
            files = builtin_definition_files()
        except OSError as e:
            logger.error("Failed to read built-in providers: %s", e)
            return

        for filename, text in files.items():
            source = f"built-in {filename}"
            try:
                provider = parse_definition(yaml.safe_load(text), source)
            except (yaml.YAMLError, ProviderConfigError) as e:
                logger.error("Skipping %s: %s", source, e)
                continue
            self._providers[provider.name] = provider
        logger.debug("Loaded %d built-in providers", len(self._providers))

    def find_user_dir(self) -> Path | None:
        """First existing user definitions directory, if any."""
        dirs = self._search_dirs
        if dirs is None:
            dirs = default_search_dirs(self._providers_path)
        for d in dirs:
            if d.is_dir():
                logger.debug("Found providers directory at %s", d)
                return d
        return None

    def load_directory(self, path: Path) -> list[str]:
        """Load every definition file in ``path``, sorted by filename.

        Files loaded before a broken one stay registered.

        Returns:
            Names of the providers loaded.

        Raises:
            ProviderConfigError: The directory is unreadable or a file
                in it is invalid.
        """
        try:
            entries = sorted(p for p in path.iterdir() if p.is_file())
        except OSError as e:
            raise ProviderConfigError(f"Error reading definitions directory {path}: {e}") from e

        loaded: list[str] = []
        for entry in entries:
            if entry.suffix not in _DEFINITION_SUFFIXES:
                continue
            provider = load_definition(entry)
            if provider.name in self._providers:
                logger.debug("Overriding provider %s with %s", provider.name, entry)
            self._providers[provider.name] = provider
            loaded.append(provider.name)
        return loaded

    def register(self, provider: Provider) -> None:
        """Insert or fully replace a provider by name."""
        self._providers[provider.name] = provider

    # ── Lookup ──

    def get(self, name: str) -> Provider | None:
        """Registry entry without any PATH check."""
        self.initialize()
        return self._providers.get(name)

    def get_provider(self, name: str) -> Provider | None:
        """Registry entry whose binary resolves right now.

        The PATH lookup happens on every call, so a binary installed
        after the registry loaded is picked up.
        """
        self.initialize()

        provider = self._providers.get(name)
        if provider is None:
            logger.error(
                "Provider %s not found in loaded providers. Available providers: %s",
                name, self.names(),
            )
            return None

        tool = find_tool(provider.detection.binary)
        if not tool.exists:
            logger.error(
                "Binary %s not found for provider %s", provider.detection.binary, name,
            )
            return None

        provider.bin_path = tool.bin
        return provider

    def names(self) -> list[str]:
        return sorted(self._providers)

    def all(self) -> list[Provider]:
        self.initialize()
        return [self._providers[n] for n in sorted(self._providers)]

    def __contains__(self, name: object) -> bool:
        return name in self._providers

    def __len__(self) -> int:
        return len(self._providers)

    def __iter__(self) -> Iterator[Provider]:
        return iter(self.all())
