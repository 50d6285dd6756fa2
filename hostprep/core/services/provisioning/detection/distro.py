"""
L3 Detection — Linux distribution identity and family lookup.

Parsing of ``/etc/os-release`` (with ``/etc/lsb-release`` as
fallback) plus pure lookups against ``DISTRO_FAMILIES``.  Nothing is
cached: the table is small and os-release is a few hundred bytes.
"""

from __future__ import annotations

import logging
from pathlib import Path

from hostprep.core.services.provisioning.data import constants

logger = logging.getLogger(__name__)


def _parse_key_values(text: str) -> dict[str, str]:
    values: dict[str, str] = {}
    for line in text.splitlines():
        line = line.strip()
        if not line or line.startswith("#") or "=" not in line:
            continue
        key, value = line.split("=", 1)
        values[key.strip()] = value.strip().strip('"').strip("'")
    return values


def read_os_release(path: str | Path | None = None) -> dict[str, str]:
    """Parse an os-release file into a dict.

    Returns an empty dict when the file is missing or unreadable.
    """
    target = Path(path or constants.OS_RELEASE_PATH)
    try:
        return _parse_key_values(target.read_text(encoding="utf-8"))
    except OSError as e:
        logger.debug("Cannot read %s: %s", target, e)
        return {}


def _read_lsb_release() -> dict[str, str]:
    try:
        return _parse_key_values(
            Path(constants.LSB_RELEASE_PATH).read_text(encoding="utf-8")
        )
    except OSError:
        return {}


def get_distro_id() -> str:
    """Distribution id (``ubuntu``, ``arch``...), lowercased.

    Falls back to ``DISTRIB_ID`` from lsb-release; empty when neither
    file names one.
    """
    distro = read_os_release().get("ID") or _read_lsb_release().get("DISTRIB_ID", "")
    return distro.lower()


def get_distro_version() -> str:
    return (
        read_os_release().get("VERSION_ID")
        or _read_lsb_release().get("DISTRIB_RELEASE", "")
    )


def get_distro_id_like() -> list[str]:
    """``ID_LIKE`` tokens from os-release, in file order."""
    return read_os_release().get("ID_LIKE", "").split()




def _parent_family(distro: str) -> str | None:
    """Family whose variant list names ``distro``, if any."""
    for family, variants in constants.DISTRO_FAMILIES.items():
        if distro in variants:
            return family
    return None


def get_distro_family(distro: str) -> str:
    """Base family for ``distro``.

    ``endeavouros`` → ``arch``.  A listed variant maps to the family that
    lists it, even when it is a family key itself (``ubuntu`` →
    ``debian``, ``kubuntu`` → ``ubuntu``).  Other family keys map to
    themselves.  Unknown ids fall back to the first ``ID_LIKE`` token
    that is a family key, then to ``distro`` unchanged.
    """
    parent = _parent_family(distro)
    if parent is not None:
        return parent

    families = constants.DISTRO_FAMILIES
    if distro in families:
        return distro

    for like in get_distro_id_like():
        if like in families:
            return like

    return distro


def is_distro_in_family(distro: str, family: str) -> bool:
    """Whether ``distro`` belongs to ``family``.

    True when they are equal, when ``family`` is reached by following
    variant lists upward from ``distro`` (``kubuntu`` → ``ubuntu`` →
    ``debian``), or when ``family`` is one of the host's ``ID_LIKE``
    tokens.
    """
    seen: set[str] = set()
    current: str | None = distro
    while current and current not in seen:
        if current == family:
            return True
        seen.add(current)
        current = _parent_family(current)

    return family in get_distro_id_like()
