"""
L4 Execution — Network transfer.

Downloads stream into a file the caller owns; placing the result at
its final destination is the job of ``file_ops``.
"""

from __future__ import annotations

import logging
import shutil
import urllib.error
import urllib.request
from pathlib import Path

from hostprep import __version__
from hostprep.core.errors import DownloadError

logger = logging.getLogger(__name__)

_USER_AGENT = f"hostprep/{__version__}"


def fetch_to(url: str, path: Path, *, timeout: float = 60) -> int:
    """Download ``url`` into ``path``, overwriting it.

    Args:
        url: HTTP(S) URL.
        path: Local file to write.
        timeout: Socket timeout in seconds.

    Returns:
        Number of bytes written.

    Raises:
        DownloadError: Bad status, network error, or local write error.
    """
    if not url:
        raise DownloadError("No download URL specified")

    logger.debug("Downloading %s to %s", url, path)
    req = urllib.request.Request(url, headers={"User-Agent": _USER_AGENT})
    try:
        with urllib.request.urlopen(req, timeout=timeout) as resp, open(path, "wb") as f:
            shutil.copyfileobj(resp, f)
            size = f.tell()
    except urllib.error.HTTPError as e:
        raise DownloadError(f"Bad status downloading {url}: {e.code} {e.reason}") from e
    except urllib.error.URLError as e:
        raise DownloadError(f"Failed to download {url}: {e.reason}") from e
    except (OSError, ValueError) as e:
        raise DownloadError(f"Failed to download {url}: {e}") from e

    logger.debug("Downloaded %d bytes from %s", size, url)
    return size
