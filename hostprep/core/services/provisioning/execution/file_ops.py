"""
L4 Execution — File-mutation primitives.

Every operation tries the direct filesystem call first.  When that
fails with ``PermissionError`` and elevation is allowed, it falls back
to the equivalent elevated command (``mv``, ``mkdir -p``, ``chmod``,
``chown``, ``ln -sfn``, ``rm -rf``) through the command runner.

Files are never written in place: content goes to a temp file that is
then moved over the destination.
"""

from __future__ import annotations

import errno
import logging
import os
import shutil
import tempfile
from pathlib import Path

from hostprep.core.errors import ExecutionError
from hostprep.core.models.command import Command
from hostprep.core.services.provisioning.execution.subprocess_runner import run_command

logger = logging.getLogger(__name__)

_DEFAULT_FILE_MODE = 0o644


def _run_elevated(exec_: str, *args: str | Path, timeout: float | None) -> None:
    run_command(
        Command(exec=exec_, args=[str(a) for a in args], elevated=True),
        timeout=timeout,
    )


def _denied(op: str, path: Path, e: OSError) -> ExecutionError:
    return ExecutionError(f"Permission denied during {op} of {path}: {e}")


def parse_mode(mode: str) -> int:
    """Octal mode string (``"0755"``, ``"644"``) to an int."""
    try:
        return int(mode, 8)
    except ValueError as e:
        raise ExecutionError(f"Invalid file mode: {mode!r}") from e


# ── Temp files ──────────────────────────────────────────────────


def make_temp_near(dest: Path) -> Path:
    """Create an empty temp file for ``dest``.

    Lives in ``dest``'s directory so the final rename stays on one
    filesystem; falls back to the system temp dir when that directory
    is missing or not writable.
    """
    prefix = f".{dest.name}."
    try:
        fd, name = tempfile.mkstemp(prefix=prefix, suffix=".tmp", dir=dest.parent)
    except OSError:
        fd, name = tempfile.mkstemp(prefix=prefix, suffix=".tmp")
    os.close(fd)
    return Path(name)


def _discard(tmp: Path) -> None:
    try:
        tmp.unlink()
    except FileNotFoundError:
        pass
    except OSError as e:
        logger.warning("Could not remove temp file %s: %s", tmp, e)


def atomic_relocate(
    tmp: Path, dest: Path, *, elevated: bool = False, timeout: float | None = None,
) -> None:
    """Move ``tmp`` over ``dest``, creating parent directories."""
    try:
        dest.parent.mkdir(parents=True, exist_ok=True)
        try:
            os.replace(tmp, dest)
        except OSError as e:
            if e.errno != errno.EXDEV:
                raise
            shutil.move(str(tmp), str(dest))
    except PermissionError as e:
        if not elevated:
            raise _denied("move", dest, e) from e
        logger.debug("Moving %s to %s with elevation", tmp, dest)
        _run_elevated("mkdir", "-p", dest.parent, timeout=timeout)
        _run_elevated("mv", "-f", tmp, dest, timeout=timeout)
    except OSError as e:
        raise ExecutionError(f"Failed to move {tmp} to {dest}: {e}") from e


def atomic_write(
    dest: Path, content: str, *, elevated: bool = False, timeout: float | None = None,
) -> None:
    """Write ``content`` to ``dest`` through a temp file."""
    tmp = make_temp_near(dest)
    try:
        tmp.write_text(content, encoding="utf-8")
        os.chmod(tmp, _DEFAULT_FILE_MODE)
        atomic_relocate(tmp, dest, elevated=elevated, timeout=timeout)
    except OSError as e:
        raise ExecutionError(f"Failed to write {dest}: {e}") from e
    finally:
        if tmp.exists():
            _discard(tmp)
    logger.debug("Wrote %d bytes to %s", len(content), dest)


# ── Operations ──────────────────────────────────────────────────


def remove(dest: Path, *, elevated: bool = False, timeout: float | None = None) -> bool:
    """Delete ``dest`` (file, link, or directory tree).

    Returns:
        False when ``dest`` was already absent.
    """
    if not dest.exists() and not dest.is_symlink():
        logger.debug("%s does not exist, nothing to remove", dest)
        return False

    try:
        if dest.is_dir() and not dest.is_symlink():
            shutil.rmtree(dest)
        else:
            dest.unlink()
    except PermissionError as e:
        if not elevated:
            raise _denied("remove", dest, e) from e
        _run_elevated("rm", "-rf", dest, timeout=timeout)
    except OSError as e:
        raise ExecutionError(f"Failed to remove {dest}: {e}") from e
    return True


def mkdir(
    dest: Path, mode: str = "", *, elevated: bool = False, timeout: float | None = None,
) -> None:
    """Create ``dest`` and missing parents, optionally setting its mode."""
    perms = parse_mode(mode) if mode else None
    try:
        dest.mkdir(parents=True, exist_ok=True)
        if perms is not None:
            os.chmod(dest, perms)
    except PermissionError as e:
        if not elevated:
            raise _denied("mkdir", dest, e) from e
        _run_elevated("mkdir", "-p", dest, timeout=timeout)
        if mode:
            _run_elevated("chmod", mode, dest, timeout=timeout)
    except OSError as e:
        raise ExecutionError(f"Failed to create directory {dest}: {e}") from e


def chmod(
    dest: Path, mode: str, *, elevated: bool = False, timeout: float | None = None,
) -> None:
    perms = parse_mode(mode)
    try:
        os.chmod(dest, perms)
    except PermissionError as e:
        if not elevated:
            raise _denied("chmod", dest, e) from e
        _run_elevated("chmod", mode, dest, timeout=timeout)
    except OSError as e:
        raise ExecutionError(f"Failed to chmod {dest}: {e}") from e


def chown(
    dest: Path,
    owner: str,
    group: str = "",
    *,
    elevated: bool = False,
    timeout: float | None = None,
) -> None:
    """Change ``dest``'s owner, and group when given."""
    try:
        shutil.chown(dest, user=owner, group=group or None)
    except PermissionError as e:
        if not elevated:
            raise _denied("chown", dest, e) from e
        spec = f"{owner}:{group}" if group else owner
        _run_elevated("chown", spec, dest, timeout=timeout)
    except LookupError as e:
        raise ExecutionError(f"Unknown owner for {dest}: {e}") from e
    except OSError as e:
        raise ExecutionError(f"Failed to chown {dest}: {e}") from e


def symlink(
    source: str, dest: Path, *, elevated: bool = False, timeout: float | None = None,
) -> None:
    """Point the link ``dest`` at ``source``, replacing any existing link."""
    tmp_link = dest.parent / f".{dest.name}.link.tmp"
    try:
        dest.parent.mkdir(parents=True, exist_ok=True)
        if tmp_link.is_symlink():
            tmp_link.unlink()
        os.symlink(source, tmp_link)
        os.replace(tmp_link, dest)
    except PermissionError as e:
        if not elevated:
            raise _denied("symlink", dest, e) from e
        _run_elevated("ln", "-sfn", source, dest, timeout=timeout)
    except OSError as e:
        if tmp_link.is_symlink():
            _discard(tmp_link)
        raise ExecutionError(f"Failed to link {dest} to {source}: {e}") from e


def copy(
    source: Path, dest: Path, *, elevated: bool = False, timeout: float | None = None,
) -> None:
    """Copy ``source`` to ``dest``, keeping its mode."""
    if not source.is_file():
        raise ExecutionError(f"Copy source {source} is not a file")

    tmp = make_temp_near(dest)
    try:
        shutil.copy2(source, tmp)
        atomic_relocate(tmp, dest, elevated=elevated, timeout=timeout)
    except OSError as e:
        raise ExecutionError(f"Failed to copy {source} to {dest}: {e}") from e
    finally:
        if tmp.exists():
            _discard(tmp)
