"""Thin I/O layer over the procfs pseudo-files."""

from __future__ import annotations

import logging
import os
from pathlib import Path

from netprobe.errors import FormatError

logger = logging.getLogger(__name__)

DEFAULT_PROC_PATH = "/proc"


def host_proc(*subpath: str, proc_path: str | None = None) -> str:
    """Resolve the procfs root and optionally join a subpath onto it.

    An explicit ``proc_path`` wins, then the ``HOST_PROC`` environment
    variable (handy when the host's /proc is bind-mounted into a container),
    then ``/proc``.
    """
    root = proc_path or os.environ.get("HOST_PROC") or DEFAULT_PROC_PATH
    if not subpath:
        return root
    return str(Path(root).joinpath(*subpath))


def read_lines(path: str | os.PathLike) -> list[str]:
    """Read a whole text file and return its lines without line endings.

    Bytes that are not valid UTF-8 (UNIX socket paths may hold any bytes)
    come back as backslash escapes such as ``\\xe9``.
    """
    return Path(path).read_text(errors="backslashreplace").splitlines()


def read_ints(path: str | os.PathLike) -> list[int]:
    """Read whitespace separated integers from a file."""
    text = Path(path).read_text()
    try:
        return [int(tok) for tok in text.split()]
    except ValueError as e:
        raise FormatError(f"{path}: expected integers: {e}") from e


def path_exists(path: str | os.PathLike) -> bool:
    try:
        return Path(path).exists()
    except OSError:
        return False


def list_process_ids(proc_path: str | None = None) -> list[int]:
    """Return every numeric entry under the procfs root, ascending.

    Non-numeric entries (``self``, ``net``, ``sys``...) are skipped.
    """
    root = host_proc(proc_path=proc_path)
    pids = [
        int(name) for name in os.listdir(root) if name.isascii() and name.isdigit()
    ]
    pids.sort()
    logger.debug("Found %d processes under %s", len(pids), root)
    return pids
