"""Socket inode -> owning (pid, fd) index built from /proc/[pid]/fd."""

from __future__ import annotations

import logging
import os
import re

from netprobe.models import InodeOwner
from netprobe.procfs import host_proc, list_process_ids

logger = logging.getLogger(__name__)

_SOCKET_LINK = re.compile(r"^socket:\[(\d+)\]$")

InodeIndex = dict[str, list[InodeOwner]]


def get_proc_inodes(pid: int, proc_path: str | None = None) -> InodeIndex:
    """Map socket inodes to the descriptors of a single process.

    Descriptors are visited in ascending numeric order. Entries that aren't
    sockets, or that vanish before readlink, are skipped. A process whose fd
    directory can't be listed (exited, or owned by someone else) yields an
    empty map.
    """
    fd_dir = host_proc(str(pid), "fd", proc_path=proc_path)
    try:
        names = os.listdir(fd_dir)
    except OSError as e:
        logger.debug("Cannot list %s: %s", fd_dir, e)
        return {}

    inodes: InodeIndex = {}
    for fd in sorted(int(n) for n in names if n.isascii() and n.isdigit()):
        try:
            target = os.readlink(os.path.join(fd_dir, str(fd)))
        except OSError:
            continue
        match = _SOCKET_LINK.match(target)
        if match is None:
            continue
        inodes.setdefault(match.group(1), []).append(InodeOwner(pid=pid, fd=fd))
    return inodes


def get_all_inodes(proc_path: str | None = None) -> InodeIndex:
    """Map socket inodes to every (pid, fd) pair on the system.

    A socket shared between processes (e.g. after fork) keeps all of its
    owners, ordered by pid then fd.
    """
    inodes: InodeIndex = {}
    for pid in list_process_ids(proc_path):
        for inode, owners in get_proc_inodes(pid, proc_path).items():
            inodes.setdefault(inode, []).extend(owners)
    logger.debug("Indexed %d socket inodes", len(inodes))
    return inodes
