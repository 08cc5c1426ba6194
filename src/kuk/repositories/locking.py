"""Advisory inter-process file locks.

Each locked file gets a sidecar ``<name>.lock`` next to it. ``flock`` is
released by the kernel when the holder dies, so a crashed process never
leaves a lock behind; a live holder that never lets go is bounded by the
timeout instead.
"""

from __future__ import annotations

import fcntl
import logging
import time
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path

from ..errors import IoFailure, Locked

logger = logging.getLogger(__name__)

MAX_POLL_INTERVAL = 0.2


def lock_path_for(target: Path) -> Path:
    return target.with_name(f"{target.name}.lock")


@contextmanager
def file_lock(target: Path, timeout: float, poll_interval: float = 0.01) -> Iterator[None]:
    """Hold an exclusive advisory lock on ``target`` for the duration of the block.

    Args:
        target: The file being protected (the lock lives in a sidecar file)
        timeout: Maximum seconds to wait for the lock
        poll_interval: Initial delay between attempts, doubled after each miss

    Raises:
        Locked: The lock was not acquired within ``timeout``
        IoFailure: The lock file could not be opened
    """
    lock_path = lock_path_for(target)
    try:
        lock_file = lock_path.open("a")
    except OSError as e:
        raise IoFailure(lock_path, e.strerror or str(e)) from e

    try:
        deadline = time.monotonic() + timeout
        delay = poll_interval
        while True:
            try:
                fcntl.flock(lock_file.fileno(), fcntl.LOCK_EX | fcntl.LOCK_NB)
                break
            except BlockingIOError:
                remaining = deadline - time.monotonic()
                if remaining <= 0:
                    logger.info("Lock wait timed out after %ss: %s", timeout, lock_path)
                    raise Locked(target, timeout) from None
                time.sleep(min(delay, remaining))
                delay = min(delay * 2, MAX_POLL_INTERVAL)

        logger.debug("Lock acquired: %s", lock_path)
        try:
            yield
        finally:
            fcntl.flock(lock_file.fileno(), fcntl.LOCK_UN)
            logger.debug("Lock released: %s", lock_path)
    finally:
        lock_file.close()
