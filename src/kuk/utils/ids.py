"""Time-ordered card identifiers.

Identifiers use the ULID layout: 48 bits of millisecond timestamp followed by
80 random bits, encoded as 26 Crockford base32 characters. They sort byte-wise
in creation order. Within one process, calls landing in the same millisecond
increment the random tail so ordering holds there too; across processes the
random tail keeps collisions out of reach without any coordination.
"""

from __future__ import annotations

import os
import re
import threading
import time

CROCKFORD = "0123456789ABCDEFGHJKMNPQRSTVWXYZ"
ID_LENGTH = 26
ID_PATTERN = re.compile(r"[0-7][0-9A-HJKMNP-TV-Z]{25}")

_RANDOM_BITS = 80
_RANDOM_MAX = (1 << _RANDOM_BITS) - 1

_lock = threading.Lock()
_last_ms = -1
_last_random = 0


def _encode(value: int) -> str:
    chars = []
    for _ in range(ID_LENGTH):
        chars.append(CROCKFORD[value & 0x1F])
        value >>= 5
    return "".join(reversed(chars))


def new_id() -> str:
    """Return a new 26-character, time-sortable identifier."""
    global _last_ms, _last_random

    with _lock:
        now_ms = time.time_ns() // 1_000_000
        if now_ms > _last_ms:
            random_part = int.from_bytes(os.urandom(10), "big")
        elif _last_random < _RANDOM_MAX:
            # Same millisecond (or clock stepped back): keep ordering monotonic
            now_ms = _last_ms
            random_part = _last_random + 1
        else:
            now_ms = _last_ms + 1
            random_part = int.from_bytes(os.urandom(10), "big")
        _last_ms = now_ms
        _last_random = random_part

    return _encode((now_ms << _RANDOM_BITS) | random_part)


def is_canonical_id(token: str) -> bool:
    """Check whether a token has the exact canonical identifier format."""
    return bool(ID_PATTERN.fullmatch(token))
