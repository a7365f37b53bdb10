"""
Block id generation.

SiYuan block ids are a creation timestamp followed by seven lowercase
alphanumeric characters, e.g. ``20240722081500-a1b2c3d``.
"""

import secrets
import string
from datetime import datetime
from typing import Callable, Optional

IdGenerator = Callable[[], str]

_ID_ALPHABET = string.ascii_lowercase + string.digits
_ID_SUFFIX_LENGTH = 7


def new_block_id(now: Optional[datetime] = None) -> str:
    """Mint a fresh destination-wide unique block id."""
    now = now or datetime.now()
    suffix = ''.join(secrets.choice(_ID_ALPHABET) for _ in range(_ID_SUFFIX_LENGTH))
    return f"{now.strftime('%Y%m%d%H%M%S')}-{suffix}"


class SequentialIdGenerator:
    """Deterministic id generator for reproducible runs.

    Produces ids in the block id shape from a fixed timestamp and a counter.
    """

    def __init__(self, stamp: str = "20000101000000", start: int = 1):
        self.stamp = stamp
        self.counter = start

    def __call__(self) -> str:
        value = f"{self.stamp}-{self.counter:07d}"
        self.counter += 1
        return value
