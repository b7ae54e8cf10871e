"""
Secure randomness source.

Every random decision cpass makes goes through a SecureRandomSource:

- randbelow(n): unbiased integer in [0, n) by rejection sampling.
- random_byte(): one byte whitened through SHA-512. The hashed buffer has
  a random length in [0, WHITENING_BUFFER_LIMIT) and is filled from the OS
  CSPRNG, then a single digest byte is picked at a position derived from
  the digest itself.
- random_char(charset): a charset member chosen from a whitened byte.

The reader defaults to os.urandom. Tests may pass any callable that takes a
byte count and returns that many bytes.
"""

from __future__ import annotations

import hashlib
import logging
import os
from typing import Callable

from .errors import EntropySourceError

logger = logging.getLogger(__name__)

# Upper bound (exclusive) for the length of the buffer fed to SHA-512.
WHITENING_BUFFER_LIMIT = 1024

# Digest byte whose value selects which digest byte is returned.
_SELECTOR_INDEX = 5


class SecureRandomSource:
    """
    Thin wrapper over a CSPRNG reader.

    Read failures are turned into EntropySourceError and never retried.
    """

    def __init__(self, reader: Callable[[int], bytes] | None = None) -> None:
        self._reader = reader or os.urandom

    def read(self, size: int) -> bytes:
        """Return exactly `size` bytes from the secure reader."""
        try:
            data = self._reader(size)
        except Exception as exc:
            raise EntropySourceError(f"random-read of {size} bytes failed: {exc}") from exc

        if len(data) != size:
            raise EntropySourceError(
                f"random-read returned {len(data)} bytes, expected {size}"
            )
        return bytes(data)

    def randbelow(self, n: int) -> int:
        """
        Uniform integer in [0, n).

        Same rejection sampling as secrets.randbelow, but drawn from the
        injected reader so tests can control it.
        """
        if n <= 0:
            raise ValueError("upper bound must be positive")

        # Mask draws down to the bit width of n and reject values >= n.
        bits = n.bit_length()
        nbytes = (bits + 7) // 8
        excess = nbytes * 8 - bits
        while True:
            value = int.from_bytes(self.read(nbytes), "big") >> excess
            if value < n:
                return value

    def random_byte(self) -> int:
        buf_len = self.randbelow(WHITENING_BUFFER_LIMIT)
        digest = hashlib.sha512(self.read(buf_len)).digest()
        pos = digest[_SELECTOR_INDEX] % len(digest)
        return digest[pos]

    def random_char(self, charset: bytes) -> int:
        """Pick one member of `charset`, returned as its byte value."""
        if not charset:
            raise ValueError("charset must not be empty")
        return charset[self.random_byte() % len(charset)]


_DEFAULT_SOURCE: SecureRandomSource | None = None


def default_source() -> SecureRandomSource:
    """Process-wide source backed by os.urandom."""
    global _DEFAULT_SOURCE
    if _DEFAULT_SOURCE is None:
        _DEFAULT_SOURCE = SecureRandomSource()
    return _DEFAULT_SOURCE


def secure_random_char(charset: bytes, source: SecureRandomSource | None = None) -> int:
    return (source or default_source()).random_char(charset)


def zero(buf: bytearray) -> None:
    for i in range(len(buf)):
        buf[i] = 0


def wipe(buf: bytearray, source: SecureRandomSource | None = None) -> None:
    """
    Overwrite a secret buffer in place: zero it, then refill it with fresh
    random bytes. The length is preserved.
    """
    zero(buf)
    if buf:
        buf[:] = (source or default_source()).read(len(buf))
