"""
Password construction.

The password starts as a run of random base letters. Three passes then
overwrite randomly chosen positions, in this order:

- uppercase: the base letter at the position is case-folded.
- digit: the position gets a fresh draw from DIGIT_CHARSET.
- special: the position gets a fresh draw from SPECIAL_CHARSET.

A pass only ever touches a position that still holds an unmodified base
letter, so each class ends up with exactly the requested count.
"""

from __future__ import annotations

import logging
from typing import Callable

from .config import (
    DIGIT_CHARSET,
    LOWERCASE_CHARSET,
    SPECIAL_CHARSET,
    GeneratorConfig,
)
from .entropy import SecureRandomSource, default_source, zero
from .errors import InternalInvariantError

logger = logging.getLogger(__name__)

# Position draws allowed per substitution before giving up.
MAX_SEEK_ATTEMPTS = 100_000


class PasswordGenerator:
    def __init__(
        self,
        config: GeneratorConfig,
        source: SecureRandomSource | None = None,
    ) -> None:
        self.config = config
        self.source = source or default_source()

    def generate(self) -> bytearray:
        """
        Build one password and hand the buffer over to the caller.

        The caller owns the returned bytearray and should pass it to
        entropy.wipe() once it has been used. If any step fails, the partial
        buffer is zeroed (not refilled from the source) before the error
        propagates.
        """
        buf = self._generate_base()
        try:
            self._apply_uppercase(buf)
            self._apply_digits(buf)
            self._apply_special(buf)
        except Exception:
            zero(buf)
            raise
        return buf

    def _generate_base(self) -> bytearray:
        buf = bytearray(self.config.length)
        try:
            for i in range(self.config.length):
                buf[i] = self.source.random_char(LOWERCASE_CHARSET)
        except Exception:
            zero(buf)
            raise
        return buf

    def _seek_base_letter_and_apply(
        self,
        buf: bytearray,
        count: int,
        apply_fn: Callable[[int], int],
        label: str,
    ) -> None:
        for n in range(count):
            for attempt in range(1, MAX_SEEK_ATTEMPTS + 1):
                pos = self.source.randbelow(len(buf))
                if buf[pos] not in LOWERCASE_CHARSET:
                    continue
                buf[pos] = apply_fn(buf[pos])
                break
            else:
                raise InternalInvariantError(
                    "bug: anti-deadlock code reached: exceeded the maximum amount "
                    f"of attempts looking for a free character ({label} #{n})"
                )
            logger.debug("%s #%d placed after %d position draws", label, n, attempt)

    def _apply_uppercase(self, buf: bytearray) -> None:
        self._seek_base_letter_and_apply(
            buf,
            self.config.uppercase_count,
            lambda b: ord(chr(b).upper()),
            "uppercase",
        )

    def _apply_digits(self, buf: bytearray) -> None:
        self._seek_base_letter_and_apply(
            buf,
            self.config.digit_count,
            lambda _b: self.source.random_char(DIGIT_CHARSET),
            "digit",
        )

    def _apply_special(self, buf: bytearray) -> None:
        self._seek_base_letter_and_apply(
            buf,
            self.config.special_count,
            lambda _b: self.source.random_char(SPECIAL_CHARSET),
            "special",
        )


def generate(
    config: GeneratorConfig,
    source: SecureRandomSource | None = None,
) -> bytearray:
    """Generate one password buffer for `config`."""
    return PasswordGenerator(config, source).generate()
