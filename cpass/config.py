"""
Configuration for the cpass password generator.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from .errors import ValidationError

logger = logging.getLogger(__name__)

# Hard upper bound on the password length.
MAX_LENGTH = 128

# Parameters are read as unsigned 32-bit integers.
UINT32_MAX = 2**32 - 1

# Base letters. `l` and `o` are left out because they are easy to misread.
LOWERCASE_CHARSET = b"abcdefghijkmnpqrstuvwxyz"
UPPERCASE_CHARSET = LOWERCASE_CHARSET.upper()
DIGIT_CHARSET = b"0123456789"
SPECIAL_CHARSET = b"~!@#$%^&*_+[]/?<>."


@dataclass(frozen=True)
class GeneratorConfig:
    # Total password length in characters.
    length: int

    # How many base letters get replaced by each character class.
    uppercase_count: int = 0
    digit_count: int = 0
    special_count: int = 0

    def __post_init__(self) -> None:
        for name in ("length", "uppercase_count", "digit_count", "special_count"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int):
                raise ValidationError(f"{name} must be an integer, got {value!r}")
            if value < 0 or value > UINT32_MAX:
                raise ValidationError(f"{name} ({value}) is outside the unsigned 32-bit range")

        if self.length > MAX_LENGTH:
            raise ValidationError(f"exceeded the maximum length of {MAX_LENGTH}")

        if self.non_base_count > self.length:
            raise ValidationError(
                f"uppercase count ({self.uppercase_count}) + digit count ({self.digit_count}) "
                f"+ special count ({self.special_count}) > length ({self.length})"
            )

    @classmethod
    def create(
        cls,
        length: int,
        uppercase_count: int = 0,
        digit_count: int = 0,
        special_count: int = 0,
    ) -> GeneratorConfig:
        cfg = cls(length, uppercase_count, digit_count, special_count)
        logger.debug(
            "Accepted config: length=%d uppercase=%d digits=%d special=%d",
            cfg.length,
            cfg.uppercase_count,
            cfg.digit_count,
            cfg.special_count,
        )
        return cfg

    @property
    def non_base_count(self) -> int:
        """Positions that end up holding something other than a base letter."""
        return self.uppercase_count + self.digit_count + self.special_count

    @property
    def base_count(self) -> int:
        return self.length - self.non_base_count


def construct(
    length: int,
    uppercase_count: int = 0,
    digit_count: int = 0,
    special_count: int = 0,
) -> GeneratorConfig:
    """
    Validate the four generator parameters and freeze them into a config.

    Raises ValidationError when the length exceeds MAX_LENGTH or when the
    class counts add up to more than the length.
    """
    return GeneratorConfig.create(length, uppercase_count, digit_count, special_count)
