"""
Entropy estimates for a generator configuration.

Two attacker models are covered:

- maximum: the attacker knows cpass was used but not which parameters.
- minimum: the attacker knows the exact length and class counts.

Both count possible outputs as Python ints (arbitrary precision) and report
the bit length of that count. Every charset is sized one larger than it
really is, as if a slot could also be empty, and the single all-empty
password is then subtracted from the total.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from .config import (
    DIGIT_CHARSET,
    LOWERCASE_CHARSET,
    SPECIAL_CHARSET,
    GeneratorConfig,
)
from .errors import ValidationError

logger = logging.getLogger(__name__)

# (inclusive upper bound in bits, label), checked in order.
RATING_BANDS: tuple[tuple[float, str], ...] = (
    (32, "Very Poor"),
    (48, "Poor"),
    (72, "Weak"),
    (96, "Good"),
    (120, "Excellent"),
)
TOP_RATING = "Overkill"


def entropy_max(config: GeneratorConfig) -> int:
    possible_chars = 1 + len(LOWERCASE_CHARSET)
    if config.uppercase_count:
        # Uppercase doubles the letter variety.
        possible_chars += len(LOWERCASE_CHARSET)
    if config.digit_count:
        possible_chars += len(DIGIT_CHARSET)
    if config.special_count:
        possible_chars += len(SPECIAL_CHARSET)

    combinations = possible_chars**config.length - 1
    return combinations.bit_length()


def entropy_min(config: GeneratorConfig) -> int:
    if config.non_base_count > config.length:
        raise ValidationError("non-base letter character count exceeds the total length")

    combinations = 1
    for charset, count in (
        (LOWERCASE_CHARSET, config.base_count),
        (LOWERCASE_CHARSET, config.uppercase_count),
        (DIGIT_CHARSET, config.digit_count),
        (SPECIAL_CHARSET, config.special_count),
    ):
        combinations *= (1 + len(charset)) ** count

    return (combinations - 1).bit_length()


@dataclass(frozen=True)
class EntropyReport:
    min_bits: int
    max_bits: int

    @property
    def realistic_bits(self) -> float:
        return (self.min_bits + self.max_bits) / 2

    @property
    def rating(self) -> str:
        return rating_for(self.realistic_bits)


def estimate(config: GeneratorConfig) -> EntropyReport:
    report = EntropyReport(min_bits=entropy_min(config), max_bits=entropy_max(config))
    logger.debug("Entropy estimate: min=%d max=%d", report.min_bits, report.max_bits)
    return report


def rating_for(entropy_bits: float) -> str:
    """Map a bit count onto a qualitative label."""
    for upper, label in RATING_BANDS:
        if entropy_bits <= upper:
            return label
    return TOP_RATING
