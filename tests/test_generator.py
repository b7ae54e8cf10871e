"""Tests for password construction."""

from __future__ import annotations

import hashlib
import random

import pytest

from cpass import (
    EntropySourceError,
    InternalInvariantError,
    PasswordGenerator,
    construct,
    generate,
)
from cpass import generator as generator_module
from cpass.config import (
    DIGIT_CHARSET,
    LOWERCASE_CHARSET,
    SPECIAL_CHARSET,
    UPPERCASE_CHARSET,
)
from cpass.entropy import SecureRandomSource

from .conftest import PinnedSource, failing_reader


def _class_counts(buf: bytes) -> dict[str, int]:
    counts = {"lower": 0, "upper": 0, "digit": 0, "special": 0}
    for b in buf:
        if b in LOWERCASE_CHARSET:
            counts["lower"] += 1
        elif b in UPPERCASE_CHARSET:
            counts["upper"] += 1
        elif b in DIGIT_CHARSET:
            counts["digit"] += 1
        elif b in SPECIAL_CHARSET:
            counts["special"] += 1
        else:
            raise AssertionError(f"byte {b!r} belongs to no charset")
    return counts


def _random_valid_params(rng: random.Random) -> tuple[int, int, int, int]:
    length = rng.randint(0, 128)
    upper = rng.randint(0, length)
    digit = rng.randint(0, length - upper)
    special = rng.randint(0, length - upper - digit)
    return length, upper, digit, special


_rng = random.Random(1337)
VALID_PARAMS = [
    (14, 2, 1, 1),
    (0, 0, 0, 0),
    (1, 0, 0, 0),
    (1, 1, 0, 0),
    (1, 0, 0, 1),
    (128, 0, 0, 0),
    (128, 128, 0, 0),
    (128, 0, 128, 0),
    (128, 0, 0, 128),
    (128, 43, 43, 42),
] + [_random_valid_params(_rng) for _ in range(20)]


def test_worked_example():
    buf = generate(construct(14, 2, 1, 1))
    assert isinstance(buf, bytearray)
    assert len(buf) == 14
    assert _class_counts(buf) == {"lower": 10, "upper": 2, "digit": 1, "special": 1}


@pytest.mark.parametrize("params", VALID_PARAMS)
def test_class_counts_match_config(params):
    length, upper, digit, special = params
    buf = generate(construct(*params))
    assert len(buf) == length
    assert _class_counts(buf) == {
        "lower": length - upper - digit - special,
        "upper": upper,
        "digit": digit,
        "special": special,
    }


def test_base_fill_draws_from_lowercase(pinned_source):
    buf = PasswordGenerator(construct(6), pinned_source).generate()
    digest = hashlib.sha512(b"").digest()
    expected = LOWERCASE_CHARSET[digest[digest[5] % 64] % len(LOWERCASE_CHARSET)]
    assert buf == bytearray([expected] * 6)


def test_uppercase_case_folds_the_base_letter(pinned_source):
    base = PasswordGenerator(construct(1), pinned_source).generate()
    upper = PasswordGenerator(construct(1, 1), pinned_source).generate()
    assert upper == base.upper()


def test_modified_positions_are_never_overwritten():
    # Positions cycle 0, 0, 1: the second substitution must skip position 0.
    positions = iter([0, 0, 1])

    class CyclingSource(SecureRandomSource):
        def randbelow(self, n):
            if n == 2:
                return next(positions)
            return super().randbelow(n)

    buf = PasswordGenerator(construct(2, 1, 1), CyclingSource()).generate()
    assert buf[0] in UPPERCASE_CHARSET
    assert buf[1] in DIGIT_CHARSET


def test_anti_deadlock_cap(monkeypatch, pinned_source):
    monkeypatch.setattr(generator_module, "MAX_SEEK_ATTEMPTS", 25)
    zeroed = []
    real_zero = generator_module.zero
    monkeypatch.setattr(
        generator_module,
        "zero",
        lambda buf: (zeroed.append(len(buf)), real_zero(buf)),
    )

    # Every draw lands on position 0, so the second letter is never found.
    with pytest.raises(InternalInvariantError, match="anti-deadlock"):
        PasswordGenerator(construct(2, 2), pinned_source).generate()
    assert zeroed == [2]


def test_valid_configs_never_hit_the_cap():
    for params in VALID_PARAMS:
        generate(construct(*params))


def test_entropy_source_failure_propagates():
    with pytest.raises(EntropySourceError):
        generate(construct(8, 1, 1, 1), SecureRandomSource(failing_reader))


def test_failure_during_base_fill_propagates():
    calls = {"n": 0}

    def flaky_reader(size):
        calls["n"] += 1
        if calls["n"] > 40:
            raise OSError("pool drained")
        return bytes(size)

    with pytest.raises(EntropySourceError):
        generate(construct(50, 10, 10, 10), SecureRandomSource(flaky_reader))


def test_passwords_differ():
    cfg = construct(20, 3, 3, 3)
    assert generate(cfg) != generate(cfg)


def test_cleanup_does_not_mask_the_original_error(monkeypatch):
    monkeypatch.setattr(generator_module, "MAX_SEEK_ATTEMPTS", 25)

    class DrainedSource(PinnedSource):
        """Zero-length reads succeed, anything larger fails."""

        def read(self, size):
            if size:
                raise EntropySourceError("pool drained")
            return b""

    buffers = []
    real_zero = generator_module.zero
    monkeypatch.setattr(
        generator_module,
        "zero",
        lambda buf: (buffers.append(buf), real_zero(buf)),
    )

    with pytest.raises(InternalInvariantError, match="anti-deadlock"):
        PasswordGenerator(construct(2, 2), DrainedSource()).generate()
    assert buffers == [bytearray(2)]
