from __future__ import annotations

import pytest

from cpass.entropy import SecureRandomSource


class PinnedSource(SecureRandomSource):
    """Source whose positions and lengths are always zero."""

    def randbelow(self, n: int) -> int:
        if n <= 0:
            raise ValueError("upper bound must be positive")
        return 0


def failing_reader(size: int) -> bytes:
    raise OSError("entropy pool unavailable")


@pytest.fixture
def pinned_source() -> PinnedSource:
    return PinnedSource()
