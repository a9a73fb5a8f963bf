"""
Service limits for the BigInt HTTP boundary.

The arithmetic core is unbounded: magnitudes grow as far as memory
allows.  A service answering untrusted requests is not, so the limits
here cap how large an operand (or a shift count) a request may carry
before any arithmetic runs.  They never apply to BigInt itself.
"""

from __future__ import annotations

from dataclasses import dataclass

from bigint import BigInt
from magnitude import CHUNK_BITS


class LimitExceededError(Exception):
    """Raised when a request operand exceeds the configured limits."""

    def __init__(self, what: str, size: int, limit: int) -> None:
        self.what = what
        self.size = size
        self.limit = limit
        super().__init__(f"{what} {size} exceeds limit {limit}")


@dataclass(frozen=True)
class ServiceLimits:
    """
    Upper bounds on request size.

    max_chunks   chunks an operand or a result may occupy
    max_shift    largest accepted left-shift count
    max_digits   characters in a decimal or hexadecimal literal
    """

    max_chunks: int = 64
    max_shift: int = 4096
    max_digits: int = 1024

    def __post_init__(self):
        for name in ("max_chunks", "max_shift", "max_digits"):
            if getattr(self, name) <= 0:
                raise ValueError(f"{name} must be positive, got {getattr(self, name)}")

    def check_literal(self, text: str) -> None:
        if len(text) > self.max_digits:
            raise LimitExceededError("literal length", len(text), self.max_digits)

    def check_chunks(self, count: int) -> None:
        if count > self.max_chunks:
            raise LimitExceededError("chunk count", count, self.max_chunks)

    def check_value(self, value: BigInt) -> None:
        self.check_chunks(len(value.magnitude))

    def check_shift(self, value: BigInt, n: int) -> None:
        """Reject shifts whose count or resulting size is over the limits."""
        if n > self.max_shift:
            raise LimitExceededError("shift count", n, self.max_shift)
        if not value.is_zero():
            self.check_chunks(-(-(value.bit_length() + n) // CHUNK_BITS))


# ---------------------------------------------------------------------------
# Presets
# ---------------------------------------------------------------------------

DEFAULT_LIMITS = ServiceLimits()
STRICT_LIMITS = ServiceLimits(max_chunks=4, max_shift=256, max_digits=80)
