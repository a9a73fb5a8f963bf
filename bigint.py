"""Arbitrary-precision signed integer built on 64-bit chunks.

``BigInt`` pairs a sign flag with a normalized magnitude (see
magnitude.py).  Every operation returns a fresh value; nothing mutates
an operand.  Decision branches carry their branch-IDs (see contract.py
``Branch``) so white-box tests can trace coverage back to the contract.

Operator mapping
----------------
``+`` add        ``-`` subtract / negate     ``*`` multiply
``//`` divide (truncates toward zero, like ``decimal.Decimal``)
``<<`` shift_left                            ``<`` ``==`` ... compare
"""
from __future__ import annotations

import string
from typing import Iterable, Union

from magnitude import (
    CHUNK_BITS,
    CHUNK_MASK,
    ZERO,
    Magnitude,
    add_magnitudes,
    bit_length,
    chunk_at,
    compare_magnitudes,
    divide_magnitudes,
    divmod_small,
    halve_magnitude,
    is_bit_set_magnitude,
    is_zero_magnitude,
    multiply_small_add,
    normalize,
    shift_left_magnitude,
    subtract_magnitudes,
)

HEX_DIGITS_PER_CHUNK = CHUNK_BITS // 4


# ---------------------------------------------------------------------------
# Faults
# ---------------------------------------------------------------------------

class BigIntError(Exception):
    """Base class for BigInt contract violations."""


class DivideByZeroError(BigIntError, ZeroDivisionError):
    """Raised when the divisor's magnitude is zero."""

    def __init__(self, dividend: "BigInt") -> None:
        self.dividend = dividend
        super().__init__(f"cannot divide {dividend.to_dec()} by zero")


class InvalidOperationError(BigIntError, ValueError):
    """Raised for a left shift of a negative value or by a negative count."""


# ---------------------------------------------------------------------------
# Value type
# ---------------------------------------------------------------------------

def _check_chunk(value: object) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError(f"chunk must be an int, got {type(value).__name__}")
    if not 0 <= value <= CHUNK_MASK:
        raise ValueError(f"chunk {value} is outside [0, 2**{CHUNK_BITS})")
    return value


class BigInt:
    """Signed arbitrary-precision integer.

    ``BigInt(5)`` builds a single-chunk value, ``BigInt([lo, hi], True)``
    injects an explicit little-endian chunk list.  ``BigInt()`` is zero.
    Zero is never negative, whatever sign is requested.
    """

    __slots__ = ("_magnitude", "_negative")

    def __init__(
        self,
        value: Union[int, Iterable[int]] = 0,
        negative: bool = False,
    ) -> None:
        if isinstance(value, int) and not isinstance(value, bool):
            chunks: Iterable[int] = (_check_chunk(value),)
        elif isinstance(value, (str, bytes, bool)):
            raise ValueError(
                f"expected a chunk or chunk sequence, got {type(value).__name__}"
            )
        else:
            chunks = [_check_chunk(c) for c in value]
        mag = normalize(chunks)
        self._magnitude: Magnitude = mag
        self._negative = bool(negative) and not is_zero_magnitude(mag)

    @classmethod
    def _from_parts(cls, mag: Magnitude, negative: bool) -> BigInt:
        """Wrap an already-normalized magnitude without re-validating it."""
        obj = cls.__new__(cls)
        obj._magnitude = mag
        obj._negative = negative and not is_zero_magnitude(mag)
        return obj

    # -- conversions ----------------------------------------------------------

    @classmethod
    def from_int(cls, value: int) -> BigInt:
        """Build from a native Python integer of any size."""
        negative = value < 0
        remaining = -value if negative else value
        chunks = []
        while remaining:
            chunks.append(remaining & CHUNK_MASK)
            remaining >>= CHUNK_BITS
        return cls._from_parts(normalize(chunks), negative)

    @classmethod
    def from_dec(cls, text: str) -> BigInt:
        """Parse an optionally signed decimal string."""
        negative, digits = _split_sign(text)
        if not digits or any(ch not in string.digits for ch in digits):
            raise ValueError(f"invalid decimal literal: {text!r}")
        mag: Magnitude = ZERO
        for ch in digits:
            mag = multiply_small_add(mag, 10, ord(ch) - ord("0"))
        return cls._from_parts(mag, negative)

    @classmethod
    def from_hex(cls, text: str) -> BigInt:
        """Parse an optionally signed hexadecimal string, ``0x`` prefix optional."""
        negative, digits = _split_sign(text)
        if digits[:2] in ("0x", "0X"):
            digits = digits[2:]
        if not digits or any(ch not in string.hexdigits for ch in digits):
            raise ValueError(f"invalid hexadecimal literal: {text!r}")
        chunks = []
        for end in range(len(digits), 0, -HEX_DIGITS_PER_CHUNK):
            start = max(0, end - HEX_DIGITS_PER_CHUNK)
            chunks.append(int(digits[start:end], 16))
        return cls._from_parts(normalize(chunks), negative)

    def __int__(self) -> int:
        value = 0
        for i, chunk in enumerate(self._magnitude):
            value |= chunk << (CHUNK_BITS * i)
        return -value if self._negative else value

    # -- accessors ------------------------------------------------------------

    @property
    def magnitude(self) -> Magnitude:
        """Little-endian chunk tuple; canonical zero is ``(0,)``."""
        return self._magnitude

    @property
    def negative(self) -> bool:
        return self._negative

    def is_negative(self) -> bool:
        return self._negative

    def is_zero(self) -> bool:
        return is_zero_magnitude(self._magnitude)

    def get_bits(self, index: int) -> int:
        """Chunk at ``index``; 0 for any index outside the stored chunks."""
        return chunk_at(self._magnitude, index)

    def is_bit_set(self, n: int) -> bool:
        """Whether magnitude bit ``n`` is set.  Sign is ignored."""
        return is_bit_set_magnitude(self._magnitude, n)

    def bit_length(self) -> int:
        return bit_length(self._magnitude)

    # -- addition / subtraction -----------------------------------------------

    def add(self, rhs: BigInt) -> BigInt:
        """Signed addition.

        Branches: SIGN-SAME, SIGN-DIFF-LHS, SIGN-DIFF-RHS
        """
        if self._negative != rhs._negative:
            if compare_magnitudes(self._magnitude, rhs._magnitude) >= 0:   # SIGN-DIFF-LHS
                mag = subtract_magnitudes(self._magnitude, rhs._magnitude)
                return BigInt._from_parts(mag, self._negative)
            mag = subtract_magnitudes(rhs._magnitude, self._magnitude)     # SIGN-DIFF-RHS
            return BigInt._from_parts(mag, rhs._negative)

        mag = add_magnitudes(self._magnitude, rhs._magnitude)               # SIGN-SAME
        return BigInt._from_parts(mag, self._negative)

    def subtract(self, rhs: BigInt) -> BigInt:
        """``self + (-rhs)``."""
        return self.add(rhs.negate())

    def negate(self) -> BigInt:
        """Flip the sign; zero stays non-negative.

        Branches: NEG-ZERO, NEG-FLIP
        """
        if self.is_zero():                                                  # NEG-ZERO
            return self
        return BigInt._from_parts(self._magnitude, not self._negative)     # NEG-FLIP

    def abs(self) -> BigInt:
        return BigInt._from_parts(self._magnitude, False)

    # -- shifting -------------------------------------------------------------

    def shift_left(self, n: int) -> BigInt:
        """Left shift of a non-negative value by ``n >= 0`` bits.

        Branches: SHL-NEGATIVE-ERROR, SHL-NEGATIVE-COUNT
        """
        if self._negative:                                                  # SHL-NEGATIVE-ERROR
            raise InvalidOperationError("cannot left shift a negative BigInt")
        if n < 0:                                                           # SHL-NEGATIVE-COUNT
            raise InvalidOperationError(f"negative shift count: {n}")
        return BigInt._from_parts(shift_left_magnitude(self._magnitude, n), False)

    def halve(self) -> BigInt:
        """Shift the magnitude right by one bit, keeping the sign."""
        return BigInt._from_parts(halve_magnitude(self._magnitude), self._negative)

    # -- multiplication / division --------------------------------------------

    def multiply(self, rhs: BigInt) -> BigInt:
        """Shift-and-add over every bit of ``|rhs|``.

        Branches: MUL-BIT-SET
        """
        lhs = self._magnitude
        product: Magnitude = ZERO
        for i in range(len(rhs._magnitude) * CHUNK_BITS):
            if rhs.is_bit_set(i):                                           # MUL-BIT-SET
                product = add_magnitudes(product, shift_left_magnitude(lhs, i))
        return BigInt._from_parts(product, self._negative != rhs._negative)

    def divide(self, rhs: BigInt) -> BigInt:
        """Quotient truncated toward zero; sign is the XOR of operand signs.

        Branches: DIV-ZERO-ERROR, DIV-SMALLER, DIV-LONG
        """
        if rhs.is_zero():                                                   # DIV-ZERO-ERROR
            raise DivideByZeroError(self)
        if compare_magnitudes(rhs._magnitude, self._magnitude) > 0:         # DIV-SMALLER
            return BigInt()
        quotient, _ = divide_magnitudes(self._magnitude, rhs._magnitude)   # DIV-LONG
        return BigInt._from_parts(quotient, self._negative != rhs._negative)

    # -- comparison -----------------------------------------------------------

    def compare(self, rhs: BigInt) -> int:
        """Return -1, 0 or 1.

        Branches: CMP-SIGN, CMP-BOTH-NEGATIVE
        """
        if self._negative != rhs._negative:                                 # CMP-SIGN
            return -1 if self._negative else 1
        result = compare_magnitudes(self._magnitude, rhs._magnitude)
        if self._negative:                                                  # CMP-BOTH-NEGATIVE
            return -result
        return result

    # -- rendering ------------------------------------------------------------

    def to_hex(self) -> str:
        """Lower-case hex, no leading zeros, ``"0"`` for zero."""
        if self.is_zero():
            return "0"
        text = "".join(
            f"{chunk:0{HEX_DIGITS_PER_CHUNK}x}" for chunk in reversed(self._magnitude)
        )
        text = text.lstrip("0") or "0"
        return "-" + text if self._negative else text

    def to_dec(self) -> str:
        """Decimal digits produced by repeated division of the magnitude by ten."""
        if self.is_zero():
            return "0"
        digits: list[str] = []
        current = self._magnitude
        while not is_zero_magnitude(current):
            current, remainder = divmod_small(current, 10)
            digits.append(chr(ord("0") + remainder))
        text = "".join(reversed(digits))
        return "-" + text if self._negative else text

    # -- Python protocols -----------------------------------------------------

    def __add__(self, other: object) -> BigInt:
        rhs = _coerce(other)
        if rhs is None:
            return NotImplemented
        return self.add(rhs)

    def __radd__(self, other: object) -> BigInt:
        lhs = _coerce(other)
        if lhs is None:
            return NotImplemented
        return lhs.add(self)

    def __sub__(self, other: object) -> BigInt:
        rhs = _coerce(other)
        if rhs is None:
            return NotImplemented
        return self.subtract(rhs)

    def __rsub__(self, other: object) -> BigInt:
        lhs = _coerce(other)
        if lhs is None:
            return NotImplemented
        return lhs.subtract(self)

    def __mul__(self, other: object) -> BigInt:
        rhs = _coerce(other)
        if rhs is None:
            return NotImplemented
        return self.multiply(rhs)

    def __rmul__(self, other: object) -> BigInt:
        lhs = _coerce(other)
        if lhs is None:
            return NotImplemented
        return lhs.multiply(self)

    def __floordiv__(self, other: object) -> BigInt:
        rhs = _coerce(other)
        if rhs is None:
            return NotImplemented
        return self.divide(rhs)

    def __rfloordiv__(self, other: object) -> BigInt:
        lhs = _coerce(other)
        if lhs is None:
            return NotImplemented
        return lhs.divide(self)

    def __lshift__(self, n: int) -> BigInt:
        if isinstance(n, bool) or not isinstance(n, int):
            return NotImplemented
        return self.shift_left(n)

    def __neg__(self) -> BigInt:
        return self.negate()

    def __pos__(self) -> BigInt:
        return self

    def __abs__(self) -> BigInt:
        return self.abs()

    def __bool__(self) -> bool:
        return not self.is_zero()

    def __eq__(self, other: object) -> bool:
        rhs = _coerce(other)
        if rhs is None:
            return NotImplemented
        return self.compare(rhs) == 0

    def __lt__(self, other: object) -> bool:
        rhs = _coerce(other)
        if rhs is None:
            return NotImplemented
        return self.compare(rhs) < 0

    def __le__(self, other: object) -> bool:
        rhs = _coerce(other)
        if rhs is None:
            return NotImplemented
        return self.compare(rhs) <= 0

    def __gt__(self, other: object) -> bool:
        rhs = _coerce(other)
        if rhs is None:
            return NotImplemented
        return self.compare(rhs) > 0

    def __ge__(self, other: object) -> bool:
        rhs = _coerce(other)
        if rhs is None:
            return NotImplemented
        return self.compare(rhs) >= 0

    def __hash__(self) -> int:
        # Must agree with hash(int) since equal ints compare equal.
        return hash(int(self))

    def __str__(self) -> str:
        return self.to_dec()

    def __repr__(self) -> str:
        sign = "-" if self._negative else ""
        return f"BigInt({sign}0x{self.to_hex().lstrip('-')})"

    def __copy__(self) -> BigInt:
        return self

    def __deepcopy__(self, memo: dict) -> BigInt:
        return self

    def __reduce__(self):
        return (BigInt, (list(self._magnitude), self._negative))


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _coerce(value: object) -> BigInt | None:
    if isinstance(value, BigInt):
        return value
    if isinstance(value, int) and not isinstance(value, bool):
        return BigInt.from_int(value)
    return None


def _split_sign(text: str) -> tuple[bool, str]:
    if not isinstance(text, str):
        raise ValueError(f"expected a string, got {type(text).__name__}")
    if text[:1] in ("-", "+"):
        return text[0] == "-", text[1:]
    return False, text
