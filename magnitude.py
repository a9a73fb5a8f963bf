"""Magnitude arithmetic over little-endian 64-bit chunks.

A magnitude is an unsigned integer stored as a tuple of chunks, index 0
holding the least significant 64 bits.  Every function here is sign-free
and pure: inputs are never mutated, results are fresh normalized tuples.

Decision branches are annotated with their branch-IDs (see contract.py
``Branch``) so white-box tests can trace coverage back to the contract.

Normalization
-------------
Canonical zero is ``(0,)``.  Every other magnitude has a non-zero most
significant chunk.  ``normalize`` accepts any chunk sequence (including an
empty one) and returns the canonical form.
"""
from __future__ import annotations

from typing import Iterable, Sequence

CHUNK_BITS = 64
CHUNK_MASK = (1 << CHUNK_BITS) - 1

ZERO: tuple[int, ...] = (0,)

Magnitude = tuple[int, ...]


# ---------------------------------------------------------------------------
# Normalization
# ---------------------------------------------------------------------------

def normalize(chunks: Iterable[int]) -> Magnitude:
    """Strip most-significant zero chunks, keeping at least one chunk.

    Branches: NORM-EMPTY, NORM-STRIP
    """
    out = list(chunks)
    while len(out) > 1 and out[-1] == 0:                          # NORM-STRIP
        out.pop()
    if not out:                                                   # NORM-EMPTY
        return ZERO
    return tuple(out)


def is_zero_magnitude(mag: Sequence[int]) -> bool:
    """True for ``()``, ``(0,)`` and any all-zero chunk sequence."""
    return all(chunk == 0 for chunk in mag)


def chunk_at(mag: Sequence[int], index: int) -> int:
    """Chunk at ``index``, or 0 above the stored length."""
    if 0 <= index < len(mag):
        return mag[index]
    return 0


def bit_length(mag: Sequence[int]) -> int:
    """Number of significant bits in the magnitude (0 for zero)."""
    mag = normalize(mag)
    top = len(mag) - 1
    return top * CHUNK_BITS + mag[top].bit_length()


# ---------------------------------------------------------------------------
# Comparison
# ---------------------------------------------------------------------------

def compare_magnitudes(a: Sequence[int], b: Sequence[int]) -> int:
    """Return -1, 0 or 1 as ``a`` is less than, equal to or greater than ``b``.

    Chunk counts decide first; equal counts are compared from the most
    significant chunk down.

    Branches: CMP-LEN, CMP-CHUNK, CMP-EQUAL
    """
    a = normalize(a)
    b = normalize(b)
    if len(a) != len(b):                                          # CMP-LEN
        return -1 if len(a) < len(b) else 1
    for i in range(len(a) - 1, -1, -1):
        if a[i] != b[i]:                                          # CMP-CHUNK
            return -1 if a[i] < b[i] else 1
    return 0                                                      # CMP-EQUAL


# ---------------------------------------------------------------------------
# Addition / subtraction
# ---------------------------------------------------------------------------

def add_magnitudes(a: Sequence[int], b: Sequence[int]) -> Magnitude:
    """Grade-school addition with carry propagation.

    The loop runs while either operand has chunks left or a carry is
    pending, so a final carry always lands in a new top chunk.

    Branches: ADD-CARRY, ADD-EXTEND
    """
    result: list[int] = []
    carry = 0
    i = 0
    while i < max(len(a), len(b)) or carry:
        if i >= max(len(a), len(b)):                              # ADD-EXTEND
            result.append(carry)
            break
        total = chunk_at(a, i) + chunk_at(b, i) + carry
        result.append(total & CHUNK_MASK)
        carry = total >> CHUNK_BITS                               # ADD-CARRY
        i += 1
    return normalize(result)


def subtract_magnitudes(a: Sequence[int], b: Sequence[int]) -> Magnitude:
    """Chunk-wise ``a - b`` with borrow propagation.  Requires ``a >= b``.

    A pending borrow first decrements the current chunk of ``a``; a chunk
    that is already zero wraps to ``CHUNK_MASK`` and the borrow stays
    alive.  When the (possibly decremented) chunk is still below the
    chunk of ``b`` the difference wraps and a new borrow is raised.

    Branches: SUB-BORROW-DEC, SUB-BORROW-WRAP, SUB-UNDERFLOW, SUB-DIRECT
    """
    if compare_magnitudes(a, b) < 0:
        raise ValueError("subtract_magnitudes requires |a| >= |b|")

    result: list[int] = []
    borrow = False
    for i in range(len(a)):
        left = a[i]
        right = chunk_at(b, i)

        if borrow:
            if left == 0:                                         # SUB-BORROW-WRAP
                left = CHUNK_MASK
            else:                                                 # SUB-BORROW-DEC
                left -= 1
                borrow = False

        if left < right:                                          # SUB-UNDERFLOW
            diff = CHUNK_MASK - (right - left) + 1
            borrow = True
        else:                                                     # SUB-DIRECT
            diff = left - right
        result.append(diff)

    return normalize(result)


# ---------------------------------------------------------------------------
# Shifting
# ---------------------------------------------------------------------------

def shift_left_magnitude(mag: Sequence[int], n: int) -> Magnitude:
    """Shift the magnitude left by ``n >= 0`` bits.

    ``n`` splits into whole-chunk moves and an intra-chunk bit shift; the
    bits pushed out of each chunk are ORed into the chunk above.

    Branches: SHL-WHOLE-CHUNKS, SHL-SPILL
    """
    if n < 0:
        raise ValueError(f"negative shift count: {n}")
    shift_chunks, shift_bits = divmod(n, CHUNK_BITS)

    size = len(mag) + shift_chunks + (1 if shift_bits else 0)
    result = [0] * size
    for i, chunk in enumerate(mag):
        if shift_bits:                                            # SHL-SPILL
            result[i + shift_chunks + 1] |= chunk >> (CHUNK_BITS - shift_bits)
        result[i + shift_chunks] |= (chunk << shift_bits) & CHUNK_MASK
    # SHL-WHOLE-CHUNKS when shift_bits == 0: pure chunk relocation.
    return normalize(result)


def halve_magnitude(mag: Sequence[int]) -> Magnitude:
    """Shift right by one bit, most-significant chunk first.

    The bit shifted out of each chunk becomes the top bit of the chunk
    below it.
    """
    result = [0] * len(mag)
    carry = 0
    for i in range(len(mag) - 1, -1, -1):
        chunk = mag[i]
        result[i] = (chunk >> 1) | (carry << (CHUNK_BITS - 1))
        carry = chunk & 1
    return normalize(result)


def is_bit_set_magnitude(mag: Sequence[int], n: int) -> bool:
    if n < 0 or n >= len(mag) * CHUNK_BITS:
        return False
    index, offset = divmod(n, CHUNK_BITS)
    return (mag[index] >> offset) & 1 == 1


# ---------------------------------------------------------------------------
# Division
# ---------------------------------------------------------------------------

def divide_magnitudes(a: Sequence[int], b: Sequence[int]) -> tuple[Magnitude, Magnitude]:
    """Restoring binary long division.  Returns ``(quotient, remainder)``.

    Walks the dividend from its top bit down, shifting each bit into a
    running remainder and subtracting the divisor whenever it fits.

    Branches: LDIV-ZERO, LDIV-SMALLER, LDIV-LONG
    """
    if is_zero_magnitude(b):                                      # LDIV-ZERO
        raise ZeroDivisionError("magnitude division by zero")
    if compare_magnitudes(b, a) > 0:                              # LDIV-SMALLER
        return ZERO, normalize(a)

    quotient = [0] * len(a)                                       # LDIV-LONG
    remainder: Magnitude = ZERO
    for bit in range(bit_length(a) - 1, -1, -1):
        remainder = shift_left_magnitude(remainder, 1)
        if is_bit_set_magnitude(a, bit):
            remainder = (remainder[0] | 1,) + remainder[1:]
        if compare_magnitudes(remainder, b) >= 0:
            remainder = subtract_magnitudes(remainder, b)
            index, offset = divmod(bit, CHUNK_BITS)
            quotient[index] |= 1 << offset
    return normalize(quotient), remainder


def divmod_small(mag: Sequence[int], divisor: int) -> tuple[Magnitude, int]:
    """Divide by a single-chunk ``divisor``; returns ``(quotient, remainder)``.

    Each step folds the running remainder into the next lower chunk as
    ``remainder * 2**64 + chunk``.
    """
    if not 0 < divisor <= CHUNK_MASK:
        raise ValueError(f"divisor must fit in one non-zero chunk, got {divisor}")
    result = [0] * len(mag)
    remainder = 0
    for i in range(len(mag) - 1, -1, -1):
        combined = (remainder << CHUNK_BITS) | mag[i]
        result[i], remainder = divmod(combined, divisor)
    return normalize(result), remainder


def multiply_small_add(mag: Sequence[int], factor: int, addend: int = 0) -> Magnitude:
    """Return ``mag * factor + addend`` for single-chunk ``factor``/``addend``."""
    result: list[int] = []
    carry = addend
    for chunk in mag:
        total = chunk * factor + carry
        result.append(total & CHUNK_MASK)
        carry = total >> CHUNK_BITS
    while carry:
        result.append(carry & CHUNK_MASK)
        carry >>= CHUNK_BITS
    return normalize(result)
