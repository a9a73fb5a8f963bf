"""Tests for the BigInt value type.

Covers construction and accessors, the signed decision branches
(see ``Branch`` ids in contract.py), the concrete scenarios the type
must reproduce, rendering, parsing and the Python protocol mapping.
"""
from __future__ import annotations

import copy
import pickle

import pytest

from bigint import BigInt, BigIntError, DivideByZeroError, InvalidOperationError
from magnitude import CHUNK_MASK


# ---------------------------------------------------------------------------
# Construction
# ---------------------------------------------------------------------------

class TestConstruction:

    def test_default_is_zero(self):
        z = BigInt()
        assert z.is_zero()
        assert z.magnitude == (0,)
        assert not z.negative

    def test_single_chunk(self):
        v = BigInt(5)
        assert v.magnitude == (5,)
        assert not v.is_negative()

    def test_single_chunk_negative(self):
        v = BigInt(5, negative=True)
        assert v.is_negative()
        assert int(v) == -5

    def test_chunk_list(self):
        v = BigInt([0, 1])
        assert v.magnitude == (0, 1)
        assert int(v) == 1 << 64

    def test_chunk_list_normalized(self):
        assert BigInt([3, 0, 0]).magnitude == (3,)

    @pytest.mark.parametrize("chunks", [[], [0], [0, 0, 0]])
    def test_zero_forms_are_canonical(self, chunks):
        v = BigInt(chunks)
        assert v.magnitude == (0,)
        assert v == BigInt()

    @pytest.mark.parametrize("chunks", [[], [0], 0])
    def test_negative_zero_is_not_negative(self, chunks):
        assert not BigInt(chunks, negative=True).negative

    def test_accepts_tuple_and_generator(self):
        assert BigInt((1, 2)).magnitude == (1, 2)
        assert BigInt(c for c in [1, 2]).magnitude == (1, 2)

    def test_chunk_list_is_copied(self):
        chunks = [1, 2]
        v = BigInt(chunks)
        chunks[0] = 99
        assert v.magnitude == (1, 2)

    @pytest.mark.parametrize("bad", [-1, 1 << 64])
    def test_value_out_of_range(self, bad):
        with pytest.raises(ValueError, match="outside"):
            BigInt(bad)

    @pytest.mark.parametrize("bad", [[1, -1], [1 << 64], [1.5]])
    def test_chunk_out_of_range(self, bad):
        with pytest.raises(ValueError):
            BigInt(bad)

    @pytest.mark.parametrize("bad", ["12", b"12", True])
    def test_rejects_non_chunk_types(self, bad):
        with pytest.raises(ValueError):
            BigInt(bad)

    def test_max_chunk(self, chunk_max):
        assert chunk_max.magnitude == (CHUNK_MASK,)


class TestFromInt:

    @pytest.mark.parametrize("value", [
        0, 1, -1, CHUNK_MASK, 1 << 64, -(1 << 64), (1 << 200) + 12345,
    ])
    def test_round_trip(self, value):
        assert int(BigInt.from_int(value)) == value

    def test_chunks(self):
        assert BigInt.from_int((7 << 64) | 3).magnitude == (3, 7)

    def test_zero_has_single_chunk(self):
        assert BigInt.from_int(0).magnitude == (0,)


# ---------------------------------------------------------------------------
# Accessors
# ---------------------------------------------------------------------------

class TestAccessors:

    def test_get_bits_in_range(self, two_chunk):
        assert two_chunk.get_bits(0) == 5
        assert two_chunk.get_bits(1) == 1

    def test_get_bits_out_of_range_is_zero(self, two_chunk):
        assert two_chunk.get_bits(2) == 0
        assert two_chunk.get_bits(10_000) == 0
        assert two_chunk.get_bits(-1) == 0

    def test_is_bit_set(self, two_chunk):
        assert two_chunk.is_bit_set(0)
        assert not two_chunk.is_bit_set(1)
        assert two_chunk.is_bit_set(2)
        assert two_chunk.is_bit_set(64)
        assert not two_chunk.is_bit_set(65)
        assert not two_chunk.is_bit_set(1000)

    def test_is_bit_set_ignores_sign(self):
        assert BigInt(4, negative=True).is_bit_set(2)

    def test_bit_length(self, two_chunk):
        assert BigInt().bit_length() == 0
        assert two_chunk.bit_length() == 65

    def test_magnitude_is_immutable(self, two_chunk):
        with pytest.raises(AttributeError):
            two_chunk.magnitude = (1,)
        with pytest.raises(TypeError):
            two_chunk.magnitude[0] = 9


# ---------------------------------------------------------------------------
# Concrete scenarios
# ---------------------------------------------------------------------------

class TestScenarios:

    def test_five_plus_three(self):
        result = BigInt(5) + BigInt(3)
        assert result == BigInt(8)
        assert result.to_dec() == "8"

    def test_five_minus_eight(self):
        result = BigInt(5) - BigInt(8)
        assert result == BigInt(3, negative=True)
        assert result.to_dec() == "-3"

    def test_max_plus_one_extends(self, chunk_max):
        result = chunk_max + BigInt(1)
        assert result.magnitude == (0, 1)
        assert result.to_hex() == "10000000000000000"

    def test_zero_shift(self):
        assert BigInt(0) << 5 == BigInt(0)

    def test_seven_times_zero(self):
        result = BigInt(7) * BigInt(0)
        assert result == BigInt(0)
        assert result.to_dec() == "0"

    def test_divide_by_zero(self):
        with pytest.raises(DivideByZeroError):
            BigInt(100) // BigInt(0)

    def test_twenty_div_seven(self):
        assert BigInt(20).divide(BigInt(7)) == BigInt(2)


# ---------------------------------------------------------------------------
# Signed addition / negation  (SIGN-*, NEG-*)
# ---------------------------------------------------------------------------

class TestSignedAddition:

    def test_sign_same_positive(self):
        """Branch: SIGN-SAME."""
        assert BigInt(2).add(BigInt(3)) == BigInt(5)

    def test_sign_same_negative(self):
        """Branch: SIGN-SAME — common sign kept."""
        assert BigInt(2, True).add(BigInt(3, True)) == BigInt(5, True)

    def test_sign_diff_lhs_larger(self):
        """Branch: SIGN-DIFF-LHS — result takes the left sign."""
        assert BigInt(9, True).add(BigInt(4)) == BigInt(5, True)

    def test_sign_diff_rhs_larger(self):
        """Branch: SIGN-DIFF-RHS — result takes the right sign."""
        assert BigInt(4).add(BigInt(9, True)) == BigInt(5, True)
        assert BigInt(4, True).add(BigInt(9)) == BigInt(5)

    def test_sign_diff_equal_magnitudes_is_unsigned_zero(self):
        result = BigInt(7, True).add(BigInt(7))
        assert result.is_zero()
        assert not result.negative

    def test_subtract_across_chunk_boundary(self):
        assert BigInt([0, 1]).subtract(BigInt(1)) == BigInt(CHUNK_MASK)

    def test_neg_zero(self):
        """Branch: NEG-ZERO."""
        assert not BigInt().negate().negative
        assert -BigInt() == BigInt()

    def test_neg_flip(self):
        """Branch: NEG-FLIP."""
        assert BigInt(3).negate() == BigInt(3, True)
        assert BigInt(3, True).negate() == BigInt(3)

    def test_negate_does_not_mutate(self):
        v = BigInt(3)
        v.negate()
        assert not v.negative

    def test_abs(self):
        assert abs(BigInt(3, True)) == BigInt(3)


# ---------------------------------------------------------------------------
# Shifting  (SHL-NEGATIVE-ERROR, SHL-NEGATIVE-COUNT)
# ---------------------------------------------------------------------------

class TestShift:

    def test_shift_left(self):
        assert BigInt(1) << 64 == BigInt([0, 1])
        assert BigInt(3).shift_left(1) == BigInt(6)

    def test_shl_negative_error(self):
        """Branch: SHL-NEGATIVE-ERROR."""
        with pytest.raises(InvalidOperationError):
            BigInt(1, negative=True) << 3

    def test_shl_negative_count(self):
        """Branch: SHL-NEGATIVE-COUNT."""
        with pytest.raises(InvalidOperationError):
            BigInt(1).shift_left(-1)

    def test_invalid_operation_is_value_error(self):
        with pytest.raises(ValueError):
            BigInt(1, negative=True).shift_left(1)

    def test_halve_keeps_sign(self):
        assert BigInt(9, True).halve() == BigInt(4, True)

    def test_halve_to_zero_drops_sign(self):
        result = BigInt(1, True).halve()
        assert result.is_zero()
        assert not result.negative
        assert result.magnitude == (0,)

    def test_halve_across_chunks(self):
        assert BigInt([0, 1]).halve() == BigInt(1 << 63)


# ---------------------------------------------------------------------------
# Multiplication / division  (MUL-BIT-SET, DIV-*)
# ---------------------------------------------------------------------------

class TestMultiplyDivide:

    def test_mul_bit_set(self):
        """Branch: MUL-BIT-SET."""
        assert BigInt(6).multiply(BigInt(7)) == BigInt(42)

    def test_mul_sign_xor(self):
        assert BigInt(6, True) * BigInt(7) == BigInt(42, True)
        assert BigInt(6, True) * BigInt(7, True) == BigInt(42)

    def test_mul_negative_by_zero_is_unsigned(self):
        result = BigInt(6, True) * BigInt()
        assert result.is_zero()
        assert not result.negative

    def test_mul_multi_chunk(self, chunk_max):
        # (2**64 - 1)**2 == 2**128 - 2**65 + 1
        assert int(chunk_max * chunk_max) == CHUNK_MASK * CHUNK_MASK

    def test_div_zero_error(self):
        """Branch: DIV-ZERO-ERROR."""
        with pytest.raises(DivideByZeroError):
            BigInt(5).divide(BigInt())

    def test_div_zero_error_from_empty_chunks(self):
        with pytest.raises(ZeroDivisionError):
            BigInt(5).divide(BigInt([]))

    def test_div_zero_error_is_bigint_error(self):
        with pytest.raises(BigIntError, match="divide 5 by zero"):
            BigInt(5).divide(BigInt())

    def test_div_smaller(self):
        """Branch: DIV-SMALLER — |b| > |a| gives zero."""
        assert BigInt(3, True).divide(BigInt(10)) == BigInt()
        assert not BigInt(3, True).divide(BigInt(10)).negative

    def test_div_long_truncates_toward_zero(self):
        """Branch: DIV-LONG."""
        assert BigInt(20, True).divide(BigInt(7)) == BigInt(2, True)
        assert BigInt(20).divide(BigInt(7, True)) == BigInt(2, True)
        assert BigInt(20, True).divide(BigInt(7, True)) == BigInt(2)

    def test_div_multi_chunk(self):
        a = BigInt.from_int((1 << 130) + 17)
        b = BigInt.from_int((1 << 65) + 3)
        assert int(a // b) == ((1 << 130) + 17) // ((1 << 65) + 3)

    def test_zero_dividend(self):
        assert BigInt().divide(BigInt(3, True)) == BigInt()


# ---------------------------------------------------------------------------
# Comparison  (CMP-SIGN, CMP-BOTH-NEGATIVE)
# ---------------------------------------------------------------------------

class TestCompare:

    def test_cmp_sign(self):
        """Branch: CMP-SIGN — negative < positive regardless of magnitude."""
        assert BigInt(100, True).compare(BigInt(1)) == -1
        assert BigInt(1).compare(BigInt(100, True)) == 1

    def test_cmp_both_negative(self):
        """Branch: CMP-BOTH-NEGATIVE — larger magnitude is smaller."""
        assert BigInt(100, True).compare(BigInt(1, True)) == -1
        assert BigInt(1, True).compare(BigInt(100, True)) == 1

    def test_equal(self):
        assert BigInt([1, 2]).compare(BigInt([1, 2])) == 0

    def test_zero_forms_compare_equal(self):
        assert BigInt([]).compare(BigInt([0])) == 0

    def test_rich_comparisons(self):
        assert BigInt(1) < BigInt(2)
        assert BigInt(2) <= BigInt(2)
        assert BigInt(3) > BigInt(2, True)
        assert BigInt(3, True) >= BigInt(4, True)
        assert BigInt(3) != BigInt(3, True)

    def test_sorting(self):
        values = [BigInt(3), BigInt(5, True), BigInt([0, 1]), BigInt()]
        assert [int(v) for v in sorted(values)] == [-5, 0, 3, 1 << 64]


# ---------------------------------------------------------------------------
# Rendering
# ---------------------------------------------------------------------------

class TestRendering:

    @pytest.mark.parametrize("chunks", [[], [0]])
    def test_zero_renders_as_zero(self, chunks):
        v = BigInt(chunks)
        assert v.to_hex() == "0"
        assert v.to_dec() == "0"

    def test_hex_pads_inner_chunks(self):
        assert BigInt([1, 1]).to_hex() == "10000000000000001"

    def test_hex_negative(self):
        assert BigInt(255, True).to_hex() == "-ff"

    def test_hex_max_chunk(self, chunk_max):
        assert chunk_max.to_hex() == "f" * 16

    def test_dec_multi_chunk(self):
        assert BigInt([0, 1]).to_dec() == "18446744073709551616"

    def test_dec_negative(self):
        assert BigInt([0, 0, 1], True).to_dec() == "-" + str(1 << 128)

    def test_dec_with_inner_zeros(self):
        assert BigInt(1000000007).to_dec() == "1000000007"

    def test_str_and_repr(self):
        assert str(BigInt(42, True)) == "-42"
        assert repr(BigInt(255, True)) == "BigInt(-0xff)"
        assert repr(BigInt()) == "BigInt(0x0)"


# ---------------------------------------------------------------------------
# Parsing
# ---------------------------------------------------------------------------

class TestParsing:

    @pytest.mark.parametrize("text, expected", [
        ("0", 0),
        ("-0", 0),
        ("+17", 17),
        ("18446744073709551616", 1 << 64),
        ("-340282366920938463463374607431768211456", -(1 << 128)),
        ("000123", 123),
    ])
    def test_from_dec(self, text, expected):
        assert int(BigInt.from_dec(text)) == expected

    @pytest.mark.parametrize("text, expected", [
        ("0", 0),
        ("ff", 255),
        ("0xFF", 255),
        ("-0x10000000000000000", -(1 << 64)),
        ("1" + "0" * 32, 1 << 128),
        ("00000000000000000000000001", 1),
    ])
    def test_from_hex(self, text, expected):
        assert int(BigInt.from_hex(text)) == expected

    def test_from_hex_is_canonical(self):
        assert BigInt.from_hex("0" * 40).magnitude == (0,)

    @pytest.mark.parametrize("text", ["", "-", "12a", " 12", "1_000", "0x10", "١٢"])
    def test_from_dec_rejects(self, text):
        with pytest.raises(ValueError):
            BigInt.from_dec(text)

    @pytest.mark.parametrize("text", ["", "0x", "-0x", "xyz", "0x1g", "1 0"])
    def test_from_hex_rejects(self, text):
        with pytest.raises(ValueError):
            BigInt.from_hex(text)

    def test_rejects_non_string(self):
        with pytest.raises(ValueError):
            BigInt.from_dec(12)


# ---------------------------------------------------------------------------
# Python protocols
# ---------------------------------------------------------------------------

class TestProtocols:

    def test_mixed_int_operands(self):
        assert BigInt(5) + 3 == 8
        assert 3 + BigInt(5) == BigInt(8)
        assert 10 - BigInt(4) == BigInt(6)
        assert BigInt(4) * -2 == BigInt(8, True)
        assert 20 // BigInt(7) == BigInt(2)
        assert -20 // BigInt(7) == BigInt(2, True)

    def test_equal_to_int_and_hash_agrees(self):
        v = BigInt([0, 1])
        assert v == 1 << 64
        assert hash(v) == hash(1 << 64)
        assert {v: "x"}[1 << 64] == "x"

    def test_unsupported_operand(self):
        with pytest.raises(TypeError):
            BigInt(1) + 1.5
        assert BigInt(1) != "1"

    def test_bool(self):
        assert not BigInt()
        assert BigInt(1, True)

    def test_copy_is_equal(self, two_chunk):
        assert copy.copy(two_chunk) == two_chunk
        assert copy.deepcopy(two_chunk) == two_chunk

    def test_pickle_round_trip(self):
        v = BigInt([1, 2], negative=True)
        assert pickle.loads(pickle.dumps(v)) == v


# ===================================================================
# BRANCH COVERAGE MATRIX
# ===================================================================
# Signed-level branch-IDs; magnitude-level ones live in test_magnitude.py.

BRANCH_COVERAGE = {
    "SIGN-SAME": [
        "TestSignedAddition::test_sign_same_positive",
        "TestSignedAddition::test_sign_same_negative",
    ],
    "SIGN-DIFF-LHS": [
        "TestSignedAddition::test_sign_diff_lhs_larger",
    ],
    "SIGN-DIFF-RHS": [
        "TestSignedAddition::test_sign_diff_rhs_larger",
    ],
    "NEG-ZERO": [
        "TestSignedAddition::test_neg_zero",
    ],
    "NEG-FLIP": [
        "TestSignedAddition::test_neg_flip",
    ],
    "SHL-NEGATIVE-ERROR": [
        "TestShift::test_shl_negative_error",
    ],
    "SHL-NEGATIVE-COUNT": [
        "TestShift::test_shl_negative_count",
    ],
    "MUL-BIT-SET": [
        "TestMultiplyDivide::test_mul_bit_set",
    ],
    "DIV-ZERO-ERROR": [
        "TestMultiplyDivide::test_div_zero_error",
    ],
    "DIV-SMALLER": [
        "TestMultiplyDivide::test_div_smaller",
    ],
    "DIV-LONG": [
        "TestMultiplyDivide::test_div_long_truncates_toward_zero",
    ],
    "CMP-SIGN": [
        "TestCompare::test_cmp_sign",
    ],
    "CMP-BOTH-NEGATIVE": [
        "TestCompare::test_cmp_both_negative",
    ],
}
