"""Formal contract for the BigInt value type.

Each operation is described as a collection of:
- preconditions: what inputs must satisfy before the operation
- postconditions: what the output must satisfy, checked against Python's
  native ``int`` as the reference oracle
- error conditions: what inputs must cause specific exceptions
- algebraic properties: mathematical relationships that must hold

The contract is machine-readable.  Validation tools iterate over it to
drive conformance tests and search for counterexamples.

Layers
------
OperationContract   per-operation contract (pre/post/error/properties)
Branch              every decision point that white-box tests must cover
BigIntContract      the full contract plus its edge-value grid
build_contract()    constructs a BigIntContract
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable

from bigint import BigInt, DivideByZeroError, InvalidOperationError
from magnitude import CHUNK_BITS, CHUNK_MASK


# ---------------------------------------------------------------------------
# Contract building blocks
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Precondition:
    name: str
    description: str
    check: Callable[..., bool]


@dataclass(frozen=True)
class Postcondition:
    name: str
    description: str
    check: Callable[..., bool]


@dataclass(frozen=True)
class ErrorCondition:
    name: str
    description: str
    trigger: Callable[..., bool]
    exception: type


@dataclass(frozen=True)
class AlgebraicProperty:
    name: str
    description: str
    arity: int          # how many free BigInt values the check needs
    check: Callable[..., bool]


@dataclass(frozen=True)
class OperationContract:
    """Contract of one operation.

    ``invoke`` calls the implementation; ``operand_kind`` says whether the
    second input is a BigInt (``"binary"``), a bit count (``"shift"``) or
    absent (``"unary"``).
    """

    name: str
    operand_kind: str
    invoke: Callable[..., object]
    preconditions: list[Precondition]
    postconditions: list[Postcondition]
    error_conditions: list[ErrorCondition]
    properties: list[AlgebraicProperty]


@dataclass(frozen=True)
class Branch:
    """A decision point in the implementation that must be exercised."""

    id: str
    description: str
    condition: str      # human-readable boolean expression
    operation: str      # which operation / helper this belongs to


@dataclass(frozen=True)
class BigIntContract:
    """Complete contract for BigInt."""

    operations: dict[str, OperationContract]
    branches: list[Branch]
    values: tuple[BigInt, ...] = field(default_factory=tuple)
    shift_counts: tuple[int, ...] = field(default_factory=tuple)

    @property
    def all_properties(self) -> list[tuple[str, AlgebraicProperty]]:
        out: list[tuple[str, AlgebraicProperty]] = []
        for name, op in self.operations.items():
            for prop in op.properties:
                out.append((name, prop))
        return out

    @property
    def all_postconditions(self) -> list[tuple[str, Postcondition]]:
        out: list[tuple[str, Postcondition]] = []
        for name, op in self.operations.items():
            for post in op.postconditions:
                out.append((name, post))
        return out

    def second_inputs(self, op: OperationContract) -> tuple:
        if op.operand_kind == "binary":
            return self.values
        if op.operand_kind == "shift":
            return self.shift_counts
        return (None,)


# ---------------------------------------------------------------------------
# Helpers used inside the contract predicates
# ---------------------------------------------------------------------------

def truncdiv(a: int, b: int) -> int:
    """Integer division truncating toward zero (not floor division).

    Python's ``//`` rounds toward negative infinity; BigInt truncates
    toward zero like C, Java and Rust do.
    """
    q, r = divmod(a, b)
    if r != 0 and (a < 0) != (b < 0):
        q += 1
    return q


def is_canonical(value: BigInt) -> bool:
    """Magnitude normalized and zero never negative."""
    mag = value.magnitude
    if not mag:
        return False
    if len(mag) > 1 and mag[-1] == 0:
        return False
    if any(not 0 <= chunk <= CHUNK_MASK for chunk in mag):
        return False
    return not (value.is_zero() and value.negative)


def sign(value: int) -> int:
    return (value > 0) - (value < 0)


def edge_values() -> tuple[BigInt, ...]:
    """Values straddling chunk boundaries, plus their negations."""
    raw = [
        0, 1, 2, 3, 7, 10, 20,
        (1 << 32) - 1, 1 << 32,
        (1 << 63) - 1, 1 << 63,
        CHUNK_MASK, 1 << CHUNK_BITS, (1 << CHUNK_BITS) + 1,
        (1 << 96) + 12345,
        (1 << 128) - 1, 1 << 128,
        0x1234_5678_9ABC_DEF0_0FED_CBA9_8765_4321_0011_2233,
    ]
    signed = raw + [-v for v in raw if v]
    return tuple(BigInt.from_int(v) for v in signed)


SHIFT_COUNTS = (0, 1, 5, 31, 63, 64, 65, 127, 128, 130)


# ---------------------------------------------------------------------------
# Contract builder
# ---------------------------------------------------------------------------

def build_contract() -> BigIntContract:
    """Construct the full BigInt contract."""

    canonical = Postcondition(
        "canonical",
        "Result magnitude is normalized and zero is non-negative",
        lambda *args: is_canonical(args[-1]),
    )

    # ------------------------------------------------------------------ add
    add_contract = OperationContract(
        name="add",
        operand_kind="binary",
        invoke=lambda a, b: a.add(b),
        preconditions=[],
        postconditions=[
            canonical,
            Postcondition(
                "result_correct",
                "Result equals the exact sum",
                lambda a, b, result: int(result) == int(a) + int(b),
            ),
        ],
        error_conditions=[],
        properties=[
            AlgebraicProperty(
                "commutativity", "a + b == b + a", 2,
                lambda a, b: a.add(b) == b.add(a),
            ),
            AlgebraicProperty(
                "associativity", "(a + b) + c == a + (b + c)", 3,
                lambda a, b, c: a.add(b).add(c) == a.add(b.add(c)),
            ),
            AlgebraicProperty(
                "identity", "a + 0 == a", 1,
                lambda a: a.add(BigInt()) == a,
            ),
            AlgebraicProperty(
                "inverse", "a + (-a) == 0", 1,
                lambda a: a.add(a.negate()).is_zero(),
            ),
        ],
    )

    # ------------------------------------------------------------------ sub
    sub_contract = OperationContract(
        name="sub",
        operand_kind="binary",
        invoke=lambda a, b: a.subtract(b),
        preconditions=[],
        postconditions=[
            canonical,
            Postcondition(
                "result_correct",
                "Result equals the exact difference",
                lambda a, b, result: int(result) == int(a) - int(b),
            ),
        ],
        error_conditions=[],
        properties=[
            AlgebraicProperty(
                "self_inverse", "a - a == 0", 1,
                lambda a: a.subtract(a) == BigInt(),
            ),
            AlgebraicProperty(
                "add_sub_inverse", "(a + b) - b == a", 2,
                lambda a, b: a.add(b).subtract(b) == a,
            ),
            AlgebraicProperty(
                "anticommutativity", "a - b == -(b - a)", 2,
                lambda a, b: a.subtract(b) == b.subtract(a).negate(),
            ),
        ],
    )

    # ------------------------------------------------------------------ neg
    neg_contract = OperationContract(
        name="neg",
        operand_kind="unary",
        invoke=lambda a, _: a.negate(),
        preconditions=[],
        postconditions=[
            canonical,
            Postcondition(
                "result_correct",
                "Result equals the exact negation",
                lambda a, _, result: int(result) == -int(a),
            ),
        ],
        error_conditions=[],
        properties=[
            AlgebraicProperty(
                "involution", "-(-a) == a", 1,
                lambda a: a.negate().negate() == a,
            ),
            AlgebraicProperty(
                "zero_unsigned", "-0 == 0 and is non-negative", 1,
                lambda a: not BigInt().negate().negative,
            ),
        ],
    )

    # ------------------------------------------------------------------ mul
    mul_contract = OperationContract(
        name="mul",
        operand_kind="binary",
        invoke=lambda a, b: a.multiply(b),
        preconditions=[],
        postconditions=[
            canonical,
            Postcondition(
                "result_correct",
                "Result equals the exact product",
                lambda a, b, result: int(result) == int(a) * int(b),
            ),
        ],
        error_conditions=[],
        properties=[
            AlgebraicProperty(
                "commutativity", "a * b == b * a", 2,
                lambda a, b: a.multiply(b) == b.multiply(a),
            ),
            AlgebraicProperty(
                "identity", "a * 1 == a", 1,
                lambda a: a.multiply(BigInt(1)) == a,
            ),
            AlgebraicProperty(
                "zero", "a * 0 == 0", 1,
                lambda a: a.multiply(BigInt()).is_zero(),
            ),
            AlgebraicProperty(
                "distributivity", "a * (b + c) == a*b + a*c", 3,
                lambda a, b, c: (
                    a.multiply(b.add(c)) == a.multiply(b).add(a.multiply(c))
                ),
            ),
        ],
    )

    # ------------------------------------------------------------------ div
    div_contract = OperationContract(
        name="div",
        operand_kind="binary",
        invoke=lambda a, b: a.divide(b),
        preconditions=[
            Precondition(
                "nonzero_divisor",
                "Divisor is non-zero",
                lambda a, b: not b.is_zero(),
            ),
        ],
        postconditions=[
            canonical,
            Postcondition(
                "result_correct",
                "Result equals the quotient truncated toward zero",
                lambda a, b, result: int(result) == truncdiv(int(a), int(b)),
            ),
            Postcondition(
                "magnitude_bounded",
                "|(a / b) * b| <= |a|",
                lambda a, b, result: abs(int(result) * int(b)) <= abs(int(a)),
            ),
            Postcondition(
                "sign_rule",
                "sign(a / b) == sign(a) xor sign(b) when a / b != 0",
                lambda a, b, result: (
                    result.is_zero()
                    or result.negative == (a.negative != b.negative)
                ),
            ),
        ],
        error_conditions=[
            ErrorCondition(
                "div_by_zero_error",
                "DivideByZeroError when the divisor is zero",
                lambda a, b: b.is_zero(),
                DivideByZeroError,
            ),
        ],
        properties=[
            AlgebraicProperty(
                "identity", "a / 1 == a", 1,
                lambda a: a.divide(BigInt(1)) == a,
            ),
            AlgebraicProperty(
                "self", "a / a == 1 for a != 0", 1,
                lambda a: a.is_zero() or a.divide(a) == BigInt(1),
            ),
            AlgebraicProperty(
                "zero_numerator", "0 / b == 0 for b != 0", 1,
                lambda b: b.is_zero() or BigInt().divide(b).is_zero(),
            ),
            AlgebraicProperty(
                "mul_div_inverse", "(a * b) / b == a for b != 0", 2,
                lambda a, b: b.is_zero() or a.multiply(b).divide(b) == a,
            ),
        ],
    )

    # ------------------------------------------------------------------ shl
    shl_contract = OperationContract(
        name="shl",
        operand_kind="shift",
        invoke=lambda a, n: a.shift_left(n),
        preconditions=[
            Precondition(
                "non_negative_operand",
                "Shifted value is non-negative",
                lambda a, n: not a.negative,
            ),
        ],
        postconditions=[
            canonical,
            Postcondition(
                "result_correct",
                "Result equals a * 2**n",
                lambda a, n, result: int(result) == int(a) << n,
            ),
            Postcondition(
                "shift_law",
                "a << n == a * (1 << n)",
                lambda a, n, result: (
                    result == a.multiply(BigInt(1).shift_left(n))
                ),
            ),
        ],
        error_conditions=[
            ErrorCondition(
                "negative_shift_error",
                "InvalidOperationError when shifting a negative value",
                lambda a, n: a.negative,
                InvalidOperationError,
            ),
        ],
        properties=[
            AlgebraicProperty(
                "zero_fixed_point", "0 << n == 0", 1,
                lambda a: BigInt().shift_left(a.bit_length()).is_zero(),
            ),
        ],
    )

    # -------------------------------------------------------------- compare
    compare_contract = OperationContract(
        name="compare",
        operand_kind="binary",
        invoke=lambda a, b: a.compare(b),
        preconditions=[],
        postconditions=[
            Postcondition(
                "result_correct",
                "Result is the sign of a - b",
                lambda a, b, result: result == sign(int(a) - int(b)),
            ),
        ],
        error_conditions=[],
        properties=[
            AlgebraicProperty(
                "antisymmetry", "compare(a, b) == -compare(b, a)", 2,
                lambda a, b: a.compare(b) == -b.compare(a),
            ),
            AlgebraicProperty(
                "reflexivity", "a == a", 1,
                lambda a: a.compare(a) == 0,
            ),
        ],
    )

    # ---------------------------------------------------------------- halve
    halve_contract = OperationContract(
        name="halve",
        operand_kind="unary",
        invoke=lambda a, _: a.halve(),
        preconditions=[],
        postconditions=[
            canonical,
            Postcondition(
                "result_correct",
                "Magnitude halved toward zero, sign kept",
                lambda a, _, result: int(result) == truncdiv(int(a), 2),
            ),
        ],
        error_conditions=[],
        properties=[],
    )

    # ------------------------------------------------------------ rendering
    to_hex_contract = OperationContract(
        name="to_hex",
        operand_kind="unary",
        invoke=lambda a, _: a.to_hex(),
        preconditions=[],
        postconditions=[
            Postcondition(
                "result_correct",
                "Matches Python's hex rendering without the 0x prefix",
                lambda a, _, result: result == format(int(a), "x"),
            ),
        ],
        error_conditions=[],
        properties=[
            AlgebraicProperty(
                "round_trip", "from_hex(to_hex(a)) == a", 1,
                lambda a: BigInt.from_hex(a.to_hex()) == a,
            ),
        ],
    )

    to_dec_contract = OperationContract(
        name="to_dec",
        operand_kind="unary",
        invoke=lambda a, _: a.to_dec(),
        preconditions=[],
        postconditions=[
            Postcondition(
                "result_correct",
                "Matches Python's decimal rendering",
                lambda a, _, result: result == str(int(a)),
            ),
        ],
        error_conditions=[],
        properties=[
            AlgebraicProperty(
                "round_trip", "from_dec(to_dec(a)) == a", 1,
                lambda a: BigInt.from_dec(a.to_dec()) == a,
            ),
        ],
    )

    # -------------------------------------------------------------- branches
    branches = [
        # Normalization (magnitude.normalize)
        Branch("NORM-EMPTY", "Empty chunk list becomes (0,)",
               "len(chunks) == 0", "normalize"),
        Branch("NORM-STRIP", "Most-significant zero chunks removed",
               "len(chunks) > 1 and chunks[-1] == 0", "normalize"),
        # Magnitude comparison
        Branch("CMP-LEN", "Chunk counts differ",
               "len(a) != len(b)", "compare_magnitudes"),
        Branch("CMP-CHUNK", "First differing chunk from the top decides",
               "a[i] != b[i]", "compare_magnitudes"),
        Branch("CMP-EQUAL", "All chunks equal",
               "a == b", "compare_magnitudes"),
        # Magnitude addition
        Branch("ADD-CARRY", "Chunk sum overflows and carries",
               "a[i] + b[i] + carry > CHUNK_MASK", "add_magnitudes"),
        Branch("ADD-EXTEND", "Final carry adds a new top chunk",
               "carry after last chunk", "add_magnitudes"),
        # Magnitude subtraction
        Branch("SUB-BORROW-DEC", "Pending borrow decrements a non-zero chunk",
               "borrow and a[i] != 0", "subtract_magnitudes"),
        Branch("SUB-BORROW-WRAP", "Pending borrow through a zero chunk",
               "borrow and a[i] == 0", "subtract_magnitudes"),
        Branch("SUB-UNDERFLOW", "Chunk difference wraps and borrows",
               "left < b[i]", "subtract_magnitudes"),
        Branch("SUB-DIRECT", "Chunk difference without borrow",
               "left >= b[i]", "subtract_magnitudes"),
        # Shifting
        Branch("SHL-SPILL", "Bits spill into the next chunk",
               "n % 64 != 0", "shift_left_magnitude"),
        Branch("SHL-WHOLE-CHUNKS", "Shift by whole chunks only",
               "n % 64 == 0", "shift_left_magnitude"),
        Branch("SHL-NEGATIVE-ERROR", "InvalidOperationError on negative value",
               "a < 0", "shl"),
        Branch("SHL-NEGATIVE-COUNT", "InvalidOperationError on negative count",
               "n < 0", "shl"),
        # Signed addition / negation
        Branch("SIGN-SAME", "Same signs add magnitudes",
               "a.negative == b.negative", "add"),
        Branch("SIGN-DIFF-LHS", "Different signs, |a| >= |b|",
               "a.negative != b.negative and |a| >= |b|", "add"),
        Branch("SIGN-DIFF-RHS", "Different signs, |a| < |b|",
               "a.negative != b.negative and |a| < |b|", "add"),
        Branch("NEG-ZERO", "Negating zero keeps it non-negative",
               "a == 0", "neg"),
        Branch("NEG-FLIP", "Negating non-zero flips the sign",
               "a != 0", "neg"),
        # Multiplication
        Branch("MUL-BIT-SET", "Shifted multiplicand accumulated for set bit",
               "bit i of |b| is set", "mul"),
        # Division
        Branch("DIV-ZERO-ERROR", "DivideByZeroError on zero divisor",
               "b == 0", "div"),
        Branch("DIV-SMALLER", "Divisor larger than dividend gives zero",
               "|b| > |a|", "div"),
        Branch("DIV-LONG", "Long division over magnitudes",
               "|b| <= |a|", "div"),
        Branch("LDIV-ZERO", "Magnitude division by zero",
               "b == 0", "divide_magnitudes"),
        Branch("LDIV-SMALLER", "Divisor magnitude larger than dividend",
               "b > a", "divide_magnitudes"),
        Branch("LDIV-LONG", "Restoring long division",
               "b <= a", "divide_magnitudes"),
        # Signed comparison
        Branch("CMP-SIGN", "Different signs decide immediately",
               "a.negative != b.negative", "compare"),
        Branch("CMP-BOTH-NEGATIVE", "Both negative inverts magnitude order",
               "a.negative and b.negative", "compare"),
    ]

    return BigIntContract(
        operations={
            "add": add_contract,
            "sub": sub_contract,
            "neg": neg_contract,
            "mul": mul_contract,
            "div": div_contract,
            "shl": shl_contract,
            "compare": compare_contract,
            "halve": halve_contract,
            "to_hex": to_hex_contract,
            "to_dec": to_dec_contract,
        },
        branches=branches,
        values=edge_values(),
        shift_counts=SHIFT_COUNTS,
    )
