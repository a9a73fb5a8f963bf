"""Request and response models for the BigInt HTTP boundary.

An operand arrives in exactly one of three encodings: a decimal
literal, a hexadecimal literal, or an explicit little-endian chunk list
with a sign flag.  This module defines the data models and their
conversion to and from ``BigInt`` only -- no arithmetic.
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, Field, field_validator, model_validator

from bigint import BigInt
from magnitude import CHUNK_MASK


# ---------------------------------------------------------------------------
# Operand: one integer in any accepted encoding
# ---------------------------------------------------------------------------

class Operand(BaseModel):
    """A signed integer as ``dec``, ``hex`` or ``chunks`` + ``negative``."""

    dec: str | None = Field(default=None, description="Decimal literal, e.g. '-42'")
    hex: str | None = Field(
        default=None, description="Hexadecimal literal, e.g. '0xff' or '-ff'"
    )
    chunks: list[int] | None = Field(
        default=None,
        description="Little-endian 64-bit chunks, least significant first",
    )
    negative: bool = False

    @field_validator("chunks")
    @classmethod
    def chunks_fit_in_64_bits(cls, v: list[int] | None) -> list[int] | None:
        if v is None:
            return v
        for chunk in v:
            if not 0 <= chunk <= CHUNK_MASK:
                raise ValueError(f"chunk {chunk} is outside [0, 2**64)")
        return v

    @model_validator(mode="after")
    def exactly_one_encoding(self) -> Operand:
        given = [
            name for name in ("dec", "hex", "chunks")
            if getattr(self, name) is not None
        ]
        if len(given) != 1:
            raise ValueError(
                f"Operand needs exactly one of dec, hex, chunks; got {given or 'none'}"
            )
        if self.negative and self.chunks is None:
            raise ValueError("negative applies to chunks only; sign literals instead")
        return self

    @property
    def literal(self) -> str | None:
        return self.dec if self.dec is not None else self.hex

    def to_bigint(self) -> BigInt:
        """Decode into a BigInt.  Malformed literals raise ``ValueError``."""
        if self.dec is not None:
            return BigInt.from_dec(self.dec)
        if self.hex is not None:
            return BigInt.from_hex(self.hex)
        return BigInt(self.chunks, self.negative)


# ---------------------------------------------------------------------------
# Operations
# ---------------------------------------------------------------------------

class Operation(str, Enum):
    ADD = "add"
    SUB = "sub"
    MUL = "mul"
    DIV = "div"
    NEG = "neg"
    SHL = "shl"
    HALVE = "halve"
    COMPARE = "compare"

    @property
    def is_binary(self) -> bool:
        return self in BINARY_OPERATIONS


BINARY_OPERATIONS = frozenset({
    Operation.ADD, Operation.SUB, Operation.MUL, Operation.DIV, Operation.COMPARE,
})


class EvaluateRequest(BaseModel):
    """Payload for ``POST /bigint/evaluate``."""

    op: Operation
    a: Operand
    b: Operand | None = None
    shift: int | None = Field(default=None, ge=0, description="Bit count for shl")

    @model_validator(mode="after")
    def operands_match_operation(self) -> EvaluateRequest:
        if self.op.is_binary and self.b is None:
            raise ValueError(f"Operation {self.op.value!r} requires operand b")
        if not self.op.is_binary and self.b is not None:
            raise ValueError(f"Operation {self.op.value!r} takes no operand b")
        if self.op == Operation.SHL and self.shift is None:
            raise ValueError("Operation 'shl' requires shift")
        if self.op != Operation.SHL and self.shift is not None:
            raise ValueError(f"Operation {self.op.value!r} takes no shift")
        return self


# ---------------------------------------------------------------------------
# Responses
# ---------------------------------------------------------------------------

class ValueResponse(BaseModel):
    """A BigInt rendered in every supported encoding."""

    dec: str
    hex: str
    chunks: list[int]
    negative: bool

    @classmethod
    def from_bigint(cls, value: BigInt) -> ValueResponse:
        return cls(
            dec=value.to_dec(),
            hex=value.to_hex(),
            chunks=list(value.magnitude),
            negative=value.negative,
        )


class EvaluateResponse(BaseModel):
    op: Operation
    result: ValueResponse | None = None
    comparison: int | None = Field(default=None, ge=-1, le=1)
