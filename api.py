"""FastAPI endpoints exposing BigInt arithmetic.

Routes
------
POST   /bigint/evaluate    Apply one operation to one or two operands
POST   /bigint/convert     Render an operand as dec, hex and chunks
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, HTTPException

from bigint import BigInt, BigIntError
from limits import DEFAULT_LIMITS, LimitExceededError, ServiceLimits
from models import (
    EvaluateRequest,
    EvaluateResponse,
    Operand,
    Operation,
    ValueResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/bigint", tags=["bigint"])

# The limits are injected by the app factory (see app.py).
_limits: ServiceLimits = DEFAULT_LIMITS


def set_limits(limits: ServiceLimits) -> None:
    """Inject the service limits. Called once at app startup."""
    global _limits
    _limits = limits


def get_limits() -> ServiceLimits:
    return _limits


# ---------------------------------------------------------------------------
# Error helpers
# ---------------------------------------------------------------------------

def _fault(e: BigIntError) -> HTTPException:
    return HTTPException(status_code=400, detail=f"{type(e).__name__}: {e}")


def _malformed(e: ValueError) -> HTTPException:
    return HTTPException(status_code=422, detail=str(e))


def _too_large(e: LimitExceededError) -> HTTPException:
    return HTTPException(status_code=413, detail=str(e))


def _decode(operand: Operand, limits: ServiceLimits) -> BigInt:
    if operand.literal is not None:
        limits.check_literal(operand.literal)
    else:
        limits.check_chunks(len(operand.chunks))
    value = operand.to_bigint()
    limits.check_value(value)
    return value


def _apply(req: EvaluateRequest, limits: ServiceLimits) -> EvaluateResponse:
    a = _decode(req.a, limits)
    b = _decode(req.b, limits) if req.b is not None else None

    if req.op == Operation.COMPARE:
        return EvaluateResponse(op=req.op, comparison=a.compare(b))

    if req.op == Operation.ADD:
        result = a.add(b)
    elif req.op == Operation.SUB:
        result = a.subtract(b)
    elif req.op == Operation.MUL:
        limits.check_chunks(len(a.magnitude) + len(b.magnitude))
        result = a.multiply(b)
    elif req.op == Operation.DIV:
        result = a.divide(b)
    elif req.op == Operation.NEG:
        result = a.negate()
    elif req.op == Operation.HALVE:
        result = a.halve()
    else:  # Operation.SHL
        limits.check_shift(a, req.shift)
        result = a.shift_left(req.shift)

    limits.check_value(result)
    return EvaluateResponse(op=req.op, result=ValueResponse.from_bigint(result))


# ---------------------------------------------------------------------------
# Endpoints
# ---------------------------------------------------------------------------

@router.post("/evaluate", response_model=EvaluateResponse)
def evaluate(payload: EvaluateRequest) -> EvaluateResponse:
    """Evaluate a single BigInt operation."""
    limits = get_limits()
    try:
        return _apply(payload, limits)
    except LimitExceededError as e:
        logger.info("rejected %s: %s", payload.op.value, e)
        raise _too_large(e) from e
    except BigIntError as e:
        logger.info("fault in %s: %s", payload.op.value, e)
        raise _fault(e) from e
    except ValueError as e:
        raise _malformed(e) from e


@router.post("/convert", response_model=ValueResponse)
def convert(payload: Operand) -> ValueResponse:
    """Render one operand in every supported encoding."""
    limits = get_limits()
    try:
        return ValueResponse.from_bigint(_decode(payload, limits))
    except LimitExceededError as e:
        raise _too_large(e) from e
    except ValueError as e:
        raise _malformed(e) from e
