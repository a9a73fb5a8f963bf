"""Application factory and entry point.

Run with:
    uvicorn app:app --reload
"""

from __future__ import annotations

from fastapi import FastAPI

from api import router, set_limits
from limits import DEFAULT_LIMITS, ServiceLimits


def create_app(limits: ServiceLimits | None = None) -> FastAPI:
    """Build and return the FastAPI application.

    Accepts optional limits for testing; uses the defaults if omitted.
    """
    if limits is None:
        limits = DEFAULT_LIMITS

    set_limits(limits)

    app = FastAPI(
        title="BigInt Arithmetic API",
        description=(
            "Exact arithmetic on arbitrary-precision signed integers stored as "
            "little-endian 64-bit chunks. Operands are accepted as decimal or "
            "hexadecimal literals or as explicit chunk lists; results are "
            "returned in all three encodings."
        ),
        version="0.1.0",
    )
    app.include_router(router)
    return app


# Default app instance for `uvicorn app:app`
app = create_app()
