"""Shared fixtures for BigInt tests."""

from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from app import create_app
from bigint import BigInt
from limits import DEFAULT_LIMITS, STRICT_LIMITS
from magnitude import CHUNK_MASK


@pytest.fixture
def client() -> TestClient:
    return TestClient(create_app(limits=DEFAULT_LIMITS))


@pytest.fixture
def strict_client() -> TestClient:
    return TestClient(create_app(limits=STRICT_LIMITS))


@pytest.fixture
def chunk_max() -> BigInt:
    """The largest single-chunk value, 2**64 - 1."""
    return BigInt(CHUNK_MASK)


@pytest.fixture
def two_chunk() -> BigInt:
    """2**64 + 5: the smallest interesting two-chunk value plus a tail."""
    return BigInt([5, 1])
