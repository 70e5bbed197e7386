"""Integration test fixtures."""

from typing import Any

import pytest


@pytest.fixture
def visitor_payload() -> dict[str, Any]:
    """Provide a valid visitor record as submitted by the capture form."""
    return {
        "fecha": "2025-09-09",
        "nombre": "Ana Ruiz",
        "localidad": "San Martín",
        "adultos": 2,
        "menores": 1,
        "jubi_pens": 0,
        "total": 3,
    }
