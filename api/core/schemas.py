"""
Response schemas shared across features.
"""

from __future__ import annotations

from pydantic import BaseModel


class OperationsResponse(BaseModel):
    msg: str


class HealthResponse(BaseModel):
    status: str = "HEALTHY"
