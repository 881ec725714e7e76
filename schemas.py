"""
Pydantic models shared by the entrypoint.
"""
from __future__ import annotations
from typing import Any, Optional
from pydantic import BaseModel


class HealthResponse(BaseModel):
    message: str


class ErrorBody(BaseModel):
    code: int
    message: Any
    path: str
    details: Optional[Any] = None


class ErrorResponse(BaseModel):
    error: ErrorBody
