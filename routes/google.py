"""
Google OAuth routes.

Shares the /api/auth prefix with routes.auth. That router is mounted first, so
it wins if both ever declare the same path.
"""
from __future__ import annotations
from fastapi import APIRouter

router = APIRouter(tags=["auth"])
