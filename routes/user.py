"""
User profile routes, mounted under /api/user.
"""
from __future__ import annotations
from fastapi import APIRouter

router = APIRouter(tags=["user"])
