"""
Account (email/password) auth routes, mounted under /api/auth.
"""
from __future__ import annotations
from fastapi import APIRouter

router = APIRouter(tags=["auth"])
