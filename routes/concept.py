"""
Concept routes, mounted under /api/concept.
"""
from __future__ import annotations
from fastapi import APIRouter

router = APIRouter(tags=["concept"])
