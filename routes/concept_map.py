"""
Concept-map routes, mounted under /api/concept-map.
"""
from __future__ import annotations
from fastapi import APIRouter

router = APIRouter(tags=["concept-map"])
