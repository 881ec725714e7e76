"""
Chemical-equation routes, mounted under /api/chemical-equations.
"""
from __future__ import annotations
from fastapi import APIRouter

router = APIRouter(tags=["chemical-equations"])
