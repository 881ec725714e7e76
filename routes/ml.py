from __future__ import annotations
from fastapi import APIRouter

# Mounted under /api/ml
router = APIRouter(tags=["ml"])
