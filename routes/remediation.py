"""
Remediation routes, mounted under /api/remediation.
"""
from __future__ import annotations
from fastapi import APIRouter

router = APIRouter(tags=["remediation"])
