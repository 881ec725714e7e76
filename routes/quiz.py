"""
Quiz routes, mounted under /api/quiz.
"""
from __future__ import annotations
from fastapi import APIRouter

router = APIRouter(tags=["quiz"])
