"""
Route table for the backend.

We expose:
- GET /                         (health check)
- one APIRouter per route group under /api/* (owned by the modules in routes/)

/api/auth is mounted twice: account auth first, then Google OAuth.
"""
from __future__ import annotations
from typing import List, Tuple

from fastapi import APIRouter, FastAPI

from routes import (
    admin, auth, chemical_equation, concept, concept_map, google, ml, quiz,
    remediation, search, user,
)
from schemas import ErrorResponse, HealthResponse

HEALTH_MESSAGE = "✅ Backend is live and running!"

ROUTE_MOUNTS: List[Tuple[str, APIRouter]] = [
    ("/api/ml", ml.router),
    ("/api/auth", auth.router),
    ("/api/quiz", quiz.router),
    ("/api/concept", concept.router),
    ("/api/concept-map", concept_map.router),
    ("/api/admin", admin.router),
    ("/api/auth", google.router),
    ("/api/user", user.router),
    ("/api/remediation", remediation.router),
    ("/api/search", search.router),
    ("/api/chemical-equations", chemical_equation.router),
]

# Produced by the admission filter and JSON body parser before any route runs
ERROR_RESPONSES = {
    400: {"model": ErrorResponse, "description": "Malformed JSON body"},
    403: {"model": ErrorResponse, "description": "Origin not allowed"},
    413: {"model": ErrorResponse, "description": "JSON body too large"},
}

health_router = APIRouter(tags=["health"])


@health_router.get("/", response_model=HealthResponse)
def health() -> HealthResponse:
    return HealthResponse(message=HEALTH_MESSAGE)


def mount_routes(app: FastAPI) -> None:
    app.include_router(health_router)
    for prefix, router in ROUTE_MOUNTS:
        app.include_router(router, prefix=prefix, responses=ERROR_RESPONSES)
