"""Route modules, one APIRouter per path prefix (see routers.ROUTE_MOUNTS)."""
