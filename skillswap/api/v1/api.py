from fastapi import APIRouter
from .endpoints import users, swaps, feedbacks, admin

def build_router(prefix: str = "/api/v1") -> APIRouter:
    router = APIRouter(prefix=prefix)

    # Include all endpoint routers
    router.include_router(users.router, prefix="/users")
    router.include_router(swaps.router, prefix="/swaps")
    router.include_router(feedbacks.router, prefix="/feedbacks")
    router.include_router(admin.router, prefix="/admin")
    return router
