"""Request-scoped dependencies. The store and settings live on ``app.state``."""

from fastapi import Depends, Request

from ..services.admin_service import AdminService
from ..services.feedback_service import FeedbackService
from ..services.swap_service import SwapService
from ..services.user_service import UserService
from .config import Settings
from .storage import DocumentStore


def get_store(request: Request) -> DocumentStore:
    return request.app.state.store


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_user_service(
    store: DocumentStore = Depends(get_store),
    settings: Settings = Depends(get_app_settings),
) -> UserService:
    return UserService(store, settings)


def get_swap_service(
    store: DocumentStore = Depends(get_store),
    settings: Settings = Depends(get_app_settings),
) -> SwapService:
    return SwapService(store, require_accepted_before_completion=settings.require_accepted_before_completion)


def get_feedback_service(store: DocumentStore = Depends(get_store)) -> FeedbackService:
    return FeedbackService(store)


def get_admin_service(
    store: DocumentStore = Depends(get_store),
    settings: Settings = Depends(get_app_settings),
) -> AdminService:
    return AdminService(store, settings)
