from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from contextlib import asynccontextmanager
from typing import Optional
import logging
from dotenv import load_dotenv
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError

from .api.v1.api import build_router
from .core.config import Settings, get_settings
from .core.exceptions import AuthenticationError, SkillSwapError
from .core.storage import DocumentStore
from .core.supabase import build_store

# Load environment variables
load_dotenv()

logger = logging.getLogger(__name__)

def setup_logging(debug: bool = False) -> None:
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

def register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(SkillSwapError)
    async def skillswap_exception_handler(request: Request, exc: SkillSwapError):
        headers = {"WWW-Authenticate": "Bearer"} if isinstance(exc, AuthenticationError) else None
        return JSONResponse(
            status_code=exc.status_code,
            content={"error": exc.detail},
            headers=headers,
        )

    # Malformed bodies, bad UUIDs and out-of-range values are client errors
    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        return JSONResponse(
            status_code=400,
            content={"error": "Invalid request", "detail": jsonable_encoder(exc.errors())},
        )

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception):
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        return JSONResponse(status_code=500, content={"error": str(exc)})

def create_app(store: Optional[DocumentStore] = None, settings: Optional[Settings] = None) -> FastAPI:
    """
    Build the API.

    Args:
        store: Store to serve from; built from settings when omitted
        settings: Application settings; read from the environment when omitted
    """
    settings = settings or get_settings()
    setup_logging(settings.debug)
    store = store or build_store(settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info("Starting up: %s store in %s environment", store.name, settings.environment)
        yield
        logger.info("Shutting down")

    app = FastAPI(
        title=settings.app_name,
        description="""
        API for the SkillSwap platform.

        Users list the skills they offer and want, request swaps with each other,
        and rate each other once a swap is completed. Admins moderate users.

        ## Authentication

        1. Register with `/api/v1/users/register` or log in with `/api/v1/users/login`.
        2. Click "Authorize" and paste the `access_token` from the response.
        """,
        version="1.0.0",
        debug=settings.debug,
        lifespan=lifespan,
        swagger_ui_parameters={
            "persistAuthorization": True,
            "displayRequestDuration": True,
            "docExpansion": "none",
        }
    )
    app.state.store = store
    app.state.settings = settings

    # Configure CORS
    origins = [
        "http://localhost:3000",
        "http://localhost:5173",
        "http://127.0.0.1:3000",
        "http://127.0.0.1:5173",
        settings.frontend_url,
    ]
    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Include API router
    app.include_router(build_router(settings.api_v1_prefix))

    @app.get("/")
    async def root():
        return {"message": f"Welcome to the {settings.app_name}", "environment": settings.environment}

    @app.get("/health")
    async def health_check():
        return {"status": "healthy", "environment": settings.environment, "storage": store.name}

    register_exception_handlers(app)
    return app

app = create_app()
