import logging
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI, Request
from starlette.middleware.sessions import SessionMiddleware

from yelpcamp.api.deps import get_current_user
from yelpcamp.api.routers import auth, campgrounds, comments, password, ui
from yelpcamp.core.config import get_settings
from yelpcamp.db.session import init_db
from yelpcamp.errors import FlashRedirect, ImageValidationError
from yelpcamp.flash import flash, redirect

logger = logging.getLogger(__name__)

OVERRIDABLE_METHODS = {"PUT", "PATCH", "DELETE"}


@asynccontextmanager
async def lifespan(app: FastAPI):
    init_db()
    logger.info("database ready")
    yield


def create_application() -> FastAPI:
    settings = get_settings()
    logging.basicConfig(
        level=settings.LOG_LEVEL,
        format="%(asctime)s - %(name)s - %(message)s",
    )

    # current user is loaded before every handler
    app = FastAPI(
        title=settings.PROJECT_NAME,
        lifespan=lifespan,
        dependencies=[Depends(get_current_user)],
    )

    # HTML forms only speak GET/POST: POST /x?_method=DELETE -> DELETE /x
    @app.middleware("http")
    async def _method_override(request: Request, call_next):
        if request.method == "POST":
            override = request.query_params.get("_method", "").upper()
            if override in OVERRIDABLE_METHODS:
                request.scope["method"] = override
        return await call_next(request)

    # sessions: added last so it wraps everything that reads request.session
    app.add_middleware(
        SessionMiddleware,
        secret_key=settings.SESSION_SECRET,
        session_cookie=settings.SESSION_COOKIE_NAME,
        max_age=settings.SESSION_MAX_AGE,
        same_site="lax",
    )

    @app.exception_handler(FlashRedirect)
    async def _flash_redirect(request: Request, exc: FlashRedirect):
        if exc.message:
            flash(request, exc.category, exc.message)
        return redirect(request, exc.url)

    @app.exception_handler(ImageValidationError)
    async def _bad_image(request: Request, exc: ImageValidationError):
        flash(request, "error", str(exc))
        return redirect(request, "back")

    app.include_router(ui.router)
    app.include_router(auth.router)
    app.include_router(password.router)
    app.include_router(campgrounds.router)
    app.include_router(comments.router)
    return app


app = create_application()
