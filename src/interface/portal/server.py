"""Student portal web server: login, signup and the profile dashboard.

Every page request goes through the route guard before its handler runs.
The app owns a single ``SessionManager``, created in ``create_app`` and
cleared when the app shuts down.

Usage:
    python -m src.interface.portal.server --port 8000

    Or: uvicorn --factory src.interface.portal.server:create_app
"""

import argparse
import logging
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Optional

from fastapi import FastAPI, HTTPException, Depends, Form, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import HTMLResponse, RedirectResponse
from pydantic import BaseModel

from src.auth import AuthError, AuthResult, SessionManager, User, UserStore
from src.auth.validation import validate_login_form, validate_signup_form
from src.config import Config, get_config
from src.interface.portal import pages
from src.routing import Route, RouteGuard, resolve_route
from src.storage import LocalStorage, MemoryStorage

logger = logging.getLogger(__name__)

API_PREFIX = "/api/"


# ============================================================================
# Request Models
# ============================================================================

class SignupRequest(BaseModel):
    """User signup request."""
    email: str
    password: str
    confirm_password: Optional[str] = None


class LoginRequest(BaseModel):
    """User login request."""
    email: str
    password: str


# ============================================================================
# Dependencies
# ============================================================================

def get_session_manager(request: Request) -> SessionManager:
    return request.app.state.session_manager


def get_route_guard(request: Request) -> RouteGuard:
    return request.app.state.route_guard


def get_current_user(session: SessionManager = Depends(get_session_manager)) -> User:
    """Return the logged-in user.

    Raises:
        HTTPException: If nobody is logged in
    """
    if not session.is_authenticated():
        raise HTTPException(status_code=401, detail="Not authenticated")
    return session.current_user


def _redirect(location: str, request: Request) -> RedirectResponse:
    # POST handlers redirect with 303 so the browser follows up with a GET
    status_code = 307 if request.method in ("GET", "HEAD") else 303
    return RedirectResponse(url=location, status_code=status_code)


def _error_detail(result: AuthResult, **extra) -> dict:
    return {"code": result.error.value, "message": result.message, **extra}


# ============================================================================
# App Factory
# ============================================================================

def create_app(config: Optional[Config] = None, storage=None) -> FastAPI:
    """Build the portal app with its own user store and session.

    Args:
        config: Portal configuration. Defaults to ``get_config()``
        storage: Key-value storage for the user list. Defaults to a
            ``LocalStorage`` at the configured path, or memory when the
            storage config is ephemeral

    Returns:
        Configured FastAPI app
    """
    config = config or get_config()

    if storage is None:
        if config.storage.ephemeral:
            storage = MemoryStorage()
        else:
            storage = LocalStorage(config.storage.storage_path)

    user_store = UserStore(storage, key=config.storage.users_key)
    user_store.initialize()

    session_manager = SessionManager(user_store, allowed_tlds=config.auth.allowed_tlds)
    route_guard = RouteGuard(prefill_on_not_found=config.auth.prefill_on_not_found)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        yield
        app.state.session_manager.logout()

    app = FastAPI(
        title="Student Portal",
        description="Mock student registration, login and profile dashboard",
        version="1.0.0",
        lifespan=lifespan,
    )
    app.state.config = config
    app.state.user_store = user_store
    app.state.session_manager = session_manager
    app.state.route_guard = route_guard

    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.server.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def guard_navigation(request: Request, call_next):
        """Run the route guard before any page handler."""
        path = request.url.path
        if path.startswith(API_PREFIX):
            return await call_next(request)

        session = request.app.state.session_manager
        decision = request.app.state.route_guard.decide(
            resolve_route(path), session.is_authenticated()
        )
        if not decision.allowed:
            return _redirect(decision.location(), request)
        return await call_next(request)

    _register_api_routes(app)
    _register_page_routes(app)
    return app


# ============================================================================
# Auth API
# ============================================================================

def _register_api_routes(app: FastAPI) -> None:

    @app.post("/api/auth/signup")
    async def api_signup(
        body: SignupRequest,
        session: SessionManager = Depends(get_session_manager),
    ):
        """Register a new user account and log it in."""
        if body.confirm_password is not None:
            checked = validate_signup_form(body.email, body.password, body.confirm_password)
        elif not body.email or not body.password:
            checked = AuthResult.fail(AuthError.MISSING_FIELDS)
        else:
            checked = AuthResult.ok()
        if not checked.success:
            raise HTTPException(status_code=400, detail=_error_detail(checked))

        result = session.signup(body.email, body.password)
        if not result.success:
            status_code = 409 if result.error is AuthError.EMAIL_ALREADY_EXISTS else 400
            raise HTTPException(status_code=status_code, detail=_error_detail(result))

        return {"authenticated": True, "user": result.user.to_public_dict()}

    @app.post("/api/auth/login")
    async def api_login(
        body: LoginRequest,
        session: SessionManager = Depends(get_session_manager),
        guard: RouteGuard = Depends(get_route_guard),
    ):
        """Authenticate an existing user."""
        result = session.login(body.email, body.password)

        if not result.success:
            redirect = guard.after_login_failure(result, body.email)
            if redirect is not None:
                raise HTTPException(
                    status_code=404,
                    detail=_error_detail(
                        result,
                        redirect=redirect.location(),
                        prefill_email=redirect.prefill_email,
                    ),
                )
            raise HTTPException(status_code=401, detail=_error_detail(result))

        return {"authenticated": True, "user": result.user.to_public_dict()}

    @app.post("/api/auth/logout")
    async def api_logout(session: SessionManager = Depends(get_session_manager)):
        """Clear the current session."""
        session.logout()
        return {"message": "Logged out"}

    @app.get("/api/auth/status")
    async def api_status(session: SessionManager = Depends(get_session_manager)):
        return {"authenticated": session.is_authenticated(), "state": session.state.value}

    @app.get("/api/auth/me")
    async def api_me(user: User = Depends(get_current_user)):
        """Get current user info."""
        return {"user": user.to_public_dict()}


# ============================================================================
# Pages
# ============================================================================

def _register_page_routes(app: FastAPI) -> None:

    @app.get("/login", response_class=HTMLResponse)
    async def login_page(message: Optional[str] = None):
        return HTMLResponse(pages.render_login(error=message))

    @app.post("/login", response_class=HTMLResponse)
    async def login_submit(
        request: Request,
        email: str = Form(""),
        password: str = Form(""),
        session: SessionManager = Depends(get_session_manager),
        guard: RouteGuard = Depends(get_route_guard),
    ):
        config = request.app.state.config
        checked = validate_login_form(email, password, config.auth.allowed_tlds)
        if not checked.success:
            return HTMLResponse(pages.render_login(error=checked.message, email=email))

        result = session.login(email, password)
        if not result.success:
            redirect = guard.after_login_failure(result, email)
            if redirect is not None:
                return _redirect(redirect.location(), request)
            return HTMLResponse(pages.render_login(error=result.message, email=email))

        return _redirect(Route.DASHBOARD.value, request)

    @app.get("/signup", response_class=HTMLResponse)
    async def signup_page(message: Optional[str] = None, email: str = ""):
        return HTMLResponse(pages.render_signup(error=message, email=email))

    @app.post("/signup", response_class=HTMLResponse)
    async def signup_submit(
        request: Request,
        email: str = Form(""),
        password: str = Form(""),
        confirm_password: str = Form(""),
        session: SessionManager = Depends(get_session_manager),
    ):
        checked = validate_signup_form(email, password, confirm_password)
        if not checked.success:
            return HTMLResponse(pages.render_signup(error=checked.message, email=email))

        result = session.signup(email, password)
        if not result.success:
            return HTMLResponse(pages.render_signup(error=result.message, email=email))

        return _redirect(Route.DASHBOARD.value, request)

    @app.get("/dashboard", response_class=HTMLResponse)
    async def dashboard_page(user: User = Depends(get_current_user)):
        return HTMLResponse(pages.render_dashboard(user))

    @app.post("/logout")
    async def logout_submit(
        request: Request,
        session: SessionManager = Depends(get_session_manager),
    ):
        session.logout()
        return _redirect(Route.LOGIN.value, request)

    # === Catch-all route (must be last) ===
    @app.get("/{full_path:path}", response_class=HTMLResponse)
    async def not_found_page(full_path: str):
        return HTMLResponse(pages.render_not_found(), status_code=404)


# ============================================================================
# Main
# ============================================================================

def main(argv=None):
    """Run the portal server."""
    import uvicorn

    parser = argparse.ArgumentParser(description="Run the student portal")
    parser.add_argument("--host", help="Interface to bind")
    parser.add_argument("--port", type=int, help="Port to listen on")
    parser.add_argument("--storage", help="JSON file holding the user list")
    parser.add_argument("--ephemeral", action="store_true", help="Keep users in memory only")
    args = parser.parse_args(argv)

    config = get_config()
    if args.host:
        config.server.host = args.host
    if args.port:
        config.server.port = args.port
    if args.storage:
        storage_path = Path(args.storage).expanduser()
        config.storage.data_dir = storage_path.parent
        config.storage.storage_file = storage_path.name
    if args.ephemeral:
        config.storage.ephemeral = True

    app = create_app(config)
    print(f"Starting Student Portal on http://{config.server.host}:{config.server.port}")
    print("Press Ctrl+C to stop")
    uvicorn.run(app, host=config.server.host, port=config.server.port, log_level="info")


if __name__ == "__main__":
    main()
