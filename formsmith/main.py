import logging

import uvicorn
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from starlette.applications import Starlette
from starlette.middleware import Middleware
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.routing import Mount

from formsmith.config import get_settings
from formsmith.exceptions import BuilderError, FormValidationError, NetworkError, SessionNotFoundError, UploadError
from formsmith.mcp_server import mcp
from formsmith.models.common import ErrorResponse, StatusResponse
from formsmith.routers.drafts import router as drafts_router
from formsmith.routers.forms import router as forms_router
from formsmith.routers.respond import router as respond_router
from formsmith.services.sessions import get_draft_store, get_response_store


# --- Localhost-only middleware ---

class LocalhostOnlyMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        client_host = request.client.host if request.client else None
        if client_host not in ("127.0.0.1", "::1", "localhost"):
            return JSONResponse(
                status_code=403,
                content={"error_code": "forbidden", "message": "Localhost access only"},
            )
        return await call_next(request)


# --- FastAPI app ---

api = FastAPI(title="Formsmith", version="0.1.0")
api.include_router(drafts_router)
api.include_router(forms_router)
api.include_router(respond_router)


@api.get("/api/status")
def api_status() -> StatusResponse:
    return StatusResponse(
        storage_api=get_settings().api_url,
        open_drafts=len(get_draft_store()),
        open_response_sessions=len(get_response_store()),
    )


# --- Exception handlers ---

def _error_response(status_code: int, error_code: str, exc: Exception, missing: list[str] | None = None) -> JSONResponse:
    body = ErrorResponse(
        error_code=error_code,
        message=str(exc),
        missing=missing,
        notifications=getattr(exc, "notifications", []),
    )
    return JSONResponse(status_code=status_code, content=body.model_dump(exclude_none=True))


@api.exception_handler(FormValidationError)
async def validation_error_handler(request: Request, exc: FormValidationError):
    return _error_response(400, "validation_error", exc, missing=exc.missing)


@api.exception_handler(BuilderError)
async def builder_error_handler(request: Request, exc: BuilderError):
    return _error_response(422, "builder_error", exc)


@api.exception_handler(SessionNotFoundError)
async def session_not_found_handler(request: Request, exc: SessionNotFoundError):
    return _error_response(404, "not_found", exc)


@api.exception_handler(NetworkError)
async def network_error_handler(request: Request, exc: NetworkError):
    if exc.status_code == 404:
        return _error_response(404, "not_found", exc)
    error_code = "upload_error" if isinstance(exc, UploadError) else "storage_error"
    return _error_response(502, error_code, exc)


# --- Starlette root app ---

mcp_app = mcp.http_app(path="/", stateless_http=True)

app = Starlette(
    middleware=[Middleware(LocalhostOnlyMiddleware)],
    routes=[
        Mount("/mcp", app=mcp_app),
        Mount("/", app=api),
    ],
    lifespan=mcp_app.lifespan,
)


def run():
    settings = get_settings()
    logging.basicConfig(level=settings.log_level.upper(), format="%(name)s | %(message)s")
    uvicorn.run(
        "formsmith.main:app",
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    run()
