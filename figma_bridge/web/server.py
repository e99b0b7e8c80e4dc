"""FastAPI server for the Figma export bridge.

Provides:
- POST /export - Save a figment or real-time export
- GET /health - Service status and storage summary
- GET /debug/{token} - Resolve a token across storage tiers
- OPTIONS * - CORS preflight (empty 200)

Unknown paths get a 404 listing the endpoints above; known paths with the
wrong method get a 405 listing the allowed methods.
"""

import logging
from contextlib import asynccontextmanager
from typing import Optional, List

from fastapi import APIRouter, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse, Response
from starlette.exceptions import HTTPException as StarletteHTTPException

from figma_bridge import __version__
from figma_bridge.config import BridgeConfig
from figma_bridge.models.payload import ExportRequest
from figma_bridge.storage.repository import ExportRepository
from figma_bridge.bridge import ExportService, Resolver, HealthReporter, sweep_debug_records
from figma_bridge.utils.errors import StorageError

logger = logging.getLogger(__name__)

AVAILABLE_ENDPOINTS = [
    "POST /export",
    "GET /health",
    "GET /debug/{token}",
    "OPTIONS *",
]

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "GET, POST, OPTIONS",
    "Access-Control-Allow-Headers": "Content-Type",
}

router = APIRouter()


@router.post("/export")
async def export(body: ExportRequest, request: Request):
    """Save an export from the Figma plugin."""
    exporter: ExportService = request.app.state.exporter
    result = exporter.export(body)
    return result.to_response()


@router.get("/health")
async def health(request: Request):
    """Report liveness and the state of every storage tier."""
    reporter: HealthReporter = request.app.state.health
    return reporter.report()


@router.get("/debug/{token}")
async def debug_token(token: str, request: Request):
    """Resolve a token; 404 with diagnostics when no tier has it."""
    resolver: Resolver = request.app.state.resolver
    resolution = resolver.resolve(token)
    return JSONResponse(
        status_code=200 if resolution.found else 404,
        content=resolution.to_response(),
    )


def _allowed_methods(exc: StarletteHTTPException) -> List[str]:
    allow = (exc.headers or {}).get("Allow", "")
    methods = {m.strip() for m in allow.split(",") if m.strip()}
    methods.add("OPTIONS")
    return sorted(methods)


def _install_handlers(app: FastAPI) -> None:
    @app.middleware("http")
    async def cors(request: Request, call_next):
        if request.method == "OPTIONS":
            return Response(status_code=200, headers=CORS_HEADERS)
        response = await call_next(request)
        response.headers.update(CORS_HEADERS)
        return response

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
        """Malformed or wrongly shaped bodies are a 400, not a 422."""
        details = [
            {"loc": [str(p) for p in err.get("loc", ())], "msg": err.get("msg", ""), "type": err.get("type", "")}
            for err in exc.errors()
        ]
        logger.warning(f"Rejected {request.method} {request.url.path}: {len(details)} validation error(s)")
        return JSONResponse(
            status_code=400,
            content={
                "success": False,
                "error": 'Invalid export request. Send JSON with type "figment" or "real-time" and a figment object',
                "details": details,
            },
        )

    @app.exception_handler(StorageError)
    async def storage_error_handler(request: Request, exc: StorageError) -> JSONResponse:
        logger.error(f"Storage failure on {exc.tier or 'export dir'}: {exc}")
        return JSONResponse(
            status_code=500,
            content={"success": False, "error": f"Storage failure: {exc}"},
        )

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
        if exc.status_code == 404:
            content = {
                "success": False,
                "error": "Endpoint not found",
                "path": request.url.path,
                "availableEndpoints": AVAILABLE_ENDPOINTS,
            }
        elif exc.status_code == 405:
            content = {
                "success": False,
                "error": "Method not allowed",
                "method": request.method,
                "allowedMethods": _allowed_methods(exc),
            }
        else:
            content = {"success": False, "error": str(exc.detail)}
        return JSONResponse(status_code=exc.status_code, content=content, headers=exc.headers)

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.exception(f"Server error on {request.method} {request.url.path}")
        return JSONResponse(
            status_code=500,
            content={"success": False, "error": "Internal server error"},
            headers=CORS_HEADERS,
        )


def create_app(config: Optional[BridgeConfig] = None) -> FastAPI:
    """Build the bridge application around one export directory."""
    config = config or BridgeConfig.from_env()
    repository = ExportRepository(config.export_dir)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Application lifespan context."""
        logger.info(f"Starting Figma Bridge v{__version__} on http://{config.host}:{config.port}")
        logger.info(f"Export dir: {config.export_dir}")
        try:
            repository.ensure_directory()
        except StorageError as e:
            logger.warning(f"Export directory unavailable: {e}")
        sweep_debug_records(repository.debug_records)
        yield
        logger.info("Shutting down bridge server")

    app = FastAPI(
        title="Figma Bridge",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.config = config
    app.state.repository = repository
    app.state.exporter = ExportService(repository)
    app.state.resolver = Resolver(repository)
    app.state.health = HealthReporter(repository, port=config.port)

    _install_handlers(app)
    app.include_router(router)
    return app


def run_server(config: Optional[BridgeConfig] = None) -> None:
    """Run the bridge until interrupted (SIGINT/SIGTERM close the listener)."""
    config = config or BridgeConfig.from_env()

    import uvicorn

    uvicorn.run(
        create_app(config),
        host=config.host,
        port=config.port,
        log_level=config.log_level.lower(),
    )
