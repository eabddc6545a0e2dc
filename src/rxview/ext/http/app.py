"""HTTP surface: JSON-RPC tool endpoint plus the drug content REST routes.

Endpoints:
    POST /mcp                              -> tool protocol adapter
    GET  /drugs                            -> search (query, labeler, page, limit)
    GET  /api/drugs/{identifier}           -> basic content (fast path)
    GET  /api/drugs/{identifier}/basic     -> basic content (fast path)
    GET  /api/drugs/{identifier}/enhanced  -> seoTitle, metaDescription, enhancedSummary, sections
    GET  /sitemap                          -> JSON sitemap
    GET  /health                           -> liveness and generation status

Identifiers have the form ``<brand>-<generic>`` and are split at the first
hyphen. AI failures never produce a 5xx; only record-store failures do.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from pydantic import ValidationError
from starlette.applications import Starlette
from starlette.middleware import Middleware
from starlette.middleware.cors import CORSMiddleware
from starlette.requests import Request
from starlette.responses import JSONResponse
from starlette.routing import Route

from rxview.content import DrugContentService, EnhancementOrchestrator, ModelGateway
from rxview.foundation.errors import Found, NotFound, RpcErrorCode, TransientFailure
from rxview.io.cache import ContentCache
from rxview.io.catalog import DrugCatalog
from rxview.models import SearchQuery
from rxview.runtime.observability import get_logger

from ..mcp import ToolProtocolAdapter, error_response

if TYPE_CHECKING:
    from rxview.foundation.config import RxviewSettings

log = get_logger("rxview.http")


def split_identifier(identifier: str) -> tuple[str, str] | None:
    """``tylenol-acetaminophen`` -> ``("tylenol", "acetaminophen")``; None without a hyphen."""
    brand, sep, generic = identifier.partition("-")
    return (brand, generic) if sep else None


def _not_found(message: str) -> JSONResponse:
    return JSONResponse({"statusCode": 404, "message": message}, status_code=404)


def _server_error(message: str) -> JSONResponse:
    return JSONResponse({"statusCode": 500, "message": message}, status_code=500)


def create_app(
    service: DrugContentService,
    adapter: ToolProtocolAdapter | None = None,
    *,
    ai_enabled: bool = False,
) -> Starlette:
    """Create the ASGI app without running it.

    Example:
        >>> app = create_app(service)
        >>> uvicorn.run(app, port=8000)
    """
    adapter = adapter or ToolProtocolAdapter(service)

    async def mcp(request: Request) -> JSONResponse:
        try:
            body = await request.json()
        except ValueError as e:
            log.warning("unparseable tool request body", error=str(e))
            return JSONResponse(error_response(None, RpcErrorCode.INTERNAL_ERROR, "Internal error", str(e)))
        return JSONResponse(await adapter.handle_request(body))

    async def search(request: Request) -> JSONResponse:
        try:
            query = SearchQuery.model_validate(dict(request.query_params))
        except ValidationError as e:
            return JSONResponse(
                {"statusCode": 400, "message": "Invalid search parameters", "errors": e.errors(include_url=False)},
                status_code=400,
            )
        try:
            page = await service.search(query)
        except Exception:
            log.exception("search failed")
            return _server_error("Failed to search drugs")
        return JSONResponse(page.to_payload())

    async def basic(request: Request) -> JSONResponse:
        identifier = request.path_params["identifier"]
        if (names := split_identifier(identifier)) is None:
            return _not_found(f"Invalid drug identifier format: {identifier}")
        match await service.basic_by_names(*names):
            case Found(content):
                return JSONResponse(content.to_payload())
            case NotFound():
                return _not_found(f"Drug not found: {names[0]}/{names[1]}")
            case TransientFailure():
                return _server_error("Failed to load drug information")

    async def enhanced(request: Request) -> JSONResponse:
        identifier = request.path_params["identifier"]
        if (names := split_identifier(identifier)) is None:
            return _not_found(f"Invalid drug identifier format: {identifier}")
        match await service.enhanced_by_names(*names):
            case Found(content):
                payload = content.to_payload()
                return JSONResponse({
                    key: payload[key] for key in ("seoTitle", "metaDescription", "enhancedSummary", "sections")
                })
            case NotFound():
                return _not_found(f"Drug not found: {names[0]}/{names[1]}")
            case TransientFailure():
                return _server_error("Failed to load enhanced drug information")

    async def sitemap(request: Request) -> JSONResponse:
        try:
            result = await service.sitemap()
        except Exception:
            log.exception("sitemap generation failed")
            return _server_error("Failed to generate sitemap")
        return JSONResponse(result.to_payload())

    async def health(request: Request) -> JSONResponse:
        return JSONResponse({"status": "ok", "aiEnabled": ai_enabled})

    routes = [
        Route("/mcp", mcp, methods=["POST"]),
        Route("/drugs", search, methods=["GET"]),
        Route("/api/drugs/{identifier}", basic, methods=["GET"]),
        Route("/api/drugs/{identifier}/basic", basic, methods=["GET"]),
        Route("/api/drugs/{identifier}/enhanced", enhanced, methods=["GET"]),
        Route("/sitemap", sitemap, methods=["GET"]),
        Route("/health", health, methods=["GET"]),
    ]
    middleware = [Middleware(CORSMiddleware, allow_origins=["*"], allow_methods=["*"], allow_headers=["*"])]
    return Starlette(routes=routes, middleware=middleware)


# ═══════════════════════════════════════════════════════════════════════════════
# Factory Functions
# ═══════════════════════════════════════════════════════════════════════════════


def build_service(settings: RxviewSettings, catalog: DrugCatalog | None = None) -> DrugContentService:
    """Wire catalog, cache, gateway and orchestrator from settings."""
    cache = ContentCache.from_settings(settings.cache)
    gateway = ModelGateway.from_settings(settings, cache)
    catalog = catalog if catalog is not None else DrugCatalog.from_json(settings.catalog.labels_path)
    return DrugContentService(catalog, EnhancementOrchestrator(gateway, cache))


def create_app_from_settings(settings: RxviewSettings) -> Starlette:
    return create_app(build_service(settings), ai_enabled=settings.openai.enabled)


def serve_http(settings: RxviewSettings) -> None:
    """Start the HTTP server (blocking)."""
    import uvicorn

    app = create_app_from_settings(settings)
    log.info("starting server", host=settings.server.host, port=settings.server.port,
             environment=settings.environment)
    uvicorn.run(app, host=settings.server.host, port=settings.server.port, log_level=settings.logging.level.lower())
