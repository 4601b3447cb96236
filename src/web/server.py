"""Standalone long-running server: a FastAPI app over the shared endpoints."""
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, Response
from starlette.exceptions import HTTPException as StarletteHTTPException

from src.handlers import RequestHandlers
from src.web.endpoints import (
    ENDPOINTS,
    HTTP_METHOD_NOT_ALLOWED,
    Endpoint,
    dispatch,
    error_response,
    method_not_allowed,
)


def _route(endpoint: Endpoint, handlers: RequestHandlers):
    async def route(request: Request) -> Response:
        return await dispatch(endpoint, handlers, request, endpoint.failure_message)

    route.__name__ = endpoint.body.__name__
    return route


def create_app(handlers: RequestHandlers) -> FastAPI:
    app = FastAPI(
        title="Concept Lens API",
        description="Concept scoring for images and speech-to-text over a multimodal AI API",
        version="1.0.0",
    )
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    for endpoint in ENDPOINTS:
        app.add_api_route(
            endpoint.path,
            _route(endpoint, handlers),
            methods=[endpoint.method],
        )

    @app.exception_handler(StarletteHTTPException)
    async def http_error(request: Request, exc: StarletteHTTPException) -> JSONResponse:
        match exc.status_code:
            case code if code == HTTP_METHOD_NOT_ALLOWED:
                return method_not_allowed()
            case code:
                return error_response(str(exc.detail), code)

    return app
