"""One-function-per-route binding for serverless hosts (files under api/).

Each function is a tiny Starlette app that answers its one method on any
path and rejects everything else with 405. Handlers are built from the
environment on first use and reused while the instance stays warm.
"""
import logging
from functools import lru_cache
from typing import Callable, Optional

from starlette.applications import Starlette
from starlette.requests import Request
from starlette.responses import Response
from starlette.routing import Route

from src.config import Config
from src.constants import MSG_INTERNAL_ERROR
from src.handlers import RequestHandlers
from src.logging_setup import setup_logging
from src.web.endpoints import (
    HTTP_SERVER_ERROR,
    Endpoint,
    dispatch,
    error_response,
    method_not_allowed,
)

logger = logging.getLogger(__name__)

ANY_METHOD = ["GET", "HEAD", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"]

HandlersFactory = Callable[[], RequestHandlers]


@lru_cache(maxsize=1)
def handlers_from_env() -> RequestHandlers:
    config = Config.from_env()
    setup_logging(config.log_level)
    return RequestHandlers.from_config(config)


def build_function(
    endpoint: Endpoint, handlers_factory: Optional[HandlersFactory] = None
) -> Starlette:
    factory = handlers_factory or handlers_from_env

    async def function(request: Request) -> Response:
        if request.method != endpoint.method:
            return method_not_allowed()
        try:
            handlers = factory()
        except Exception:
            logger.exception("Could not build handlers for %s", endpoint.path)
            return error_response(MSG_INTERNAL_ERROR, HTTP_SERVER_ERROR)
        return await dispatch(endpoint, handlers, request, MSG_INTERNAL_ERROR)

    return Starlette(routes=[Route("/{path:path}", function, methods=ANY_METHOD)])
