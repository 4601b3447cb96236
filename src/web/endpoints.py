"""Endpoint bodies shared by the standalone server and the serverless functions.

A binding only decides how an endpoint is mounted, how a wrong method is
answered and which message an unexpected failure gets.
"""
import logging
from dataclasses import dataclass
from typing import Awaitable, Callable

from starlette.requests import Request
from starlette.responses import JSONResponse, PlainTextResponse, Response

from src.constants import (
    MSG_ANALYZE_IMAGE_FAILED,
    MSG_AUDIO_FILE_FAILED,
    MSG_IMAGE_FILE_FAILED,
    MSG_IMAGES_UPLOAD_FAILED,
    MSG_INTERNAL_ERROR,
    MSG_METHOD_NOT_ALLOWED,
    ROUTE_ANALYZE_IMAGE,
    ROUTE_ANALYZE_IMAGE_FILE,
    ROUTE_ANALYZE_IMAGES_GROUP,
    ROUTE_SERVER_STATUS,
    ROUTE_TRANSCRIBE_AUDIO,
)
from src.envelope import Envelope, fail
from src.errors import ValidationError
from src.handlers import RequestHandlers
from src.web.decoding import (
    decode_analyze_image,
    decode_audio,
    decode_image_file,
    decode_images_group,
)

logger = logging.getLogger(__name__)

HTTP_OK = 200
HTTP_BAD_REQUEST = 400
HTTP_METHOD_NOT_ALLOWED = 405
HTTP_SERVER_ERROR = 500

EndpointBody = Callable[[RequestHandlers, Request], Awaitable[Response]]


def envelope_response(envelope: Envelope, failure_status: int = HTTP_BAD_REQUEST) -> JSONResponse:
    status = HTTP_OK if envelope.success else failure_status
    return JSONResponse(envelope.to_dict(), status_code=status)


def error_response(message: str, status_code: int) -> JSONResponse:
    return JSONResponse(fail(message).to_dict(), status_code=status_code)


def method_not_allowed() -> JSONResponse:
    return error_response(MSG_METHOD_NOT_ALLOWED, HTTP_METHOD_NOT_ALLOWED)


# ── endpoint bodies ───────────────────────────────────────────────────────────


async def analyze_image(handlers: RequestHandlers, request: Request) -> Response:
    base64_image, concepts = await decode_analyze_image(request)
    return envelope_response(await handlers.analyze_image(base64_image, concepts))


async def analyze_image_file(handlers: RequestHandlers, request: Request) -> Response:
    file, concepts = await decode_image_file(request)
    return envelope_response(await handlers.analyze_image_file(file, concepts))


async def analyze_images_group(handlers: RequestHandlers, request: Request) -> Response:
    files, concepts = await decode_images_group(request)
    return envelope_response(await handlers.analyze_images_group(files, concepts))


async def transcribe_audio(handlers: RequestHandlers, request: Request) -> Response:
    audio = await decode_audio(request)
    return envelope_response(
        await handlers.transcribe_audio(audio), failure_status=HTTP_SERVER_ERROR
    )


async def server_status(handlers: RequestHandlers, request: Request) -> Response:
    return PlainTextResponse(await handlers.server_status())


@dataclass(frozen=True)
class Endpoint:
    path: str
    method: str
    body: EndpointBody
    # message for unexpected failures on the standalone server
    failure_message: str


ANALYZE_IMAGE = Endpoint(ROUTE_ANALYZE_IMAGE, "POST", analyze_image, MSG_ANALYZE_IMAGE_FAILED)
ANALYZE_IMAGE_FILE = Endpoint(
    ROUTE_ANALYZE_IMAGE_FILE, "POST", analyze_image_file, MSG_IMAGE_FILE_FAILED
)
ANALYZE_IMAGES_GROUP = Endpoint(
    ROUTE_ANALYZE_IMAGES_GROUP, "POST", analyze_images_group, MSG_IMAGES_UPLOAD_FAILED
)
TRANSCRIBE_AUDIO = Endpoint(ROUTE_TRANSCRIBE_AUDIO, "POST", transcribe_audio, MSG_AUDIO_FILE_FAILED)
SERVER_STATUS = Endpoint(ROUTE_SERVER_STATUS, "GET", server_status, MSG_INTERNAL_ERROR)

ENDPOINTS = (
    ANALYZE_IMAGE,
    ANALYZE_IMAGE_FILE,
    ANALYZE_IMAGES_GROUP,
    TRANSCRIBE_AUDIO,
    SERVER_STATUS,
)


async def dispatch(
    endpoint: Endpoint,
    handlers: RequestHandlers,
    request: Request,
    failure_message: str,
) -> Response:
    """Run an endpoint body, mapping decode rejections to 4xx and anything else to 500."""
    try:
        return await endpoint.body(handlers, request)
    except ValidationError as exc:
        return error_response(exc.message, exc.status_code)
    except Exception:
        logger.exception("Unexpected error in %s", endpoint.path)
        return error_response(failure_message, HTTP_SERVER_ERROR)
