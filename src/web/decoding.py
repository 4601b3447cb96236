"""Turn Starlette requests into the plain inputs RequestHandlers expect."""
import json
import logging
from typing import Any, Optional

from starlette.datastructures import FormData, UploadFile
from starlette.exceptions import HTTPException
from starlette.formparsers import MultiPartException
from starlette.requests import Request

from src.constants import (
    FIELD_BASE64_IMAGE,
    FIELD_CONCEPTS,
    FIELD_FILE,
    MAX_UPLOAD_BYTES,
    MSG_BODY_TOO_LARGE,
    MSG_INVALID_CONCEPTS,
    MSG_INVALID_MULTIPART,
    MSG_MISSING_CONCEPTS,
    MSG_NO_AUDIO_FILE,
    MSG_NOT_MULTIPART,
    MULTIPART_CONTENT_TYPE,
)
from src.errors import ValidationError
from src.media import UploadedFile

logger = logging.getLogger(__name__)

HTTP_PAYLOAD_TOO_LARGE = 413


async def read_body(request: Request) -> bytes:
    """Read the body, stopping as soon as it passes MAX_UPLOAD_BYTES."""
    declared = request.headers.get("content-length", "")
    if declared.isdigit() and int(declared) > MAX_UPLOAD_BYTES:
        raise ValidationError(MSG_BODY_TOO_LARGE, HTTP_PAYLOAD_TOO_LARGE)
    chunks: list[bytes] = []
    received = 0
    async for chunk in request.stream():
        received += len(chunk)
        if received > MAX_UPLOAD_BYTES:
            raise ValidationError(MSG_BODY_TOO_LARGE, HTTP_PAYLOAD_TOO_LARGE)
        chunks.append(chunk)
    body = b"".join(chunks)
    # body(), json() and form() replay the cached bytes instead of the consumed stream
    request._body = body
    return body


async def read_form(request: Request) -> FormData:
    content_type = request.headers.get("content-type", "")
    if MULTIPART_CONTENT_TYPE not in content_type:
        raise ValidationError(MSG_NOT_MULTIPART % content_type)
    await read_body(request)
    try:
        return await request.form()
    except (MultiPartException, HTTPException) as exc:
        logger.warning("Error parsing multipart data: %s", exc)
        raise ValidationError(MSG_INVALID_MULTIPART) from exc


def parse_concepts(form: FormData) -> list[str]:
    """Concepts arrive as a JSON-encoded array string. Checked before any file part."""
    raw = form.get(FIELD_CONCEPTS)
    match raw:
        case None:
            raise ValidationError(MSG_MISSING_CONCEPTS)
        case str() as text:
            try:
                concepts = json.loads(text)
            except json.JSONDecodeError as exc:
                raise ValidationError(MSG_INVALID_CONCEPTS) from exc
        case _:
            raise ValidationError(MSG_INVALID_CONCEPTS)
    if not isinstance(concepts, list) or not all(isinstance(c, str) for c in concepts):
        raise ValidationError(MSG_INVALID_CONCEPTS)
    return concepts


async def _to_uploaded(upload: UploadFile) -> UploadedFile:
    content = await upload.read()
    await upload.close()
    return UploadedFile(content=content, mime_type=upload.content_type, filename=upload.filename)


async def uploaded_files(form: FormData) -> list[UploadedFile]:
    """Every `file` part, in the order the client sent them. Plain text parts are ignored."""
    uploads = [part for part in form.getlist(FIELD_FILE) if isinstance(part, UploadFile)]
    return [await _to_uploaded(upload) for upload in uploads]


async def first_uploaded_file(form: FormData) -> Optional[UploadedFile]:
    files = await uploaded_files(form)
    return files[0] if files else None


# ── per-route decoders ────────────────────────────────────────────────────────


async def decode_analyze_image(request: Request) -> tuple[Any, Any]:
    body = await read_body(request)
    try:
        payload = json.loads(body) if body else {}
    except (json.JSONDecodeError, UnicodeDecodeError):
        payload = {}
    match payload:
        case dict():
            return payload.get(FIELD_BASE64_IMAGE), payload.get(FIELD_CONCEPTS)
        case _:
            return None, None


async def decode_image_file(request: Request) -> tuple[Optional[UploadedFile], list[str]]:
    form = await read_form(request)
    concepts = parse_concepts(form)
    return await first_uploaded_file(form), concepts


async def decode_images_group(request: Request) -> tuple[list[UploadedFile], list[str]]:
    form = await read_form(request)
    concepts = parse_concepts(form)
    return await uploaded_files(form), concepts


async def decode_audio(request: Request) -> UploadedFile:
    form = await read_form(request)
    match await first_uploaded_file(form):
        case None:
            raise ValidationError(MSG_NO_AUDIO_FILE)
        case audio:
            return audio
