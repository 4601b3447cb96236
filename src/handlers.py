"""Transport-agnostic request adapters.

Each coroutine takes plain decoded input, calls exactly one remote client and
returns an Envelope. Nothing raises past this layer: remote failures are
logged in full and replaced by a fixed, per-capability message.
"""
import base64
import logging
from typing import Any, Optional

from src.config import Config
from src.constants import (
    ALLOWED_IMAGE_MIME_TYPES,
    DEFAULT_AUDIO_FILENAME,
    DEFAULT_AUDIO_MIME,
    DEFAULT_IMAGE_MIME,
    MAX_GROUP_IMAGES,
    MSG_AUDIO_FILE_FAILED,
    MSG_IMAGE_FILE_FAILED,
    MSG_IMAGES_GROUP_FAILED,
    MSG_MISSING_CONCEPTS,
    MSG_MISSING_IMAGE_OR_CONCEPTS,
    MSG_NO_AUDIO_FILE,
    MSG_NO_FILE,
    MSG_NO_FILES,
    MSG_NO_VALID_IMAGES,
    MSG_PARSE_FAILED,
    MSG_REMOTE_REQUEST_FAILED,
    MSG_TRANSCRIPTION_FAILED,
    SERVER_STATUS_TEXT,
    VISION_PROVIDER_ANTHROPIC,
)
from src.envelope import Envelope, GroupSummary, fail, ok
from src.errors import ErrorKind, RemoteClientError
from src.media import UploadedFile
from src.transcription.client import TranscriptionClient
from src.transcription.whisper import WhisperTranscriptionClient
from src.vision.claude import ClaudeVisionClient
from src.vision.client import VisionClient
from src.vision.openai import OpenAIVisionClient

logger = logging.getLogger(__name__)


# ── pure helpers (module-level so tests can import them directly) ──────────────


def select_images(files: list[UploadedFile]) -> tuple[list[UploadedFile], int]:
    """Keep allow-listed images in upload order, up to the cap. Returns (accepted, skipped)."""
    allowed = list(filter(lambda f: f.mime_type in ALLOWED_IMAGE_MIME_TYPES, files))
    accepted = allowed[:MAX_GROUP_IMAGES]
    return accepted, len(files) - len(accepted)


def classify_failure(exc: Exception, remote_message: str, fallback: str) -> str:
    match exc:
        case RemoteClientError(kind=ErrorKind.REMOTE_API | ErrorKind.EMPTY_RESPONSE):
            return remote_message
        case RemoteClientError(kind=ErrorKind.PARSE):
            return MSG_PARSE_FAILED
        case _:
            return fallback


def _is_concept_list(concepts: Any) -> bool:
    return isinstance(concepts, list)


def _has_content(file: Optional[UploadedFile]) -> bool:
    return file is not None and file.content is not None


# ── handlers ──────────────────────────────────────────────────────────────────


class RequestHandlers:
    """One coroutine per capability, sharing the injected remote clients."""

    def __init__(self, vision: VisionClient, transcriber: TranscriptionClient) -> None:
        self._vision = vision
        self._transcriber = transcriber

    @classmethod
    def from_config(cls, config: Config) -> "RequestHandlers":
        match config.vision_provider:
            case provider if provider == VISION_PROVIDER_ANTHROPIC:
                vision: VisionClient = ClaudeVisionClient(
                    config.anthropic_api_key, config.claude_vision_model
                )
            case _:
                vision = OpenAIVisionClient(config.openai_api_key, config.openai_vision_model)
        transcriber = WhisperTranscriptionClient(config.openai_api_key, config.whisper_model)
        return cls(vision=vision, transcriber=transcriber)

    async def analyze_image(self, base64_image: Any, concepts: Any) -> Envelope:
        if not base64_image or not isinstance(base64_image, str) or not _is_concept_list(concepts):
            return fail(MSG_MISSING_IMAGE_OR_CONCEPTS)
        try:
            image_bytes = base64.b64decode(base64_image)
            scores = await self._vision.analyze_image(image_bytes, concepts, DEFAULT_IMAGE_MIME)
        except Exception as exc:
            logger.exception("Error analyzing image")
            return fail(classify_failure(exc, MSG_REMOTE_REQUEST_FAILED, MSG_REMOTE_REQUEST_FAILED))
        return ok(scores)

    async def analyze_image_file(
        self, file: Optional[UploadedFile], concepts: Any
    ) -> Envelope:
        if not _has_content(file):
            return fail(MSG_NO_FILE)
        if not _is_concept_list(concepts):
            return fail(MSG_MISSING_CONCEPTS)
        try:
            scores = await self._vision.analyze_image(
                file.content, concepts, file.mime_type or DEFAULT_IMAGE_MIME
            )
        except Exception as exc:
            logger.exception("Error analyzing image file")
            return fail(classify_failure(exc, MSG_REMOTE_REQUEST_FAILED, MSG_IMAGE_FILE_FAILED))
        return ok(scores)

    async def analyze_images_group(
        self, files: Optional[list[UploadedFile]], concepts: Any
    ) -> Envelope:
        if not _is_concept_list(concepts):
            return fail(MSG_MISSING_CONCEPTS)
        if not files:
            return fail(MSG_NO_FILES)

        images, skipped = select_images(files)
        if not images:
            return fail(MSG_NO_VALID_IMAGES)

        try:
            scores = await self._vision.analyze_images(images, concepts)
        except Exception as exc:
            logger.exception("Error analyzing images group")
            return fail(classify_failure(exc, MSG_REMOTE_REQUEST_FAILED, MSG_IMAGES_GROUP_FAILED))
        logger.info("Group analysis: %d processed, %d skipped", len(images), skipped)
        return ok(
            scores,
            summary=GroupSummary(total_images_processed=len(images), skipped_images=skipped),
        )

    async def transcribe_audio(self, file: Optional[UploadedFile]) -> Envelope:
        if not _has_content(file):
            return fail(MSG_NO_AUDIO_FILE)
        try:
            transcript = await self._transcriber.transcribe(
                file.content,
                file.filename or DEFAULT_AUDIO_FILENAME,
                file.mime_type or DEFAULT_AUDIO_MIME,
            )
        except Exception as exc:
            logger.exception("Error transcribing audio")
            return fail(classify_failure(exc, MSG_TRANSCRIPTION_FAILED, MSG_AUDIO_FILE_FAILED))
        return ok({"transcript": transcript})

    async def server_status(self) -> str:
        return SERVER_STATUS_TEXT
