"""WhisperTranscriptionClient — OpenAI Whisper speech-to-text backend."""
from openai import APIStatusError, AsyncOpenAI

from src.constants import REMOTE_MAX_RETRIES, WHISPER_MODEL
from src.errors import RemoteAPIError
from src.transcription.client import TranscriptionClient

PROVIDER = "Whisper"


class WhisperTranscriptionClient(TranscriptionClient):

    def __init__(self, api_key: str | None, model: str = WHISPER_MODEL) -> None:
        self._api_key = api_key
        self._model = model

    async def transcribe(self, audio: bytes, filename: str, mime_type: str) -> str:
        client = AsyncOpenAI(api_key=self._api_key or "", max_retries=REMOTE_MAX_RETRIES)
        try:
            response = await client.audio.transcriptions.create(
                model=self._model,
                file=(filename, audio, mime_type),
            )
        except APIStatusError as exc:
            raise RemoteAPIError(PROVIDER, exc.status_code, exc.response.text) from exc
        # returned verbatim, untrimmed
        return response.text
