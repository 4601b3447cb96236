"""OpenAIVisionClient — OpenAI chat-completions vision backend."""
import base64
import logging
from typing import Any

from openai import APIStatusError, AsyncOpenAI

from src.constants import (
    DEFAULT_IMAGE_MIME,
    GROUP_IMAGE_MAX_TOKENS,
    OPENAI_VISION_MODEL,
    REMOTE_MAX_RETRIES,
    SINGLE_IMAGE_MAX_TOKENS,
)
from src.errors import EmptyResponseError, RemoteAPIError
from src.media import UploadedFile
from src.vision.client import (
    VisionClient,
    image_group_prompt,
    parse_concept_scores,
    single_image_prompt,
)

logger = logging.getLogger(__name__)

PROVIDER = "OpenAI"


def _image_block(image_bytes: bytes, mime_type: str) -> dict:
    image_data = base64.standard_b64encode(image_bytes).decode()
    return {
        "type": "image_url",
        "image_url": {"url": f"data:{mime_type};base64,{image_data}"},
    }


class OpenAIVisionClient(VisionClient):

    def __init__(self, api_key: str | None, model: str = OPENAI_VISION_MODEL) -> None:
        self._api_key = api_key
        self._model = model

    async def analyze_image(
        self,
        image_bytes: bytes,
        concepts: list[str],
        mime_type: str = DEFAULT_IMAGE_MIME,
    ) -> Any:
        content = [
            {"type": "text", "text": single_image_prompt(concepts)},
            _image_block(image_bytes, mime_type),
        ]
        answer = await self._complete(content, SINGLE_IMAGE_MAX_TOKENS)
        return parse_concept_scores(answer)

    async def analyze_images(self, images: list[UploadedFile], concepts: list[str]) -> Any:
        content = [{"type": "text", "text": image_group_prompt(concepts)}]
        content += [
            _image_block(img.content, img.mime_type or DEFAULT_IMAGE_MIME) for img in images
        ]
        answer = await self._complete(content, GROUP_IMAGE_MAX_TOKENS)
        return parse_concept_scores(answer)

    async def _complete(self, content: list[dict], max_tokens: int) -> str:
        client = AsyncOpenAI(api_key=self._api_key or "", max_retries=REMOTE_MAX_RETRIES)
        try:
            response = await client.chat.completions.create(
                model=self._model,
                messages=[{"role": "user", "content": content}],
                max_completion_tokens=max_tokens,
            )
        except APIStatusError as exc:
            raise RemoteAPIError(PROVIDER, exc.status_code, exc.response.text) from exc
        choices = response.choices or []
        answer = choices[0].message.content if choices else None
        match answer:
            case str() as text if text:
                logger.debug("OpenAI vision answer: %s", text)
                return text
            case _:
                raise EmptyResponseError(PROVIDER)
