"""ClaudeVisionClient — Anthropic Claude vision backend."""
import base64
from typing import Any

from anthropic import APIStatusError, AsyncAnthropic

from src.constants import (
    CLAUDE_VISION_MODEL,
    DEFAULT_IMAGE_MIME,
    GROUP_IMAGE_MAX_TOKENS,
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

PROVIDER = "Anthropic"


def _image_block(image_bytes: bytes, mime_type: str) -> dict:
    return {
        "type": "image",
        "source": {
            "type": "base64",
            "media_type": mime_type,
            "data": base64.standard_b64encode(image_bytes).decode(),
        },
    }


class ClaudeVisionClient(VisionClient):

    def __init__(self, api_key: str | None, model: str = CLAUDE_VISION_MODEL) -> None:
        self._api_key = api_key
        self._model = model

    async def analyze_image(
        self,
        image_bytes: bytes,
        concepts: list[str],
        mime_type: str = DEFAULT_IMAGE_MIME,
    ) -> Any:
        content = [
            _image_block(image_bytes, mime_type),
            {"type": "text", "text": single_image_prompt(concepts)},
        ]
        return parse_concept_scores(await self._complete(content, SINGLE_IMAGE_MAX_TOKENS))

    async def analyze_images(self, images: list[UploadedFile], concepts: list[str]) -> Any:
        content = [
            _image_block(img.content, img.mime_type or DEFAULT_IMAGE_MIME) for img in images
        ]
        content.append({"type": "text", "text": image_group_prompt(concepts)})
        return parse_concept_scores(await self._complete(content, GROUP_IMAGE_MAX_TOKENS))

    async def _complete(self, content: list[dict], max_tokens: int) -> str:
        client = AsyncAnthropic(api_key=self._api_key or "", max_retries=REMOTE_MAX_RETRIES)
        try:
            message = await client.messages.create(
                model=self._model,
                max_tokens=max_tokens,
                messages=[{"role": "user", "content": content}],
            )
        except APIStatusError as exc:
            raise RemoteAPIError(PROVIDER, exc.status_code, exc.response.text) from exc
        text = "".join(
            block.text for block in message.content if getattr(block, "type", None) == "text"
        )
        match text:
            case "":
                raise EmptyResponseError(PROVIDER)
            case answer:
                return answer
