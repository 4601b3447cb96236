"""VisionClient — abstract base for concept-scoring backends."""
import json
import re
from abc import ABC, abstractmethod
from typing import Any

from src.constants import DEFAULT_IMAGE_MIME, PROMPT_IMAGE_GROUP, PROMPT_SINGLE_IMAGE
from src.errors import ParseError
from src.media import UploadedFile

_JSON_FENCE = re.compile(r"```json\s*([\s\S]*?)\s*```")


def single_image_prompt(concepts: list[str]) -> str:
    return PROMPT_SINGLE_IMAGE.format(concepts=", ".join(concepts))


def image_group_prompt(concepts: list[str]) -> str:
    return PROMPT_IMAGE_GROUP.format(concepts=", ".join(concepts))


def _reject_constant(token: str) -> Any:
    raise ValueError(f"non-standard JSON token {token}")


def parse_concept_scores(raw: str) -> Any:
    """Decode the model's answer, unwrapping the first ```json fence if present.

    The decoded value is returned as-is: keys are not checked against the
    requested concepts and scores are not range-checked. NaN and Infinity
    are not JSON and raise ParseError like any other malformed answer.
    """
    match _JSON_FENCE.search(raw):
        case None:
            candidate = raw
        case fenced:
            candidate = fenced.group(1)
    try:
        return json.loads(candidate.strip(), parse_constant=_reject_constant)
    except ValueError as exc:
        raise ParseError(raw) from exc


class VisionClient(ABC):
    @abstractmethod
    async def analyze_image(
        self,
        image_bytes: bytes,
        concepts: list[str],
        mime_type: str = DEFAULT_IMAGE_MIME,
    ) -> Any:
        """Score concepts against one image. Raises RemoteClientError on failure."""
        ...

    @abstractmethod
    async def analyze_images(self, images: list[UploadedFile], concepts: list[str]) -> Any:
        """Score concepts across a set of images in a single remote call."""
        ...
