from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class UploadedFile:
    """One uploaded payload, held in memory for the life of a request."""

    content: bytes
    mime_type: Optional[str] = None
    filename: Optional[str] = None
