"""The {success, data|error} shape every endpoint returns."""
from dataclasses import dataclass
from typing import Any, Optional


@dataclass(frozen=True)
class GroupSummary:
    total_images_processed: int
    skipped_images: int


@dataclass(frozen=True)
class Envelope:
    success: bool
    data: Any = None
    error: Optional[str] = None
    summary: Optional[GroupSummary] = None

    def to_dict(self) -> dict[str, Any]:
        match self.success:
            case True:
                body: dict[str, Any] = {"success": True, "data": self.data}
                if self.summary is not None:
                    body["summary"] = {
                        "total_images_processed": self.summary.total_images_processed,
                        "skipped_images": self.summary.skipped_images,
                    }
                return body
            case False:
                return {"success": False, "error": self.error}


def ok(data: Any, summary: Optional[GroupSummary] = None) -> Envelope:
    return Envelope(success=True, data=data, summary=summary)


def fail(error: str) -> Envelope:
    return Envelope(success=False, error=error)
