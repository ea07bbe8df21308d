from __future__ import annotations

from pydantic import BaseModel


class UploadTarget(BaseModel):
    """Destination of a single upload, generated per call."""

    folder: str
    generated_name: str  # e.g., "1718040000000-k3j9xq.jpeg"
    content_type: str = "image/jpeg"

    @property
    def path(self) -> str:
        return f"{self.folder}/{self.generated_name}"
