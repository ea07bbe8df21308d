from __future__ import annotations

from pydantic import BaseModel, Field, model_validator


class CompressionPolicy(BaseModel):
    """Retry policy for the compression controller.

    Qualities are encoder fractions in (0, 1]; ``quality_step`` is subtracted
    between passes until ``min_quality`` is reached.
    """

    max_bytes: int = Field(800 * 1024, gt=0)
    max_dimension: int = Field(1280, gt=0)
    initial_quality: float = Field(0.8, gt=0, le=1)
    min_quality: float = Field(0.5, gt=0, le=1)
    quality_step: float = Field(0.1, gt=0, le=1)

    @model_validator(mode="after")
    def _check_quality_range(self) -> "CompressionPolicy":
        if self.min_quality > self.initial_quality:
            raise ValueError("min_quality must not exceed initial_quality")
        return self


class FileInfo(BaseModel):
    exists: bool
    size: int = Field(0, ge=0)


class ResizedImage(BaseModel):
    uri: str  # Local path of the newly encoded file
    width: int = Field(..., ge=1)
    height: int = Field(..., ge=1)


class CompressionResult(BaseModel):
    uri: str
    width: int = Field(..., ge=1)
    height: int = Field(..., ge=1)
    size: int = Field(..., ge=0)  # Bytes
