from __future__ import annotations
import codecs
from pydantic import BaseModel, Field, field_validator

class BufferOptions(BaseModel):
    capacity: int = Field(..., ge=0)
    encoding: str = "utf-8"
    # Keep `written` within capacity after a truncated format() call.
    clamp_format: bool = False

    @field_validator("encoding")
    @classmethod
    def _known_encoding(cls, v: str) -> str:
        try:
            codecs.lookup(v)
        except LookupError as e:
            raise ValueError(f"unknown encoding {v!r}") from e
        return v
