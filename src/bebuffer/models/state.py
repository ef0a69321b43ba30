from __future__ import annotations
from pydantic import BaseModel, Field

class BufferState(BaseModel):
    size: int = Field(..., ge=0)
    written: int = Field(..., ge=0)
    available: int = Field(..., ge=0)
    data_hex: str = ""

class ConstBufferState(BaseModel):
    size: int = Field(..., ge=0)
    read: int = Field(..., ge=0)
    available: int = Field(..., ge=0)
    remaining_hex: str = ""
