from __future__ import annotations

from typing import Optional, TYPE_CHECKING

from .codecs.serde import IntKind, U8, U16, U32, U64, S8, S16, S32, S64, decode, BytesLike
from .result import ReadResult, Status
from bebuffer.models.state import ConstBufferState

if TYPE_CHECKING:
    from .buffer import Buffer


class ConstBuffer:
    """
    Read cursor: a borrowed, read-only view with a consume offset.

    Fixed-width reads past the end return 0 and leave the cursor alone.
    The bulk reads report ``Status.INSUFFICIENT_DATA`` instead, so callers
    can wait for more input without mistaking padding for data.
    """
    __slots__ = ("data", "size", "read", "encoding")

    def __init__(self, data: BytesLike, read: int = 0, *, encoding: str = "utf-8"):
        if read < 0:
            raise ValueError(f"read must be >= 0, got {read}")
        self.data = memoryview(data).cast("B").toreadonly()
        self.size = self.data.nbytes
        self.read = read
        self.encoding = encoding

    @classmethod
    def from_buffer(cls, buff: "Buffer") -> "ConstBuffer":
        """View over the written part of a write cursor, without copying."""
        end = min(buff.written, buff.size)
        return cls(memoryview(buff.data)[:end], encoding=buff.encoding)

    def copy(self) -> "ConstBuffer":
        return ConstBuffer(self.data, self.read, encoding=self.encoding)

    def read_available(self) -> int:
        if self.size >= self.read:
            return self.size - self.read
        return 0

    # -----------------------------
    # Fixed-width reads
    # -----------------------------

    def fetch(self, kind: IntKind) -> ReadResult[int]:
        if self.read + kind.size > self.size:
            return ReadResult(0, Status.SATURATED)
        value = decode(kind, self.data, self.read)
        self.read += kind.size
        return ReadResult(value, Status.OK)

    def read_int(self, kind: IntKind) -> int:
        return self.fetch(kind).value

    def read_u8(self) -> int:  return self.read_int(U8)
    def read_u16(self) -> int: return self.read_int(U16)
    def read_u32(self) -> int: return self.read_int(U32)
    def read_u64(self) -> int: return self.read_int(U64)
    def read_s8(self) -> int:  return self.read_int(S8)
    def read_s16(self) -> int: return self.read_int(S16)
    def read_s32(self) -> int: return self.read_int(S32)
    def read_s64(self) -> int: return self.read_int(S64)

    # -----------------------------
    # Bulk reads
    # -----------------------------

    def read_into(self, dest, n: Optional[int] = None) -> Status:
        """Copy ``n`` bytes (default ``len(dest)``) into the writable ``dest``."""
        out = memoryview(dest).cast("B")
        if out.readonly:
            raise ValueError("destination is read-only")
        if n is None:
            n = out.nbytes
        if not (0 <= n <= out.nbytes):
            raise ValueError(f"cannot copy {n} bytes into a {out.nbytes} byte destination")
        if self.read + n > self.size:
            return Status.INSUFFICIENT_DATA
        out[:n] = self.data[self.read:self.read + n]
        self.read += n
        return Status.OK

    def read_bytes(self, n: int) -> ReadResult[bytes]:
        if n < 0:
            raise ValueError(f"length must be >= 0, got {n}")
        if self.read + n > self.size:
            return ReadResult(b"", Status.INSUFFICIENT_DATA)
        out = self.data[self.read:self.read + n].tobytes()
        self.read += n
        return ReadResult(out, Status.OK)

    # -----------------------------
    # Views
    # -----------------------------

    def text(self, start: int = 0, end: Optional[int] = None, encoding: Optional[str] = None) -> str:
        return self.data[start:end].tobytes().decode(encoding or self.encoding)

    def state(self) -> ConstBufferState:
        return ConstBufferState(
            size=self.size,
            read=self.read,
            available=self.read_available(),
            remaining_hex=self.data[min(self.read, self.size):].tobytes().hex(),
        )

    def __repr__(self) -> str:
        return f"ConstBuffer(size={self.size}, read={self.read})"
