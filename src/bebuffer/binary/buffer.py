from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Optional, Union

from .codecs.serde import IntKind, U8, U16, U32, U64, S8, S16, S32, S64, encode_into, BytesLike
from .result import Status
from bebuffer.models.options import BufferOptions
from bebuffer.models.state import BufferState

logger = logging.getLogger(__name__)


class BufferReleasedError(ValueError):
    pass


class Buffer:
    """
    Write cursor over a fixed-capacity byte region.

    Appends are big-endian and bounds-checked: a write that does not fit is
    dropped whole and reported as ``Status.SATURATED``; nothing is raised.
    Callers that must react to overflow check ``write_available()`` first.
    """
    __slots__ = ("data", "size", "written", "encoding", "clamp_format", "_released")

    def __init__(
        self,
        storage: bytearray,
        written: int = 0,
        *,
        encoding: str = "utf-8",
        clamp_format: bool = False,
    ):
        if not isinstance(storage, bytearray):
            raise TypeError(f"storage must be a bytearray, got {type(storage).__name__}")
        if written < 0:
            raise ValueError(f"written must be >= 0, got {written}")
        self.data = storage
        self.size = len(storage)
        self.written = written
        self.encoding = encoding
        self.clamp_format = clamp_format
        self._released = False

    # -----------------------------
    # Lifecycle
    # -----------------------------

    @classmethod
    def alloc_data(cls, size: int, **kwargs) -> "Buffer":
        if size < 0:
            raise ValueError(f"capacity must be >= 0, got {size}")
        logger.debug("allocating %d byte buffer", size)
        return cls(bytearray(size), **kwargs)

    @classmethod
    def from_options(cls, opts: BufferOptions) -> "Buffer":
        return cls.alloc_data(opts.capacity, encoding=opts.encoding, clamp_format=opts.clamp_format)

    def free_data(self) -> None:
        if self._released:
            raise BufferReleasedError("buffer already released")
        logger.debug("releasing %d byte buffer", self.size)
        self.data = bytearray()
        self.size = 0
        self._released = True

    @property
    def released(self) -> bool:
        return self._released

    # -----------------------------
    # Fixed-width writes
    # -----------------------------

    def write_available(self) -> int:
        if self.size >= self.written:
            return self.size - self.written
        return 0

    def write_int(self, kind: IntKind, value: int) -> Status:
        if self.written + kind.size > self.size:
            return Status.SATURATED
        encode_into(kind, self.data, self.written, value)
        self.written += kind.size
        return Status.OK

    def write_u8(self, v: int) -> Status:  return self.write_int(U8, v)
    def write_u16(self, v: int) -> Status: return self.write_int(U16, v)
    def write_u32(self, v: int) -> Status: return self.write_int(U32, v)
    def write_u64(self, v: int) -> Status: return self.write_int(U64, v)
    def write_s8(self, v: int) -> Status:  return self.write_int(S8, v)
    def write_s16(self, v: int) -> Status: return self.write_int(S16, v)
    def write_s32(self, v: int) -> Status: return self.write_int(S32, v)
    def write_s64(self, v: int) -> Status: return self.write_int(S64, v)

    # -----------------------------
    # Bulk writes
    # -----------------------------

    def write(self, data: BytesLike, n: Optional[int] = None) -> Status:
        """Copy the first ``n`` bytes of ``data`` (all of it by default)."""
        src = memoryview(data).cast("B")
        if n is None:
            n = src.nbytes
        if not (0 <= n <= src.nbytes):
            raise ValueError(f"cannot copy {n} bytes from a {src.nbytes} byte source")
        if self.written + n > self.size:
            return Status.SATURATED
        self.data[self.written:self.written + n] = src[:n]
        self.written += n
        return Status.OK

    def write_str(self, text: Union[str, BytesLike], n: int) -> Status:
        """
        Copy ``text`` into an ``n``-byte window at the cursor, strncpy style:
        the source stops at its first NUL or after ``n`` bytes and the rest
        of the window is zero-filled. The cursor always advances by ``n``.
        """
        if n < 0:
            raise ValueError(f"window must be >= 0, got {n}")
        if self.written + n > self.size:
            return Status.SATURATED
        raw = text.encode(self.encoding) if isinstance(text, str) else bytes(text)
        nul = raw.find(b"\x00")
        if nul >= 0:
            raw = raw[:nul]
        raw = raw[:n]
        self.data[self.written:self.written + n] = raw + bytes(n - len(raw))
        self.written += n
        return Status.OK

    def format(self, fmt: str, *args) -> int:
        """
        printf-style append with snprintf semantics.

        At most ``size - written - 1`` bytes of the rendered text are copied,
        followed by a NUL. The full rendered length is returned and added to
        ``written`` even when the copy was truncated, so ``written`` can end
        up past ``size`` (unless ``clamp_format`` is set).
        """
        if len(args) == 1 and isinstance(args[0], Mapping):
            rendered = fmt % args[0]
        else:
            rendered = fmt % args
        raw = rendered.encode(self.encoding)

        room = self.size - self.written
        if room > 0:
            n = min(len(raw), room - 1)
            start = self.written
            self.data[start:start + n] = raw[:n]
            self.data[start + n] = 0
        if len(raw) >= max(room, 1):
            logger.debug("formatted write truncated: %d bytes into %d byte window", len(raw), max(room, 0))

        self.written += len(raw)
        if self.clamp_format and self.written > self.size:
            self.written = self.size
        return len(raw)

    # -----------------------------
    # Cursor management
    # -----------------------------

    def clear(self) -> None:
        # Storage is left as is; old bytes stay until overwritten.
        self.written = 0

    def move_by(self, offset: int) -> None:
        """
        Drop the first ``offset`` written bytes and slide the rest to the
        front of the same storage. ``offset`` is clamped to ``written``.

        Bytes a truncated format() counted but never stored are dropped
        too, so ``written`` ends at the number of bytes actually kept.
        """
        if offset < 0:
            raise ValueError(f"offset must be >= 0, got {offset}")
        offset = min(offset, self.written)
        keep = max(0, min(self.written, self.size) - offset)
        if keep:
            self.data[0:keep] = self.data[offset:offset + keep]
        self.written = keep
        logger.debug("compacted buffer by %d bytes, %d left", offset, self.written)

    # -----------------------------
    # Views
    # -----------------------------

    def getvalue(self) -> bytes:
        return bytes(self.data[:min(self.written, self.size)])

    def text(self, start: int = 0, end: Optional[int] = None, encoding: Optional[str] = None) -> str:
        """Decode a slice of the written bytes as text."""
        live = memoryview(self.data)[:min(self.written, self.size)]
        return bytes(live[start:end]).decode(encoding or self.encoding)

    def state(self) -> BufferState:
        return BufferState(
            size=self.size,
            written=self.written,
            available=self.write_available(),
            data_hex=self.getvalue().hex(),
        )

    def __repr__(self) -> str:
        return f"Buffer(size={self.size}, written={self.written})"
