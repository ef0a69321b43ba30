from __future__ import annotations
import struct
from dataclasses import dataclass
from typing import Dict, Union

BytesLike = Union[bytes, bytearray, memoryview]


@dataclass(frozen=True)
class IntKind:
    name: str
    size: int      # bytes on the wire
    signed: bool
    fmt: str       # struct format, always big-endian

    @property
    def mask(self) -> int:
        return (1 << (8 * self.size)) - 1


U8 = IntKind("u8", 1, False, ">B")
U16 = IntKind("u16", 2, False, ">H")
U32 = IntKind("u32", 4, False, ">I")
U64 = IntKind("u64", 8, False, ">Q")
S8 = IntKind("s8", 1, True, ">b")
S16 = IntKind("s16", 2, True, ">h")
S32 = IntKind("s32", 4, True, ">i")
S64 = IntKind("s64", 8, True, ">q")

KINDS: Dict[str, IntKind] = {k.name: k for k in (U8, U16, U32, U64, S8, S16, S32, S64)}

# Unsigned twin used for packing; signed values go out as their two's-complement pattern.
_UNSIGNED_FMT = {1: ">B", 2: ">H", 4: ">I", 8: ">Q"}


def encode(kind: IntKind, value: int) -> bytes:
    """
    Big-endian bytes for ``value``. The value is masked to the kind's width,
    so out-of-range input wraps instead of raising.
    """
    return struct.pack(_UNSIGNED_FMT[kind.size], int(value) & kind.mask)


def encode_into(kind: IntKind, buf: bytearray, offset: int, value: int) -> None:
    struct.pack_into(_UNSIGNED_FMT[kind.size], buf, offset, int(value) & kind.mask)


def decode(kind: IntKind, raw: BytesLike, offset: int = 0) -> int:
    """Decode ``kind.size`` bytes of ``raw`` starting at ``offset``."""
    return struct.unpack_from(kind.fmt, raw, offset)[0]


def encode_u8(v: int) -> bytes:  return encode(U8, v)
def encode_u16(v: int) -> bytes: return encode(U16, v)
def encode_u32(v: int) -> bytes: return encode(U32, v)
def encode_u64(v: int) -> bytes: return encode(U64, v)
def encode_s8(v: int) -> bytes:  return encode(S8, v)
def encode_s16(v: int) -> bytes: return encode(S16, v)
def encode_s32(v: int) -> bytes: return encode(S32, v)
def encode_s64(v: int) -> bytes: return encode(S64, v)

def decode_u8(raw: BytesLike) -> int:  return decode(U8, raw)
def decode_u16(raw: BytesLike) -> int: return decode(U16, raw)
def decode_u32(raw: BytesLike) -> int: return decode(U32, raw)
def decode_u64(raw: BytesLike) -> int: return decode(U64, raw)
def decode_s8(raw: BytesLike) -> int:  return decode(S8, raw)
def decode_s16(raw: BytesLike) -> int: return decode(S16, raw)
def decode_s32(raw: BytesLike) -> int: return decode(S32, raw)
def decode_s64(raw: BytesLike) -> int: return decode(S64, raw)
