from __future__ import annotations
from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional

from .binary.buffer import Buffer
from .binary.const_buffer import ConstBuffer
from .binary.codecs.serde import KINDS


class LayoutError(ValueError):
    pass


@dataclass(frozen=True)
class Field:
    """
    One entry of a textual layout, e.g. ``u16=0x1234``, ``str:8=abc``,
    ``bytes=dead``, ``fmt:%05d=42`` for packing, or ``s32``, ``bytes:4``,
    ``str:8`` for unpacking.
    """
    kind: str
    param: Optional[str] = None
    value: Optional[str] = None

    @property
    def spec(self) -> str:
        out = self.kind if self.param is None else f"{self.kind}:{self.param}"
        return out if self.value is None else f"{out}={self.value}"


_EXTRA_KINDS = ("str", "bytes", "fmt")


def parse_field(text: str, *, with_value: bool) -> Field:
    head, eq, value = text.partition("=")
    kind, colon, param = head.partition(":")
    kind = kind.strip().lower()

    if kind not in KINDS and kind not in _EXTRA_KINDS:
        raise LayoutError(f"unknown field kind {kind!r} in {text!r}")
    if with_value and not eq:
        raise LayoutError(f"field {text!r} needs a value (KIND=VALUE)")
    if not with_value and eq:
        raise LayoutError(f"field {text!r} takes no value")
    if kind == "fmt" and with_value is False:
        raise LayoutError("fmt fields can only be packed")
    if kind in KINDS and colon:
        raise LayoutError(f"integer field {text!r} takes no parameter")
    if kind == "str" and not colon:
        raise LayoutError(f"string field {text!r} needs a width (str:N)")
    if kind == "bytes" and not colon and not with_value:
        raise LayoutError(f"bytes field {text!r} needs a length (bytes:N)")
    if kind == "fmt" and not colon:
        raise LayoutError(f"fmt field {text!r} needs a format (fmt:FORMAT=VALUE)")

    return Field(kind=kind, param=param if colon else None, value=value if eq else None)


def parse_fields(texts: Iterable[str], *, with_value: bool) -> List[Field]:
    return [parse_field(t, with_value=with_value) for t in texts]


def _width(f: Field) -> int:
    try:
        n = int(f.param, 0)
    except (TypeError, ValueError) as e:
        raise LayoutError(f"bad width in {f.spec!r}") from e
    if n < 0:
        raise LayoutError(f"negative width in {f.spec!r}")
    return n


def _int_value(f: Field) -> int:
    try:
        return int(f.value, 0)
    except ValueError as e:
        raise LayoutError(f"bad integer in {f.spec!r}") from e


def pack_fields(buff: Buffer, fields: Iterable[Field]) -> List[Dict[str, object]]:
    """Append each field to ``buff``; returns one status record per field."""
    out: List[Dict[str, object]] = []
    for f in fields:
        if f.kind in KINDS:
            status = buff.write_int(KINDS[f.kind], _int_value(f)).value
        elif f.kind == "str":
            status = buff.write_str(f.value, _width(f)).value
        elif f.kind == "bytes":
            try:
                raw = bytes.fromhex(f.value)
            except ValueError as e:
                raise LayoutError(f"bad hex in {f.spec!r}") from e
            if f.param is not None and _width(f) != len(raw):
                raise LayoutError(f"{f.spec!r} holds {len(raw)} bytes, expected {f.param}")
            status = buff.write(raw).value
        else:
            try:
                arg: object = int(f.value, 0)
            except ValueError:
                arg = f.value
            room = buff.size - buff.written
            try:
                n = buff.format(f.param, arg)
            except (TypeError, ValueError) as e:
                raise LayoutError(f"cannot render {f.spec!r}: {e}") from e
            # the NUL terminator takes the last byte of the window
            status = "truncated" if n >= max(room, 1) else "ok"
            out.append({"field": f.spec, "status": status, "length": n})
            continue
        out.append({"field": f.spec, "status": status})
    return out


def unpack_fields(cur: ConstBuffer, fields: Iterable[Field]) -> List[Dict[str, object]]:
    """Consume each field from ``cur``; returns one value record per field."""
    out: List[Dict[str, object]] = []
    for f in fields:
        if f.kind in KINDS:
            res = cur.fetch(KINDS[f.kind])
            out.append({"field": f.spec, "status": res.status.value, "value": res.value})
            continue
        res_b = cur.read_bytes(_width(f))
        if f.kind == "bytes":
            value: object = res_b.value.hex()
        else:
            value = res_b.value.split(b"\x00", 1)[0].decode(cur.encoding, errors="replace")
        out.append({"field": f.spec, "status": res_b.status.value, "value": value})
    return out
