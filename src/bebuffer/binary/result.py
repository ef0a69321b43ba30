from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
from typing import Generic, TypeVar

T = TypeVar("T")


class Status(str, Enum):
    """
    Outcome of a cursor operation.

    SATURATED is the silent policy: the write was dropped or the read
    produced the zero sentinel. INSUFFICIENT_DATA is the explicit policy of
    the bulk reads, meant for "not enough data yet" during streaming.
    Only OK is truthy.
    """
    OK = "ok"
    SATURATED = "saturated"
    INSUFFICIENT_DATA = "insufficient_data"

    def __bool__(self) -> bool:
        return self is Status.OK


@dataclass(frozen=True)
class ReadResult(Generic[T]):
    value: T
    status: Status

    @property
    def ok(self) -> bool:
        return self.status is Status.OK
