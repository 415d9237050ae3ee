"""Value types for govar-core."""

from __future__ import annotations

import math
import struct
from dataclasses import dataclass
from enum import Enum, auto
from typing import ClassVar, Union


# ---------------------------------------------------------------------------
# Kind
# ---------------------------------------------------------------------------

class Kind(Enum):
    Integer = auto()
    FloatingPoint = auto()
    String = auto()
    Character = auto()
    Boolean = auto()


# ---------------------------------------------------------------------------
# Machine-width helpers
# ---------------------------------------------------------------------------

def wrap_int(n: int, bits: int = 64) -> int:
    """Wrap *n* into a signed two's-complement integer of *bits* width."""
    half = 1 << (bits - 1)
    return ((n + half) % (1 << bits)) - half


def fits_int(n: int, bits: int = 64) -> bool:
    half = 1 << (bits - 1)
    return -half <= n < half


FLOAT32_MAX = 3.4028234663852886e38
# halfway between FLOAT32_MAX and 2**128; ties round to infinity
_FLOAT32_OVERFLOW = 2.0**128 - 2.0**103


def to_float32(x: float) -> float:
    """Round *x* to the nearest single-precision value.

    Finite values beyond the float32 range become infinities, the way
    single-precision arithmetic overflows.
    """
    if abs(x) >= _FLOAT32_OVERFLOW:
        return math.copysign(math.inf, x)
    if abs(x) > FLOAT32_MAX:
        return math.copysign(FLOAT32_MAX, x)
    return struct.unpack("f", struct.pack("f", x))[0]


def fits_float32(x: float) -> bool:
    return math.isfinite(x) and math.isfinite(to_float32(x))


# ---------------------------------------------------------------------------
# Value types
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class VInt:
    value: int

    kind: ClassVar[Kind] = Kind.Integer

    def __str__(self) -> str:
        return str(self.value)


@dataclass(frozen=True, slots=True)
class VFloat:
    value: float  # always representable in single precision

    kind: ClassVar[Kind] = Kind.FloatingPoint

    def __str__(self) -> str:
        v = self.value
        if math.isnan(v):
            return "NaN"
        if math.isinf(v):
            return "+Inf" if v > 0 else "-Inf"
        return f"{v:e}"


@dataclass(frozen=True, slots=True)
class VString:
    value: str

    kind: ClassVar[Kind] = Kind.String

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True, slots=True)
class VChar:
    """A single Unicode scalar, held as its code point.

    Arithmetic on characters works on code points, so a VChar may hold a
    value that is not a valid scalar (negative, a surrogate, past
    U+10FFFF).  Such values render as U+FFFD.
    """

    value: int  # code point

    kind: ClassVar[Kind] = Kind.Character

    @classmethod
    def of(cls, ch: str) -> VChar:
        return cls(ord(ch))

    def __str__(self) -> str:
        c = self.value
        if 0 <= c <= 0x10FFFF and not 0xD800 <= c <= 0xDFFF:
            return chr(c)
        return "\ufffd"


class VBool:
    """Boolean value.  Only the two singletons ``TRUE`` and ``FALSE`` exist."""

    __slots__ = ("value",)

    kind: ClassVar[Kind] = Kind.Boolean
    _instances: ClassVar[dict[bool, VBool]] = {}

    def __new__(cls, value: bool) -> VBool:
        value = bool(value)
        if value not in cls._instances:
            inst = super().__new__(cls)
            inst.value = value
            cls._instances[value] = inst
        return cls._instances[value]

    def __repr__(self) -> str:
        return f"VBool({self.value})"

    def __str__(self) -> str:
        return str(self.value).lower()


TRUE = VBool(True)
FALSE = VBool(False)


def to_bool(flag: bool) -> VBool:
    return TRUE if flag else FALSE


class _Empty:
    """Singleton for "no value": an expression that could not be evaluated."""

    _instance: "_Empty | None" = None

    def __new__(cls) -> "_Empty":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "Empty"

    def __bool__(self) -> bool:
        return False

    def __str__(self) -> str:
        return "Empty"


Empty = _Empty()

Value = Union[VInt, VFloat, VString, VChar, VBool]
Result = Union[VInt, VFloat, VString, VChar, VBool, _Empty]
