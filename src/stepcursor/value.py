"""Value model for column data read from the execution engine.

A ``Value`` is exact-kind: its payload always matches its ``ValueKind``.
``Value.decode`` is the only coercion path, and it never falls back to a
default when the stored kind does not fit the requested type.
"""

from __future__ import annotations

import types
from enum import StrEnum
from functools import lru_cache
from typing import Annotated, Any, TypeVar, Union, get_args, get_origin

from pydantic import BaseModel, ConfigDict, TypeAdapter, ValidationError, model_validator

from stepcursor.errors import ConversionError

T = TypeVar("T")

_I64_MIN = -(2**63)
_I64_MAX = 2**63 - 1


class ValueKind(StrEnum):
    """The kinds of value a column can hold."""

    NULL = "null"
    INTEGER = "integer"
    REAL = "real"
    TEXT = "text"
    BLOB = "blob"


_PAYLOAD_TYPES: dict[ValueKind, type | None] = {
    ValueKind.NULL: None,
    ValueKind.INTEGER: int,
    ValueKind.REAL: float,
    ValueKind.TEXT: str,
    ValueKind.BLOB: bytes,
}


_SCALAR_TYPES = frozenset({int, float, str, bytes})


def _target_bases(target: Any) -> set[Any]:
    """Flatten Annotated and union targets into their member types."""
    origin = get_origin(target)
    if origin is Annotated:
        return _target_bases(get_args(target)[0])
    if origin is Union or origin is types.UnionType:
        return set().union(*(_target_bases(arg) for arg in get_args(target)))
    return {target}


@lru_cache(maxsize=128)
def _adapter(target: Any) -> TypeAdapter[Any]:
    return TypeAdapter(target)


class Value(BaseModel):
    """A single immutable column value."""

    model_config = ConfigDict(frozen=True, strict=True)

    kind: ValueKind
    payload: int | float | str | bytes | None = None

    @model_validator(mode="after")
    def _check_payload(self) -> Value:
        expected = _PAYLOAD_TYPES[self.kind]
        if expected is None:
            if self.payload is not None:
                raise ValueError("null value cannot carry a payload")
            return self
        # bool is an int subclass; reject it explicitly
        if type(self.payload) is not expected:
            raise ValueError(
                f"{self.kind} value needs a {expected.__name__} payload, "
                f"got {type(self.payload).__name__}"
            )
        if self.kind is ValueKind.INTEGER and not _I64_MIN <= self.payload <= _I64_MAX:
            raise ValueError(f"integer {self.payload} does not fit in 64 bits")
        return self

    @classmethod
    def null(cls) -> Value:
        """Build a Null value."""
        return cls(kind=ValueKind.NULL)

    @classmethod
    def integer(cls, value: int) -> Value:
        """Build an Integer value."""
        return cls(kind=ValueKind.INTEGER, payload=value)

    @classmethod
    def real(cls, value: float) -> Value:
        """Build a Real value."""
        return cls(kind=ValueKind.REAL, payload=float(value))

    @classmethod
    def text(cls, value: str) -> Value:
        """Build a Text value."""
        return cls(kind=ValueKind.TEXT, payload=value)

    @classmethod
    def blob(cls, value: bytes | bytearray | memoryview) -> Value:
        """Build a Blob value, copying the buffer."""
        return cls(kind=ValueKind.BLOB, payload=bytes(value))

    @classmethod
    def from_native(cls, obj: Any) -> Value:
        """Convert an engine-native value into exactly one Value kind.

        Blob buffers are copied so the Value outlives the engine's cursor.
        Raises ConversionError for types the engine should never produce.
        """
        if obj is None:
            return cls.null()
        if isinstance(obj, bool):
            raise ConversionError("boolean is not an engine-native value")
        try:
            if isinstance(obj, int):
                return cls.integer(int(obj))
            if isinstance(obj, float):
                return cls.real(float(obj))
            if isinstance(obj, str):
                return cls.text(str(obj))
            if isinstance(obj, (bytes, bytearray, memoryview)):
                return cls.blob(obj)
        except ValidationError as exc:
            raise ConversionError(str(exc)) from exc
        raise ConversionError(f"unsupported engine value type: {type(obj).__name__}")

    def as_python(self) -> int | float | str | bytes | None:
        """Return the exact payload."""
        return self.payload

    def decode(self, target: type[T]) -> T:
        """Decode the payload as ``target`` without lossy coercion.

        ``int | None`` style targets accept Null; anything else that does not
        fit raises ConversionError.
        """
        name = getattr(target, "__name__", target)
        expected = _PAYLOAD_TYPES[self.kind]
        scalars = _target_bases(target) & _SCALAR_TYPES
        if expected is not None and scalars and expected not in scalars:
            raise ConversionError(f"cannot decode {self.kind} value as {name}")
        try:
            return _adapter(target).validate_python(self.payload, strict=True)
        except ValidationError as exc:
            raise ConversionError(f"cannot decode {self.kind} value as {name}") from exc

    def __repr__(self) -> str:
        if self.kind is ValueKind.NULL:
            return "Value.null()"
        return f"Value.{self.kind}({self.payload!r})"
