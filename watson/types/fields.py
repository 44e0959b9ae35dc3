"""Declarative field mapping between Python objects and Values.

Dataclass fields describe how they appear in a Watson object:

    @dataclass
    class User:
        name: str
        age: int = watson_field(key="years", omitempty=True)
        _token: str = ""                      # private: never emitted
        extra: Meta = watson_field(inline=True, default_factory=Meta)

    - key        object key; defaults to the lower-cased field name
    - omit       never emitted nor filled
    - omitempty  skipped on output when the value is empty
    - inline     the field's own entries are merged into the parent object
"""

from __future__ import annotations

import dataclasses
import types
import typing
from dataclasses import dataclass
from typing import Any, Optional, Union

from watson.errors import WatsonMarshalError
from watson.types.bits import INT64_MAX, INT64_MIN, UINT64_MAX
from watson.types.nil import Nil, NilType
from watson.types.value import (
    Kind,
    Value,
    new_array_value,
    new_bool_value,
    new_float_value,
    new_int_value,
    new_nil_value,
    new_object_value,
    new_string_value,
    new_uint_value,
)

METADATA_KEY = "watson"


@dataclass(frozen=True)
class FieldSpec:
    key: Optional[str] = None
    omit: bool = False
    omitempty: bool = False
    inline: bool = False


def watson_field(*, key: str | None = None, omit: bool = False, omitempty: bool = False,
                 inline: bool = False, **kwargs) -> Any:
    metadata = dict(kwargs.pop("metadata", None) or {})
    metadata[METADATA_KEY] = FieldSpec(key=key, omit=omit, omitempty=omitempty, inline=inline)
    return dataclasses.field(metadata=metadata, **kwargs)


class FieldTag:
    """A dataclass field together with its resolved FieldSpec."""

    __slots__ = ("field", "spec")

    def __init__(self, f: dataclasses.Field):
        self.field = f
        self.spec: FieldSpec = f.metadata.get(METADATA_KEY, FieldSpec())

    @property
    def name(self) -> str:
        return self.field.name

    def key(self) -> str:
        return self.spec.key or self.field.name.lower()

    def should_always_omit(self) -> bool:
        return self.spec.omit or self.field.name.startswith("_")

    def omit_empty(self) -> bool:
        return self.spec.omitempty

    def inline(self) -> bool:
        return self.spec.inline


def field_tags(cls_or_obj: Any) -> list[FieldTag]:
    return [FieldTag(f) for f in dataclasses.fields(cls_or_obj)]


def find_field(key: str, cls_or_obj: Any) -> Optional[FieldTag]:
    for tag in field_tags(cls_or_obj):
        if not tag.should_always_omit() and not tag.inline() and tag.key() == key:
            return tag
    return None


def inline_fields(cls_or_obj: Any) -> list[FieldTag]:
    return [t for t in field_tags(cls_or_obj) if t.inline() and not t.should_always_omit()]


def is_empty(obj: Any) -> bool:
    if obj is None or obj is Nil or obj is False:
        return True
    if isinstance(obj, (int, float)) and not isinstance(obj, bool):
        return obj == 0
    if isinstance(obj, (str, bytes, bytearray, list, tuple, dict)):
        return len(obj) == 0
    if isinstance(obj, Value):
        return obj.kind is Kind.NIL
    return False


def _is_dataclass_instance(obj: Any) -> bool:
    return dataclasses.is_dataclass(obj) and not isinstance(obj, type)


# --- Python -> Value ---
def to_value(obj: Any) -> Value:
    if isinstance(obj, Value):
        return obj.clone()
    if obj is None or isinstance(obj, NilType):
        return new_nil_value()
    if isinstance(obj, bool):
        return new_bool_value(obj)
    if isinstance(obj, int):
        if INT64_MIN <= obj <= INT64_MAX:
            return new_int_value(obj)
        if INT64_MAX < obj <= UINT64_MAX:
            return new_uint_value(obj)
        raise WatsonMarshalError(f"integer out of 64-bit range: {obj}")
    if isinstance(obj, float):
        return new_float_value(obj)
    if isinstance(obj, (bytes, bytearray)):
        return new_string_value(obj)
    if isinstance(obj, str):
        return new_string_value(obj.encode("utf-8"))
    if isinstance(obj, (list, tuple)):
        return new_array_value([to_value(x) for x in obj])
    if isinstance(obj, dict):
        return new_object_value({_key_bytes(k): to_value(v) for k, v in obj.items()})
    if _is_dataclass_instance(obj):
        return new_object_value(_struct_entries(obj))
    raise WatsonMarshalError(f"cannot convert {type(obj).__name__} to a Value")


def _key_bytes(k: Any) -> bytes:
    if isinstance(k, str):
        return k.encode("utf-8")
    if isinstance(k, (bytes, bytearray)):
        return bytes(k)
    raise WatsonMarshalError(f"object keys must be str or bytes, got {type(k).__name__}")


def _struct_entries(obj: Any) -> dict[bytes, Value]:
    entries: dict[bytes, Value] = {}
    for tag in field_tags(obj):
        if tag.should_always_omit():
            continue
        v = getattr(obj, tag.name)
        if tag.omit_empty() and is_empty(v):
            continue
        if tag.inline():
            inner = to_value(v)
            if inner.kind is Kind.NIL:
                continue
            if inner.kind is not Kind.OBJECT:
                raise WatsonMarshalError(f"inline field {tag.name!r} is not an object")
            entries.update(inner.data)
            continue
        entries[tag.key().encode("utf-8")] = to_value(v)
    return entries


# --- Value -> Python ---
def from_value(value: Value, cls: Any = None) -> Any:
    """Convert a Value to Python; cls (a type or annotation) drives the target shape."""
    if cls is None or cls is Any:
        return _to_python(value)
    if cls is Value:
        return value.clone()

    origin = typing.get_origin(cls)
    args = typing.get_args(cls)
    if origin is Union or _is_union_type(cls):
        non_none = [a for a in args if a is not type(None)]
        if value.kind is Kind.NIL and len(non_none) < len(args):
            return None
        if len(non_none) == 1:
            return from_value(value, non_none[0])
        return _to_python(value)

    if origin is tuple or cls is tuple:
        _expect(value, Kind.ARRAY, cls)
        if args and not (len(args) == 2 and args[1] is Ellipsis):
            if len(value.data) != len(args):
                raise WatsonMarshalError(
                    f"expected {len(args)} item(s) for {cls!r}, got {len(value.data)}")
            return tuple(from_value(v, c) for v, c in zip(value.data, args))
        item_cls = args[0] if args else None
        return tuple(from_value(v, item_cls) for v in value.data)

    if origin is list or cls is list:
        _expect(value, Kind.ARRAY, cls)
        item_cls = args[0] if args else None
        return [from_value(v, item_cls) for v in value.data]

    if origin is dict or cls is dict:
        _expect(value, Kind.OBJECT, cls)
        key_cls = args[0] if args else None
        val_cls = args[1] if len(args) > 1 else None
        return {_decode_key(k, key_cls): from_value(v, val_cls) for k, v in value.data.items()}

    if dataclasses.is_dataclass(cls):
        _expect(value, Kind.OBJECT, cls)
        return _fill_struct(cls, value.data)

    if cls is bool:
        _expect(value, Kind.BOOL, cls)
        return value.data
    if cls is int:
        if value.kind not in (Kind.INT, Kind.UINT):
            raise WatsonMarshalError(f"expected int, got {value.kind}")
        return value.data
    if cls is float:
        if value.kind is Kind.FLOAT:
            return value.data
        if value.kind in (Kind.INT, Kind.UINT):
            return float(value.data)
        raise WatsonMarshalError(f"expected float, got {value.kind}")
    if cls is bytes:
        _expect(value, Kind.STRING, cls)
        return value.data
    if cls is str:
        _expect(value, Kind.STRING, cls)
        try:
            return value.data.decode("utf-8")
        except UnicodeDecodeError as e:
            raise WatsonMarshalError(f"string is not valid UTF-8: {value.data!r}") from e
    raise WatsonMarshalError(f"unsupported target type: {cls!r}")


def _is_union_type(cls: Any) -> bool:
    # X | Y annotations produce types.UnionType rather than typing.Union
    return isinstance(cls, types.UnionType)


def _expect(value: Value, kind: Kind, cls: Any) -> None:
    if value.kind is not kind:
        name = getattr(cls, "__name__", repr(cls))
        raise WatsonMarshalError(f"expected {kind} for {name}, got {value.kind}")


def _decode_key(k: bytes, key_cls: Any) -> Any:
    if key_cls is str:
        try:
            return k.decode("utf-8")
        except UnicodeDecodeError as e:
            raise WatsonMarshalError(f"object key is not valid UTF-8: {k!r}") from e
    return k


def _to_python(value: Value) -> Any:
    kind = value.kind
    if kind is Kind.NIL:
        return None
    if kind is Kind.ARRAY:
        return [_to_python(v) for v in value.data]
    if kind is Kind.OBJECT:
        return {k: _to_python(v) for k, v in value.data.items()}
    return value.data


def _fill_struct(cls: Any, entries: dict[bytes, Value]) -> Any:
    hints = typing.get_type_hints(cls)
    kwargs = _collect_kwargs(cls, hints, entries)
    try:
        return cls(**kwargs)
    except TypeError as e:
        raise WatsonMarshalError(f"cannot build {cls.__name__}: {e}") from e


def _collect_kwargs(cls: Any, hints: dict[str, Any], entries: dict[bytes, Value]) -> dict[str, Any]:
    kwargs: dict[str, Any] = {}
    for raw_key, v in entries.items():
        try:
            key = raw_key.decode("utf-8")
        except UnicodeDecodeError:
            continue
        tag = find_field(key, cls)
        if tag is not None and tag.field.init:
            kwargs[tag.name] = from_value(v, hints.get(tag.name))

    for tag in inline_fields(cls):
        if not tag.field.init:
            continue
        inner_cls = hints.get(tag.name)
        inner_cls = _strip_optional(inner_cls)
        if dataclasses.is_dataclass(inner_cls):
            inner_hints = typing.get_type_hints(inner_cls)
            inner_kwargs = _collect_kwargs(inner_cls, inner_hints, entries)
            if inner_kwargs or _all_defaulted(inner_cls):
                kwargs[tag.name] = inner_cls(**inner_kwargs)
    return kwargs


def _strip_optional(cls: Any) -> Any:
    if typing.get_origin(cls) is Union or _is_union_type(cls):
        non_none = [a for a in typing.get_args(cls) if a is not type(None)]
        if len(non_none) == 1:
            return non_none[0]
    return cls


def _all_defaulted(cls: Any) -> bool:
    return all(
        f.default is not dataclasses.MISSING or f.default_factory is not dataclasses.MISSING
        for f in dataclasses.fields(cls)
        if f.init
    )
