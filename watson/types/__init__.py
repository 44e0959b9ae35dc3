from __future__ import annotations

from .nil import Nil, NilType
from .value import (
    Kind,
    Value,
    new_nil_value,
    new_bool_value,
    new_int_value,
    new_uint_value,
    new_float_value,
    new_string_value,
    new_array_value,
    new_object_value,
)
from .fields import FieldSpec, watson_field, to_value, from_value

__all__ = [
    "Nil",
    "NilType",
    "Kind",
    "Value",
    "new_nil_value",
    "new_bool_value",
    "new_int_value",
    "new_uint_value",
    "new_float_value",
    "new_string_value",
    "new_array_value",
    "new_object_value",
    "FieldSpec",
    "watson_field",
    "to_value",
    "from_value",
]
