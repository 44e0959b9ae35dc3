from __future__ import annotations

import math

from watson.types.value import Kind, Value

# ----------------- ANSI colors -----------------
RESET = "\033[0m"
COLOR_NIL = "\033[90m"
COLOR_BOOL = "\033[95m"
COLOR_NUMBER = "\033[94m"
COLOR_STRING = "\033[92m"
COLOR_KEY = "\033[96m"

# ----------------- Defaults -----------------
DEFAULT_OPTIONS = {
    "max_line_length": 80,
    "color": False,
}

_ESCAPES = {
    0x22: '\\"',
    0x5C: "\\\\",
    0x0A: "\\n",
    0x0D: "\\r",
    0x09: "\\t",
}


# ----------------- Scalars -----------------
def format_bytes(data: bytes) -> str:
    """Quoted string literal; printable ASCII as-is, everything else as \\xNN."""
    out = ['"']
    for b in data:
        if b in _ESCAPES:
            out.append(_ESCAPES[b])
        elif 0x20 <= b < 0x7F:
            out.append(chr(b))
        else:
            out.append(f"\\x{b:02x}")
    out.append('"')
    return "".join(out)


def format_float(f: float) -> str:
    if math.isnan(f):
        return "nan"
    if math.isinf(f):
        return "inf" if f > 0 else "-inf"
    return repr(f)


def _paint(text: str, color: str, options: dict) -> str:
    if options.get("color", False):
        return f"{color}{text}{RESET}"
    return text


def format_scalar(v: Value, options: dict = DEFAULT_OPTIONS) -> str:
    kind = v.kind
    if kind is Kind.NIL:
        return _paint("nil", COLOR_NIL, options)
    if kind is Kind.BOOL:
        return _paint("true" if v.data else "false", COLOR_BOOL, options)
    if kind is Kind.INT:
        return _paint(str(v.data), COLOR_NUMBER, options)
    if kind is Kind.UINT:
        return _paint(f"{v.data}u", COLOR_NUMBER, options)
    if kind is Kind.FLOAT:
        return _paint(format_float(v.data), COLOR_NUMBER, options)
    if kind is Kind.STRING:
        return _paint(format_bytes(v.data), COLOR_STRING, options)
    raise ValueError(f"not a scalar: {kind}")


# ----------------- Pretty printer -----------------
def pprint_value(v: Value, indent: int = 0, options: dict = DEFAULT_OPTIONS) -> str:
    """Render v as JSON-like text, breaking containers that overflow max_line_length."""
    if v.kind is Kind.ARRAY:
        if not v.data:
            return "[]"
        parts = [pprint_value(x, indent + 1, options) for x in v.data]
        open_, close = "[", "]"
    elif v.kind is Kind.OBJECT:
        if not v.data:
            return "{}"
        parts = [
            f"{_paint(format_bytes(k), COLOR_KEY, options)}: {pprint_value(v.data[k], indent + 1, options)}"
            for k in sorted(v.data)
        ]
        open_, close = "{", "}"
    else:
        return format_scalar(v, options)

    single_line = open_ + ", ".join(parts) + close
    if "\n" not in single_line and len(single_line) + indent * 2 <= options.get("max_line_length", 80):
        return single_line

    pad = "  " * (indent + 1)
    inner = ",\n".join(pad + p for p in parts)
    return f"{open_}\n{inner}\n{'  ' * indent}{close}"


def format_value(v: Value, **options) -> str:
    return pprint_value(v, 0, {**DEFAULT_OPTIONS, **options})
