"""Tagged JavaScript values and their console rendering.

Expected output lines may be written as structured data instead of text.  The
data is converted into a :class:`JsValue` tagged variant and rendered the way
Node's ``console.log`` prints it (``util.inspect`` with default options), so a
catalog author can write ``{value: {a: 1, b: 3}}`` instead of the literal
``{ a: 1, b: 3 }``.

Only the subset of ``util.inspect`` needed for plain data is covered: strings,
numbers, booleans, ``null``, plain objects and arrays, the default depth of 2
and the single-line/multi-line layout decision.  Arrays with more than six
elements are laid out in aligned columns by Node and are rejected here.
"""

from __future__ import annotations

import math
import re
from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from typing import Any, List, Mapping, Sequence, Tuple, Union

# util.inspect defaults
INSPECT_DEPTH = 2
BREAK_LENGTH = 80
MAX_UNGROUPED_ARRAY = 6

_IDENTIFIER_KEY = re.compile(r"^[a-zA-Z_][a-zA-Z_0-9]*$")
_ARRAY_INDEX_MAX = 2**32 - 2

_ESCAPES = {
    "\b": "\\b",
    "\t": "\\t",
    "\n": "\\n",
    "\x0b": "\\x0B",
    "\f": "\\f",
    "\r": "\\r",
    "\\": "\\\\",
}


class UnrenderableValueError(ValueError):
    """Raised when a value cannot be rendered the way Node would print it."""


class ValueKind(str, Enum):
    """The JavaScript value kinds a catalog author can describe."""

    STRING = "string"
    NUMBER = "number"
    BOOLEAN = "boolean"
    NULL = "null"
    OBJECT = "object"
    ARRAY = "array"


ObjectItems = Tuple[Tuple[str, "JsValue"], ...]
ArrayItems = Tuple["JsValue", ...]


@dataclass(frozen=True)
class JsValue:
    """A JavaScript value as a tagged variant."""

    kind: ValueKind
    data: Union[str, int, float, bool, None, ObjectItems, ArrayItems]

    @classmethod
    def from_python(cls, value: Any) -> "JsValue":
        """Convert YAML/JSON-shaped Python data into a tagged value."""
        if value is None:
            return cls(ValueKind.NULL, None)
        if isinstance(value, bool):
            return cls(ValueKind.BOOLEAN, value)
        if isinstance(value, (int, float)):
            return cls(ValueKind.NUMBER, value)
        if isinstance(value, str):
            return cls(ValueKind.STRING, value)
        if isinstance(value, Mapping):
            items = tuple((str(key), cls.from_python(item)) for key, item in value.items())
            return cls(ValueKind.OBJECT, _order_object_keys(items))
        if isinstance(value, (list, tuple)):
            return cls(ValueKind.ARRAY, tuple(cls.from_python(item) for item in value))
        raise UnrenderableValueError(
            f"Unsupported value type {type(value).__name__}; "
            "expected string, number, boolean, null, mapping or list"
        )

    def render(self) -> List[str]:
        """Lines ``console.log(value)`` writes to stdout."""
        if self.kind is ValueKind.STRING:
            # console.log terminates the raw string with one newline
            return split_lines(f"{self.data}\n")
        return _format(self, depth=0, indentation=0).split("\n")


def split_lines(text: str) -> List[str]:
    """
    Split printed text into lines the way captured stdout is split.

    Only ``\\n`` (after normalising ``\\r\\n``) ends a line; a single trailing
    newline is dropped.  Other characters that :meth:`str.splitlines` treats
    as breaks, such as ``\\r`` or ``\\u2028``, stay inside the line.
    """
    text = text.replace("\r\n", "\n")
    if text.endswith("\n"):
        text = text[:-1]
    return text.split("\n")


def _order_object_keys(items: ObjectItems) -> ObjectItems:
    # Integer-like keys come first in ascending order, as in any JS object.
    indices = []
    others = []
    for key, value in items:
        if key.isdigit() and str(int(key)) == key and int(key) <= _ARRAY_INDEX_MAX:
            indices.append((key, value))
        else:
            others.append((key, value))
    indices.sort(key=lambda item: int(item[0]))
    return tuple(indices + others)


def quote_string(text: str) -> str:
    """Quote a string the way ``util.inspect`` does for nested strings."""
    quote = "'"
    if "'" in text:
        if '"' not in text:
            quote = '"'
        elif "`" not in text and "${" not in text:
            quote = "`"
    escaped = []
    for char in text:
        if char in _ESCAPES:
            escaped.append(_ESCAPES[char])
        elif char == quote == "'":
            escaped.append("\\'")
        elif ord(char) < 0x20 or 0x7F <= ord(char) <= 0x9F:
            escaped.append(f"\\x{ord(char):02X}")
        else:
            escaped.append(char)
    return f"{quote}{''.join(escaped)}{quote}"


def format_number(number: Union[int, float]) -> str:
    """Format a number with JavaScript's ``Number.prototype.toString`` rules."""
    if isinstance(number, int):
        if abs(number) < 10**21:
            return str(number)
        number = float(number)
    if math.isnan(number):
        return "NaN"
    if math.isinf(number):
        return "Infinity" if number > 0 else "-Infinity"
    if number == 0:
        return "-0" if math.copysign(1.0, number) < 0 else "0"
    magnitude = abs(number)
    text = repr(number)
    if number.is_integer() and magnitude < 1e21:
        if magnitude < 2**53:
            return str(int(number))
        return format(Decimal(text), "f")
    if 1e-6 <= magnitude < 1e21:
        if "e" in text:
            text = format(Decimal(text), "f")
        return text
    mantissa, _, exponent = text.partition("e")
    if not exponent:
        mantissa, exponent = f"{number:e}".split("e")
        mantissa = mantissa.rstrip("0").rstrip(".")
    sign = "-" if exponent.startswith("-") else "+"
    return f"{mantissa}e{sign}{exponent.lstrip('+-').lstrip('0') or '0'}"


def _format_key(key: str) -> str:
    if _IDENTIFIER_KEY.match(key):
        return key
    return quote_string(key)


def _format(value: JsValue, *, depth: int, indentation: int) -> str:
    if value.kind is ValueKind.NULL:
        return "null"
    if value.kind is ValueKind.BOOLEAN:
        return "true" if value.data else "false"
    if value.kind is ValueKind.NUMBER:
        return format_number(value.data)  # type: ignore[arg-type]
    if value.kind is ValueKind.STRING:
        return quote_string(str(value.data))

    is_array = value.kind is ValueKind.ARRAY
    items: Sequence[Any] = value.data  # type: ignore[assignment]
    if depth > INSPECT_DEPTH:
        return "[Array]" if is_array else "[Object]"
    braces = ("[", "]") if is_array else ("{", "}")
    if not items:
        return f"{braces[0]}{braces[1]}"
    if is_array and len(items) > MAX_UNGROUPED_ARRAY:
        raise UnrenderableValueError(
            f"Arrays longer than {MAX_UNGROUPED_ARRAY} elements are printed in columns; "
            "write the expected lines as text instead"
        )

    output = []
    for item in items:
        if is_array:
            output.append(_format(item, depth=depth + 1, indentation=indentation + 2))
        else:
            key, child = item
            rendered = _format(child, depth=depth + 1, indentation=indentation + 2)
            output.append(f"{_format_key(key)}: {rendered}")

    start = len(output) + indentation + len(braces[0]) + 10
    total_length = sum(len(entry) for entry in output) + len(output) + start
    joined = ", ".join(output)
    if total_length <= BREAK_LENGTH and "\n" not in joined:
        return f"{braces[0]} {joined} {braces[1]}"
    pad = " " * indentation
    body = f",\n{pad}  ".join(output)
    return f"{braces[0]}\n{pad}  {body}\n{pad}{braces[1]}"


def render_value(value: Any) -> List[str]:
    """Render Python data as the lines ``console.log`` would print."""
    return JsValue.from_python(value).render()


__all__ = [
    "ValueKind",
    "JsValue",
    "UnrenderableValueError",
    "quote_string",
    "format_number",
    "render_value",
    "split_lines",
]
