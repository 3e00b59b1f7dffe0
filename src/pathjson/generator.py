"""
Configurable JSON text generation from a value tree.
"""

import math
from dataclasses import dataclass
from decimal import Decimal

from . import _base64
from ._escape import encode_string
from ._profiling import ProfileContext
from .value import Array
from .value import Binary
from .value import Bool
from .value import Coordinate
from .value import Matrix
from .value import Null
from .value import Number
from .value import Numeric
from .value import Object
from .value import String
from .value import Value


@dataclass(frozen=True)
class GenerateOptions:
    """
    Configures JSON generation with immutable formatting knobs.

    ``object_delimiter``/``array_delimiter`` go between sibling entries and
    around the entry list; ``object_indent``/``array_indent`` are repeated
    once per nesting level in front of each entry. ``key_delimiter`` and
    ``value_delimiter`` surround the colon of an object entry.
    """

    object_indent: str = "\t"
    object_delimiter: str = "\n"
    key_delimiter: str = ""
    value_delimiter: str = " "
    array_indent: str = "\t"
    array_delimiter: str = "\n"
    url_safe_binary: bool = False

    def __post_init__(self) -> None:
        for name in (
            "object_indent",
            "object_delimiter",
            "key_delimiter",
            "value_delimiter",
            "array_indent",
            "array_delimiter",
        ):
            if not isinstance(getattr(self, name), str):
                raise TypeError(f"{name} must be a string")
        if not isinstance(self.url_safe_binary, bool):
            raise TypeError("url_safe_binary must be a boolean")


PRETTY = GenerateOptions()
COMPACT = GenerateOptions(
    object_indent="",
    object_delimiter="",
    key_delimiter="",
    value_delimiter="",
    array_indent="",
    array_delimiter="",
)


class _IndentCache:
    """Indentation strings per nesting level, built once per level."""

    def __init__(self, unit: str):
        self.unit = unit
        self._levels: list[str] = [""]

    def __getitem__(self, level: int) -> str:
        levels = self._levels
        while len(levels) <= level:
            levels.append(levels[-1] + self.unit)
        return levels[level]


class _Emitter:
    """
    Output buffer and indentation caches for one top-level ``generate`` call.

    Recursive calls for nested values all write into the same emitter; no
    state outlives the call that created it.
    """

    def __init__(self, options: GenerateOptions):
        self.options = options
        self.out: list[str] = []
        self.object_indents = _IndentCache(options.object_indent)
        self.array_indents = _IndentCache(options.array_indent)

    def text(self) -> str:
        return "".join(self.out)

    def emit(self, value: Value, level: int) -> None:  # noqa: PLR0911
        """Writes ``value`` at nesting ``level``; foreign objects write nothing."""
        out = self.out
        match value:
            case String(value=text):
                out.append(f'"{encode_string(text)}"')
            case Number(value=number):
                out.append(_format_number(number))
            case Bool(value=flag):
                out.append("true" if flag else "false")
            case Null():
                out.append("null")
            case Binary(data=data):
                out.append(
                    f'"{_base64.encode(data, self.options.url_safe_binary)}"'
                )
            case Matrix():
                self.emit(_matrix_as_arrays(value, ()), level)
            case Array(items=items):
                self._emit_array(items, level)
            case Object(fields=fields):
                self._emit_object(fields, level)
            case _:
                pass

    def _emit_array(self, items: list[Value], level: int) -> None:
        if not items:
            self.out.append("[]")
            return

        options = self.options
        inner = options.array_delimiter + self.array_indents[level + 1]
        out = self.out
        out.append("[")
        for i, item in enumerate(items):
            out.append("," + inner if i else inner)
            self.emit(item, level + 1)
        out.append(options.array_delimiter + self.array_indents[level] + "]")

    def _emit_object(self, fields: dict[str, Value], level: int) -> None:
        if not fields:
            self.out.append("{}")
            return

        options = self.options
        inner = options.object_delimiter + self.object_indents[level + 1]
        colon = options.key_delimiter + ":" + options.value_delimiter
        out = self.out
        out.append("{")
        for i, (key, item) in enumerate(fields.items()):
            out.append("," + inner if i else inner)
            out.append(f'"{encode_string(key)}"{colon}')
            self.emit(item, level + 1)
        out.append(options.object_delimiter + self.object_indents[level] + "}")


def _format_number(number: Numeric) -> str:
    """Renders a number from its numeric value."""
    if isinstance(number, float):
        if math.isnan(number) or math.isinf(number):
            msg = "Out of range float values are not JSON compliant"
            raise ValueError(msg)
        return repr(number)
    if isinstance(number, Decimal) and not number.is_finite():
        msg = "Out of range decimal values are not JSON compliant"
        raise ValueError(msg)
    return str(number)


def _matrix_as_arrays(matrix: Matrix, prefix: Coordinate) -> Array:
    """
    Flattens a matrix into nested arrays.

    Trailing empty cells of each innermost row are dropped; empty cells
    before the last filled one become null.
    """
    depth = len(prefix)
    extent = matrix.shape[depth]
    if depth < matrix.rank - 1:
        return Array(
            [_matrix_as_arrays(matrix, (*prefix, i)) for i in range(extent)]
        )

    row = [matrix.cell((*prefix, i)) for i in range(extent)]
    while row and row[-1] is None:
        row.pop()
    return Array([Null() if cell is None else cell for cell in row])


def generate(value: Value, options: GenerateOptions = PRETTY) -> str:
    """
    Renders a value tree as JSON text.

    The default layout is one entry per line indented with tabs; pass
    ``COMPACT`` for output without any whitespace.
    """
    emitter = _Emitter(options)
    with ProfileContext("generate"):
        emitter.emit(value, 0)
    return emitter.text()


__all__ = [
    "COMPACT",
    "PRETTY",
    "GenerateOptions",
    "generate",
]
