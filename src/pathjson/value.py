"""
The generic value tree shared by the parser, the generator and the path engines.

Each JSON type is its own dataclass and ``Value`` is the closed union of them,
so every consumer dispatches with a single ``match`` over the variants.
"""

from dataclasses import dataclass
from dataclasses import field
from decimal import Decimal
from typing import Any

type Numeric = int | float | Decimal
type Coordinate = tuple[int, ...]

MIN_MATRIX_RANK = 2
MAX_MATRIX_RANK = 3


@dataclass(frozen=True)
class Null:
    """JSON ``null``."""


@dataclass(frozen=True)
class Bool:
    value: bool


@dataclass(frozen=True)
class Number:
    """
    A JSON number.

    Integral literals are held as ``int``; literals with a fraction or an
    exponent as ``float`` (or ``Decimal`` when parsed with ``use_decimal``).
    Literals too large for either are held as ``Decimal``.
    """

    value: Numeric


@dataclass(frozen=True)
class String:
    value: str


@dataclass(frozen=True)
class Binary:
    """Raw bytes, written out as a quoted base64 string."""

    data: bytes


@dataclass
class Array:
    items: list["Value"] = field(default_factory=list)


@dataclass
class Object:
    fields: dict[str, "Value"] = field(default_factory=dict)


@dataclass
class Matrix:
    """
    A true multi-dimensional array of rank 2 or 3.

    ``shape`` holds the extent of each dimension and ``cells`` the filled
    coordinates. A coordinate inside ``shape`` with no entry is an empty cell.
    """

    rank: int = MIN_MATRIX_RANK
    shape: Coordinate = ()
    cells: dict[Coordinate, "Value"] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if not MIN_MATRIX_RANK <= self.rank <= MAX_MATRIX_RANK:
            raise ValueError(
                f"matrix rank must be {MIN_MATRIX_RANK} or {MAX_MATRIX_RANK}, "
                f"not {self.rank}"
            )
        if not self.shape:
            self.shape = (0,) * self.rank
        if len(self.shape) != self.rank:
            raise ValueError("matrix shape must have one extent per dimension")

    def cell(self, coordinate: Coordinate) -> "Value | None":
        return self.cells.get(coordinate)

    def rows(self) -> list[list["Value | None"]]:
        """Returns the innermost rows in row-major order, empty cells as None."""
        *outer, width = self.shape
        rows = []
        for prefix in _coordinates(tuple(outer)):
            rows.append([self.cells.get((*prefix, j)) for j in range(width)])
        return rows


type Value = Null | Bool | Number | String | Binary | Array | Object | Matrix

VALUE_TYPES = (Null, Bool, Number, String, Binary, Array, Object, Matrix)


def _coordinates(shape: Coordinate) -> list[Coordinate]:
    """Enumerates every coordinate of ``shape`` in row-major order."""
    coords: list[Coordinate] = [()]
    for extent in shape:
        coords = [(*prefix, i) for prefix in coords for i in range(extent)]
    return coords


def from_python(obj: Any) -> Value:  # noqa: PLR0911
    """
    Builds a value tree from plain Python data.

    Accepts the types the standard ``json`` module produces plus ``bytes``
    (as ``Binary``), ``Decimal`` and tuples. Values that are already tree
    nodes pass through unchanged.
    """
    if isinstance(obj, VALUE_TYPES):
        return obj
    if obj is None:
        return Null()
    if isinstance(obj, bool):
        return Bool(obj)
    if isinstance(obj, int | float | Decimal):
        return Number(obj)
    if isinstance(obj, str):
        return String(obj)
    if isinstance(obj, bytes | bytearray):
        return Binary(bytes(obj))
    if isinstance(obj, list | tuple):
        return Array([from_python(item) for item in obj])
    if isinstance(obj, dict):
        fields: dict[str, Value] = {}
        for key, item in obj.items():
            if not isinstance(key, str):
                msg = f"keys must be strings, not {type(key).__name__}"
                raise TypeError(msg)
            fields[key] = from_python(item)
        return Object(fields)
    msg = f"Object of type {type(obj).__name__} is not JSON serializable"
    raise TypeError(msg)


def to_python(value: Value) -> Any:
    """Converts a value tree back to plain Python data."""
    match value:
        case Null():
            return None
        case Bool(value=flag):
            return flag
        case Number(value=number):
            return number
        case String(value=text):
            return text
        case Binary(data=data):
            return data
        case Array(items=items):
            return [to_python(item) for item in items]
        case Object(fields=fields):
            return {key: to_python(item) for key, item in fields.items()}
        case Matrix():
            return _matrix_to_python(value, ())
        case _:
            raise TypeError(f"not a value tree node: {type(value).__name__}")


def _matrix_to_python(matrix: Matrix, prefix: Coordinate) -> list[Any]:
    depth = len(prefix)
    extent = matrix.shape[depth]
    if depth == matrix.rank - 1:
        return [
            None if cell is None else to_python(cell)
            for cell in (matrix.cell((*prefix, i)) for i in range(extent))
        ]
    return [_matrix_to_python(matrix, (*prefix, i)) for i in range(extent)]


__all__ = [
    "VALUE_TYPES",
    "Array",
    "Binary",
    "Bool",
    "Matrix",
    "Null",
    "Number",
    "Object",
    "String",
    "Value",
    "from_python",
    "to_python",
]
