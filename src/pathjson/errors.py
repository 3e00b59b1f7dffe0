"""
Failure kinds, result records and the exceptions of the convenience layer.

Core operations never raise: they return a ``ParseResult`` or ``PathResult``
whose ``error`` names what went wrong and whose ``offset`` says where. The
exception classes exist for callers that prefer the ``loads``/``dumps`` style.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any

type Position = int


class ErrorKind(Enum):
    """
    Distinct failure kinds reported by the parser and the path engines.
    """

    # Parser
    NOT_JSON_SYNTAX = "not JSON syntax"
    MALFORMED_KEY = "malformed object key"
    INVALID_VALUE = "invalid value"
    MISSING_DELIMITER = "missing delimiter or closing bracket"
    EXTRA_DATA = "extra data"

    # Path engines
    MALFORMED_PATH = "malformed path pattern"
    NOT_AN_OBJECT = "not an object"
    MISSING_KEY = "missing key"
    NOT_AN_ARRAY = "not an array"
    INDEX_OUT_OF_RANGE = "index out of range"
    DIMENSIONALITY_MISMATCH = "dimensionality mismatch"
    UNSUPPORTED_DIMENSIONALITY = "unsupported dimensionality"
    INVALID_INDEX = "invalid array index"


class JSONDecodeError(ValueError):
    """
    Handles JSON parsing failures with precise position and context information.

    Error state containing position, line/column numbers, and the failure
    kind to help users identify and fix JSON syntax issues.
    """

    def __init__(
        self,
        msg: str,
        doc: str = "",
        pos: Position = 0,
        kind: ErrorKind = ErrorKind.NOT_JSON_SYNTAX,
    ) -> None:
        if not isinstance(msg, str):
            raise TypeError("msg must be a string")
        if not isinstance(pos, int) or pos < 0:
            raise ValueError("pos must be a non-negative integer")

        self.msg = msg
        self.doc = doc
        self.pos = pos
        self.kind = kind

        # Compute line and column numbers from position
        self.lineno = doc.count("\n", 0, pos) + 1 if doc else 1
        self.colno = pos - doc.rfind("\n", 0, pos) if doc else pos + 1

        super().__init__(f"{msg} at line {self.lineno}, column {self.colno}")


class PathError(LookupError):
    """
    Raised by ``PathResult.unwrap`` when a path query or mutation failed.

    ``position`` is an offset into the path text for malformed paths and the
    index of the failing token otherwise.
    """

    def __init__(self, kind: ErrorKind, path: str = "", position: Position = 0):
        self.kind = kind
        self.path = path
        self.position = position
        super().__init__(f"{kind.value} at path position {position}: {path!r}")


@dataclass(frozen=True)
class ParseResult:
    """
    Outcome of ``parse``: the value and the offset after it, or a failure.
    """

    value: Any = None
    offset: Position = 0
    error: ErrorKind | None = None
    doc: str = ""

    @property
    def ok(self) -> bool:
        return self.error is None

    def unwrap(self) -> Any:
        """Returns the parsed value or raises ``JSONDecodeError``."""
        if self.error is not None:
            raise JSONDecodeError(
                _capitalize(self.error.value), self.doc, self.offset, self.error
            )
        return self.value


@dataclass(frozen=True)
class PathResult[T]:
    """
    Outcome of ``tokenize``, ``get`` and ``upsert``.
    """

    value: T | None = None
    error: ErrorKind | None = None
    offset: Position = 0
    path: str = ""

    @property
    def ok(self) -> bool:
        return self.error is None

    def unwrap(self) -> T | None:
        """Returns the value or raises ``PathError``."""
        if self.error is not None:
            raise PathError(self.error, self.path, self.offset)
        return self.value


def _capitalize(text: str) -> str:
    return text[:1].upper() + text[1:]


__all__ = [
    "ErrorKind",
    "JSONDecodeError",
    "ParseResult",
    "PathError",
    "PathResult",
    "Position",
]
