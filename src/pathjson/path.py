"""
Path expressions for reading and mutating deep locations of a value tree.

A path is a sequence of segments: ``name`` selects an object field, ``[n]`` an
array element (negative ``n`` counts from the end) and ``[i,j]``/``[i,j,k]``
a matrix cell. Key segments are separated by ``.``; bracket segments may
follow any segment directly, as in ``users[0].tags[-1]``. A backslash makes
the next character part of the key, so ``a\\.b`` names the single key
``a.b``.

The path is tokenized once per operation and the resulting tuple is shared,
read-only, by every level of the traversal.
"""

import logging
from collections.abc import Sequence
from dataclasses import dataclass

from ._profiling import ProfileContext
from .errors import ErrorKind
from .errors import PathResult
from .errors import Position
from .value import MAX_MATRIX_RANK
from .value import VALUE_TYPES
from .value import Array
from .value import Coordinate
from .value import Matrix
from .value import Null
from .value import Object
from .value import Value

logger = logging.getLogger(__name__)

_METACHARACTERS = ".[]"
_DIGITS = "0123456789"


@dataclass(frozen=True)
class Key:
    name: str


@dataclass(frozen=True)
class Index:
    index: int


@dataclass(frozen=True)
class MultiIndex:
    indices: tuple[int, ...]


type PathToken = Key | Index | MultiIndex
type PathLike = str | Sequence[PathToken]


class _Delete:
    """Type of ``DELETE``: passed to ``upsert`` in place of a value."""

    _instance: "_Delete | None" = None

    def __new__(cls) -> "_Delete":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "DELETE"


DELETE = _Delete()


class _PathFailure(Exception):
    """Unwinds a traversal with the failure kind and position."""

    def __init__(self, kind: ErrorKind, position: Position) -> None:
        super().__init__(kind.value)
        self.kind = kind
        self.position = position


# ---------------------------------------------------------------------------
# Tokenizer


class PathScanner:
    """Cursor-based scanner turning path text into tokens."""

    def __init__(self, path: str):
        self.path = path
        self.pos = 0
        self.length = len(path)

    def peek(self) -> str:
        return self.path[self.pos] if self.pos < self.length else ""

    def tokens(self) -> tuple[PathToken, ...]:
        tokens: list[PathToken] = []
        if not self.path:
            return ()

        expect_key = True
        while self.pos < self.length:
            char = self.peek()
            if char == "[":
                tokens.append(self.scan_brackets())
                expect_key = False
            elif char == "." and tokens and not expect_key:
                self.pos += 1
                expect_key = True
                if self.pos == self.length:
                    raise _PathFailure(ErrorKind.MALFORMED_PATH, self.pos)
            elif expect_key:
                tokens.append(self.scan_key())
                expect_key = False
            else:
                raise _PathFailure(ErrorKind.MALFORMED_PATH, self.pos)
        return tuple(tokens)

    def scan_key(self) -> Key:
        """Scans key text up to the next unescaped metacharacter."""
        start = self.pos
        chars: list[str] = []
        while self.pos < self.length:
            char = self.path[self.pos]
            if char == "\\":
                if self.pos + 1 >= self.length:
                    raise _PathFailure(ErrorKind.MALFORMED_PATH, self.pos)
                chars.append(self.path[self.pos + 1])
                self.pos += 2
            elif char in _METACHARACTERS:
                break
            else:
                chars.append(char)
                self.pos += 1
        if self.pos == start:
            raise _PathFailure(ErrorKind.MALFORMED_PATH, self.pos)
        return Key("".join(chars))

    def scan_brackets(self) -> Index | MultiIndex:
        """Scans ``[n]`` or ``[n,m,...]``."""
        self.pos += 1
        indices = [self._scan_int()]
        while self.peek() == ",":
            self.pos += 1
            indices.append(self._scan_int())
        if self.peek() != "]":
            raise _PathFailure(ErrorKind.MALFORMED_PATH, self.pos)
        self.pos += 1
        if len(indices) == 1:
            return Index(indices[0])
        return MultiIndex(tuple(indices))

    def _scan_int(self) -> int:
        start = self.pos
        if self.peek() == "-":
            self.pos += 1
        digits_start = self.pos
        while self.pos < self.length and self.path[self.pos] in _DIGITS:
            self.pos += 1
        if self.pos == digits_start:
            raise _PathFailure(ErrorKind.MALFORMED_PATH, self.pos)
        return int(self.path[start : self.pos])


def tokenize(path: str) -> PathResult[tuple[PathToken, ...]]:
    """
    Splits path text into tokens.

    The empty path yields no tokens and addresses the root. A malformed path
    fails with ``MALFORMED_PATH`` at the offending offset.
    """
    with ProfileContext("tokenize", len(path)):
        try:
            tokens = PathScanner(path).tokens()
        except _PathFailure as failure:
            return PathResult(None, failure.kind, failure.position, path)
    return PathResult(tokens, None, 0, path)


def format_path(tokens: Sequence[PathToken]) -> str:
    """Renders tokens back to path text, escaping key metacharacters."""
    parts: list[str] = []
    for token in tokens:
        match token:
            case Key(name=name):
                escaped = "".join(
                    "\\" + c if c in _METACHARACTERS or c == "\\" else c
                    for c in name
                )
                parts.append(f".{escaped}" if parts else escaped)
            case Index(index=index):
                parts.append(f"[{index}]")
            case MultiIndex(indices=indices):
                parts.append("[" + ",".join(str(i) for i in indices) + "]")
    return "".join(parts)


def _resolve_tokens(
    path: PathLike,
) -> tuple[tuple[PathToken, ...] | None, PathResult]:
    if isinstance(path, str):
        result = tokenize(path)
        return result.value, result
    return tuple(path), PathResult(None, None, 0, format_path(path))


# ---------------------------------------------------------------------------
# Path-Get


def _read_index(index: int, length: int, position: Position) -> int:
    resolved = index + length if index < 0 else index
    if not 0 <= resolved < length:
        raise _PathFailure(ErrorKind.INDEX_OUT_OF_RANGE, position)
    return resolved


def _step(current: Value, token: PathToken, position: Position) -> Value:
    match token:
        case Key(name=name):
            if not isinstance(current, Object):
                raise _PathFailure(ErrorKind.NOT_AN_OBJECT, position)
            if name not in current.fields:
                raise _PathFailure(ErrorKind.MISSING_KEY, position)
            return current.fields[name]

        case Index(index=index):
            if isinstance(current, Matrix):
                raise _PathFailure(ErrorKind.DIMENSIONALITY_MISMATCH, position)
            if not isinstance(current, Array):
                raise _PathFailure(ErrorKind.NOT_AN_ARRAY, position)
            return current.items[_read_index(index, len(current.items), position)]

        case MultiIndex(indices=indices):
            if not isinstance(current, Array | Matrix):
                raise _PathFailure(ErrorKind.NOT_AN_ARRAY, position)
            if len(indices) > MAX_MATRIX_RANK:
                raise _PathFailure(ErrorKind.UNSUPPORTED_DIMENSIONALITY, position)
            if not isinstance(current, Matrix) or current.rank != len(indices):
                raise _PathFailure(ErrorKind.DIMENSIONALITY_MISMATCH, position)
            coordinate = tuple(
                _read_index(index, extent, position)
                for index, extent in zip(indices, current.shape, strict=True)
            )
            cell = current.cell(coordinate)
            return Null() if cell is None else cell

    raise TypeError(f"not a path token: {token!r}")


def get(tree: Value, path: PathLike) -> PathResult[Value]:
    """
    Reads the value at ``path``.

    ``path`` is path text or an already tokenized sequence. The walk stops at
    the first failure; the result's ``offset`` is then the index of the
    failing token (or, for malformed text, the offset into the text).
    """
    tokens, prepared = _resolve_tokens(path)
    if tokens is None:
        return prepared

    current = tree
    with ProfileContext("get", len(tokens)):
        for position, token in enumerate(tokens):
            try:
                current = _step(current, token, position)
            except _PathFailure as failure:
                return PathResult(
                    None, failure.kind, failure.position, prepared.path
                )
    return PathResult(current, None, 0, prepared.path)


# ---------------------------------------------------------------------------
# Path-Set/Delete


def _write_index(index: int, length: int, position: Position) -> int:
    """
    Resolves an index for assignment.

    ``-1`` appends after the current last element, ``n <= -2`` counts from
    the end so that ``-2`` is the current last element.
    """
    resolved = length + index + 1 if index < 0 else index
    if resolved < 0:
        raise _PathFailure(ErrorKind.INVALID_INDEX, position)
    return resolved


def _delete_index(index: int, length: int, position: Position) -> int:
    resolved = index + length if index < 0 else index
    if not 0 <= resolved < length:
        raise _PathFailure(ErrorKind.INVALID_INDEX, position)
    return resolved


class _Upsert:
    """
    One mutation: the shared token tuple plus the value or ``DELETE``.

    ``apply`` recurses with a cursor into the token tuple. Every level builds
    a new container from the node it was handed and returns it, so the
    caller's tree is never modified and a failure discards all work.
    """

    def __init__(self, tokens: tuple[PathToken, ...], value: "Value | _Delete"):
        self.tokens = tokens
        self.value = value
        self.deleting = value is DELETE

    def apply(self, node: Value | None, cursor: int) -> "Value | _Delete | None":
        if cursor == len(self.tokens):
            return self.value

        token = self.tokens[cursor]
        match token:
            case Key():
                return self._apply_key(node, token, cursor)
            case Index():
                return self._apply_index(node, token, cursor)
            case MultiIndex():
                return self._apply_cell(node, token, cursor)
        raise TypeError(f"not a path token: {token!r}")

    def _replace(self, node: Value | None, fresh: Value, cursor: int) -> Value:
        if node is not None:
            logger.debug(
                "Replacing %s with empty %s at path token %d",
                type(node).__name__,
                type(fresh).__name__,
                cursor,
            )
        return fresh

    def _apply_key(
        self, node: Value | None, token: Key, cursor: int
    ) -> Value | None:
        if isinstance(node, Object):
            fields = dict(node.fields)
        elif self.deleting:
            # Nothing to delete below a missing branch
            return node
        else:
            fields = self._replace(node, Object(), cursor).fields

        if self.deleting and token.name not in fields:
            return node

        child = self.apply(fields.get(token.name), cursor + 1)
        if child is DELETE:
            del fields[token.name]
        else:
            fields[token.name] = child
        return Object(fields)

    def _apply_index(self, node: Value | None, token: Index, cursor: int) -> Value:
        if isinstance(node, Array):
            items = list(node.items)
        elif self.deleting:
            raise _PathFailure(ErrorKind.INVALID_INDEX, cursor)
        else:
            items = self._replace(node, Array(), cursor).items

        previous: Value | None = None
        if self.deleting:
            index = _delete_index(token.index, len(items), cursor)
            previous = items[index]
        else:
            index = _write_index(token.index, len(items), cursor)
            if index < len(items):
                previous = items[index]
            else:
                # Pad so the resolved index exists; arrays never have holes
                items.extend(Null() for _ in range(index + 1 - len(items)))

        child = self.apply(previous, cursor + 1)
        if child is DELETE:
            del items[index]
        else:
            items[index] = child
        return Array(items)

    def _apply_cell(
        self, node: Value | None, token: MultiIndex, cursor: int
    ) -> Value:
        rank = len(token.indices)
        if rank > MAX_MATRIX_RANK:
            raise _PathFailure(ErrorKind.UNSUPPORTED_DIMENSIONALITY, cursor)

        if isinstance(node, Matrix) and node.rank == rank:
            matrix = Matrix(rank, node.shape, dict(node.cells))
        elif self.deleting:
            raise _PathFailure(ErrorKind.INVALID_INDEX, cursor)
        else:
            matrix = self._replace(node, Matrix(rank), cursor)

        coordinate: Coordinate
        if self.deleting:
            coordinate = tuple(
                _delete_index(index, extent, cursor)
                for index, extent in zip(token.indices, matrix.shape, strict=True)
            )
        else:
            coordinate = tuple(
                _write_index(index, extent, cursor)
                for index, extent in zip(token.indices, matrix.shape, strict=True)
            )
            matrix.shape = tuple(
                max(extent, i + 1)
                for extent, i in zip(matrix.shape, coordinate, strict=True)
            )

        child = self.apply(matrix.cell(coordinate), cursor + 1)
        if child is DELETE:
            matrix.cells.pop(coordinate, None)
        elif child is not None:
            matrix.cells[coordinate] = child
        return matrix


def upsert(
    tree: Value | None, path: PathLike, value: "Value | _Delete"
) -> PathResult[Value]:
    """
    Assigns ``value`` at ``path``, or removes the entry when given ``DELETE``.

    Missing containers along the path are created, and a node whose kind does
    not fit the next path segment is replaced by an empty container of the
    right kind. Array indices past the end pad the array with nulls; ``[-1]``
    appends. Deleting an array element shifts the following elements down.

    Returns the new tree. The tree passed in is left untouched. Deleting the
    root (empty path) yields a result whose value is None.
    """
    if value is not DELETE and not isinstance(value, VALUE_TYPES):
        raise TypeError(
            f"upsert needs a tree node or DELETE, not {type(value).__name__}"
        )
    tokens, prepared = _resolve_tokens(path)
    if tokens is None:
        return prepared

    with ProfileContext("upsert", len(tokens)):
        try:
            result = _Upsert(tokens, value).apply(tree, 0)
        except _PathFailure as failure:
            return PathResult(None, failure.kind, failure.position, prepared.path)
    if result is DELETE:
        result = None
    return PathResult(result, None, 0, prepared.path)


def delete(tree: Value | None, path: PathLike) -> PathResult[Value]:
    """Removes the entry at ``path``; shorthand for ``upsert(..., DELETE)``."""
    return upsert(tree, path, DELETE)


__all__ = [
    "DELETE",
    "Index",
    "Key",
    "MultiIndex",
    "PathScanner",
    "PathToken",
    "delete",
    "format_path",
    "get",
    "tokenize",
    "upsert",
]
