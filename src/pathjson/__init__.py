"""
JSON parsing and generation over a typed value tree, with path queries.

``parse`` and ``generate`` convert between JSON text and a tree of ``Value``
nodes; ``get``, ``upsert`` and ``delete`` read and mutate deep locations of
that tree from compact path strings such as ``users[0].tags[-1]``. These core
operations return result records instead of raising. ``loads``, ``dumps``,
``minify`` and friends wrap them in the familiar exception-raising style.
"""

from typing import IO
from typing import Any

from . import _base64
from ._profiling import HotPathStats
from ._profiling import ProfileContext
from ._profiling import clear_hot_path_stats
from ._profiling import get_hot_path_stats
from ._profiling import log_hot_path_stats
from ._source import Source
from ._source import read_source
from .errors import ErrorKind
from .errors import JSONDecodeError
from .errors import ParseResult
from .errors import PathError
from .errors import PathResult
from .generator import COMPACT
from .generator import PRETTY
from .generator import GenerateOptions
from .generator import generate
from .parser import JsonParser
from .parser import JsonScanner
from .parser import ParseConfig
from .parser import parse
from .path import DELETE
from .path import Index
from .path import Key
from .path import MultiIndex
from .path import PathToken
from .path import delete
from .path import format_path
from .path import get
from .path import tokenize
from .path import upsert
from .value import Array
from .value import Binary
from .value import Bool
from .value import Matrix
from .value import Null
from .value import Number
from .value import Object
from .value import String
from .value import Value
from .value import from_python
from .value import to_python

__version__ = "0.1.0"

_WHITESPACE = " \t\n\r"


def loads(s: str, **kwargs: Any) -> Value:
    """
    Parses a complete JSON document into a value tree.

    Raises ``JSONDecodeError`` on malformed input or trailing data.
    """
    if not isinstance(s, str):
        raise TypeError(
            f"the JSON object must be str, not {type(s).__name__}"
        )
    if s.startswith("\ufeff"):
        raise JSONDecodeError(
            "JSON input should not contain BOM (Byte Order Mark)",
            s,
            0,
            ErrorKind.NOT_JSON_SYNTAX,
        )

    config = ParseConfig(**kwargs)
    result = parse(s, use_decimal=config.use_decimal)
    value = result.unwrap()

    end = result.offset
    while end < len(s) and s[end] in _WHITESPACE:
        end += 1
    if end < len(s):
        raise JSONDecodeError("Extra data", s, end, ErrorKind.EXTRA_DATA)
    return value


def load(fp: IO[str], **kwargs: Any) -> Value:
    """Parses JSON from a file-like object."""
    if not hasattr(fp, "read"):
        raise TypeError("fp must have a read() method")

    return loads(fp.read(), **kwargs)


def dumps(
    obj: Any, options: GenerateOptions | None = None, **kwargs: Any
) -> str:
    """
    Serializes a value tree, or plain Python data, to JSON text.

    Formatting comes from ``options`` or, when omitted, from keyword
    arguments naming ``GenerateOptions`` fields.
    """
    if options is None:
        options = GenerateOptions(**kwargs)
    elif kwargs:
        raise TypeError("pass either options or formatting keywords, not both")
    return generate(from_python(obj), options)


def dump(
    obj: Any, fp: IO[str], options: GenerateOptions | None = None, **kwargs: Any
) -> None:
    """Serializes to a file-like object."""
    if not hasattr(fp, "write"):
        raise TypeError("fp must have a write() method")

    fp.write(dumps(obj, options, **kwargs))


def minify(source: Source) -> str:
    """Rewrites JSON text, a JSON file or stream without any whitespace."""
    return generate(loads(read_source(source)), COMPACT)


def unminify(source: Source) -> str:
    """Rewrites JSON text, a JSON file or stream in the pretty layout."""
    return generate(loads(read_source(source)), PRETTY)


def binary_from_string(value: String, url_safe: bool = False) -> Binary:
    """Extracts the bytes of a base64 string written for a ``Binary`` value."""
    return Binary(_base64.decode(value.value, url_safe))


__all__ = [
    "COMPACT",
    "DELETE",
    "PRETTY",
    "Array",
    "Binary",
    "Bool",
    "ErrorKind",
    "GenerateOptions",
    "HotPathStats",
    "Index",
    "JSONDecodeError",
    "JsonParser",
    "JsonScanner",
    "Key",
    "Matrix",
    "MultiIndex",
    "Null",
    "Number",
    "Object",
    "ParseConfig",
    "ParseResult",
    "PathError",
    "PathResult",
    "PathToken",
    "ProfileContext",
    "String",
    "Value",
    "binary_from_string",
    "clear_hot_path_stats",
    "delete",
    "dump",
    "dumps",
    "format_path",
    "from_python",
    "generate",
    "get",
    "get_hot_path_stats",
    "load",
    "loads",
    "log_hot_path_stats",
    "minify",
    "parse",
    "to_python",
    "tokenize",
    "unminify",
    "upsert",
]
