"""
Anchored recursive-descent JSON parser producing a value tree.

Every grammar alternative is chosen by the character at the current offset
after whitespace and must match starting exactly there; the scanner never
looks ahead past unmatched input, so parsing stays linear in the input size.
"""

import math
from dataclasses import dataclass
from decimal import Decimal

from ._escape import decode_string
from ._profiling import ProfileContext
from .errors import ErrorKind
from .errors import ParseResult
from .errors import Position
from .value import Array
from .value import Bool
from .value import Null
from .value import Number
from .value import Object
from .value import String
from .value import Value

_WHITESPACE = " \t\n\r"
_DIGITS = "0123456789"
_ESCAPABLE = '"\\/bfnrt'
_HEX_DIGITS = "0123456789abcdefABCDEF"
_UNICODE_HEX_DIGITS = 4
_CONTROL_LIMIT = 0x20
_KEYWORDS: dict[str, Value] = {
    "null": Null(),
    "true": Bool(True),
    "false": Bool(False),
}


@dataclass(frozen=True)
class ParseConfig:
    """
    Configures JSON parsing behavior with immutable settings.
    """

    use_decimal: bool = False

    def __post_init__(self) -> None:
        if not isinstance(self.use_decimal, bool):
            raise TypeError("use_decimal must be a boolean")


class _Mismatch(Exception):
    """Unwinds the recursive descent to ``parse`` with the failing offset."""

    def __init__(self, kind: ErrorKind, pos: Position) -> None:
        super().__init__(kind.value)
        self.kind = kind
        self.pos = pos


class JsonScanner:
    """
    Cursor over JSON text with anchored sub-grammar matchers.

    Each ``scan_*`` method either matches at the current position and advances
    past the match, or returns None and leaves the position untouched.
    """

    def __init__(self, text: str, pos: Position = 0):
        self.text = text
        self.pos = pos
        self.length = len(text)

    def peek(self) -> str:
        """Returns current character without advancing."""
        return self.text[self.pos] if self.pos < self.length else ""

    def skip_whitespace(self) -> None:
        """Skips whitespace characters according to JSON spec."""
        while self.pos < self.length and self.text[self.pos] in _WHITESPACE:
            self.pos += 1

    def consume(self, char: str) -> bool:
        """Advances past ``char`` if it is the current character."""
        if self.peek() == char:
            self.pos += 1
            return True
        return False

    def scan_string(self) -> str | None:
        """Scans a quoted JSON string and returns its decoded content."""
        with ProfileContext("scan_string"):
            text = self.text
            start = self.pos
            if self.peek() != '"':
                return None

            i = start + 1
            has_escape = False
            while i < self.length:
                char = text[i]
                if char == '"':
                    break
                if char == "\\":
                    width = self._escape_width(i)
                    if width == 0:
                        return None
                    has_escape = True
                    i += width
                elif ord(char) < _CONTROL_LIMIT:
                    return None
                else:
                    i += 1
            else:
                return None

            self.pos = i + 1
            raw = text[start + 1 : i]
            # Fast path: a span without escapes is already the native string
            if not has_escape:
                return raw
            return decode_string(raw)

    def _escape_width(self, i: Position) -> int:
        """Returns the length of the escape sequence at ``i``, 0 if invalid."""
        nxt = self.text[i + 1 : i + 2]
        if nxt == "u":
            digits = self.text[i + 2 : i + 2 + _UNICODE_HEX_DIGITS]
            if len(digits) == _UNICODE_HEX_DIGITS and all(
                c in _HEX_DIGITS for c in digits
            ):
                return 2 + _UNICODE_HEX_DIGITS
            return 0
        if nxt and nxt in _ESCAPABLE:
            return 2
        return 0

    def _scan_digits(self, i: Position) -> Position:
        while i < self.length and self.text[i] in _DIGITS:
            i += 1
        return i

    def scan_number(self) -> str | None:
        """Scans a JSON number literal and returns its text."""
        with ProfileContext("scan_number"):
            text = self.text
            start = i = self.pos
            if text.startswith("-", i):
                i += 1

            # Integer part: no leading zero unless the integer is exactly 0
            if text.startswith("0", i):
                i += 1
            else:
                end = self._scan_digits(i)
                if end == i:
                    return None
                i = end

            # Fractional part
            if text.startswith(".", i):
                end = self._scan_digits(i + 1)
                if end == i + 1:
                    return None
                i = end

            # Exponent part
            if i < self.length and text[i] in "eE":
                j = i + 1
                if j < self.length and text[j] in "+-":
                    j += 1
                end = self._scan_digits(j)
                if end == j:
                    return None
                i = end

            self.pos = i
            return text[start:i]

    def scan_keyword(self) -> str | None:
        """Scans literal tokens: true, false, null, matched as whole words."""
        for word in _KEYWORDS:
            end = self.pos + len(word)
            if self.text.startswith(word, self.pos) and not _is_word_char(
                self.text[end : end + 1]
            ):
                self.pos = end
                return word
        return None


def _is_word_char(char: str) -> bool:
    return char.isalnum() or char == "_"


class JsonParser:
    """
    Recursive descent over a ``JsonScanner``.

    Failures raise ``_Mismatch``; ``parse`` turns that into a result so the
    public contract never raises.
    """

    def __init__(self, scanner: JsonScanner, config: ParseConfig):
        self.scanner = scanner
        self.config = config

    def _fail(self, kind: ErrorKind, pos: Position | None = None) -> _Mismatch:
        return _Mismatch(kind, self.scanner.pos if pos is None else pos)

    def parse_value(
        self, on_mismatch: ErrorKind = ErrorKind.NOT_JSON_SYNTAX
    ) -> Value:
        """
        Parses the value starting at the current offset.

        ``on_mismatch`` is the kind reported when no alternative matches here;
        errors raised from inside a nested container propagate unchanged.
        A missing container value (``INVALID_VALUE``) is reported at the
        offset right after the preceding ``:``, ``[`` or ``,``; a top-level
        mismatch at the first non-whitespace character.
        """
        scanner = self.scanner
        anchor = scanner.pos
        scanner.skip_whitespace()
        if on_mismatch is not ErrorKind.INVALID_VALUE:
            anchor = scanner.pos
        char = scanner.peek()

        if char == "{":
            return self.parse_object()
        if char == "[":
            return self.parse_array()
        if char == '"':
            text = scanner.scan_string()
            if text is None:
                raise self._fail(on_mismatch, anchor)
            return String(text)
        if char == "-" or (char and char in _DIGITS):
            literal = scanner.scan_number()
            if literal is None:
                raise self._fail(on_mismatch, anchor)
            return self._parse_number(literal)
        if char and char in "tfn":
            word = scanner.scan_keyword()
            if word is not None:
                return _KEYWORDS[word]
        raise self._fail(on_mismatch, anchor)

    def _parse_number(self, literal: str) -> Number:
        """
        Converts a scanned literal, keeping every valid literal representable.

        Literals whose float overflows to infinity, and integers beyond the
        interpreter's digit limit, are held as ``Decimal``.
        """
        with ProfileContext("parse_number", len(literal)):
            if "." in literal or "e" in literal or "E" in literal:
                if self.config.use_decimal:
                    return Number(Decimal(literal))
                number = float(literal)
                if math.isinf(number):
                    return Number(Decimal(literal))
                return Number(number)
            try:
                return Number(int(literal))
            except ValueError:
                return Number(Decimal(literal))

    def parse_object(self) -> Object:
        """Parses JSON object; the last occurrence of a duplicate key wins."""
        with ProfileContext("parse_object"):
            scanner = self.scanner
            scanner.consume("{")
            scanner.skip_whitespace()
            if scanner.consume("}"):
                return Object()

            fields: dict[str, Value] = {}
            while True:
                scanner.skip_whitespace()
                key = scanner.scan_string()
                if key is None:
                    raise self._fail(ErrorKind.MALFORMED_KEY)

                scanner.skip_whitespace()
                if not scanner.consume(":"):
                    raise self._fail(ErrorKind.MISSING_DELIMITER)

                fields[key] = self.parse_value(ErrorKind.INVALID_VALUE)

                scanner.skip_whitespace()
                if scanner.consume(","):
                    continue
                if scanner.consume("}"):
                    return Object(fields)
                raise self._fail(ErrorKind.MISSING_DELIMITER)

    def parse_array(self) -> Array:
        """Parses JSON array."""
        with ProfileContext("parse_array"):
            scanner = self.scanner
            scanner.consume("[")
            opened = scanner.pos
            scanner.skip_whitespace()
            if scanner.consume("]"):
                return Array()
            scanner.pos = opened

            items: list[Value] = []
            while True:
                items.append(self.parse_value(ErrorKind.INVALID_VALUE))

                scanner.skip_whitespace()
                if scanner.consume(","):
                    continue
                if scanner.consume("]"):
                    return Array(items)
                raise self._fail(ErrorKind.MISSING_DELIMITER)


def parse(
    text: str,
    start_offset: Position = 0,
    *,
    use_decimal: bool = False,
) -> ParseResult:
    """
    Parses one JSON value starting at ``start_offset``.

    On success the result holds the value and the offset just past it; input
    after that offset is not examined. On failure it holds the error kind and
    the offset where the failure occurred.
    """
    if not isinstance(text, str):
        raise TypeError(
            f"the JSON object must be str, not {type(text).__name__}"
        )
    if not 0 <= start_offset <= len(text):
        raise ValueError(
            f"start_offset {start_offset} outside the text of length {len(text)}"
        )
    config = ParseConfig(use_decimal=use_decimal)
    scanner = JsonScanner(text, start_offset)
    parser = JsonParser(scanner, config)
    with ProfileContext("parse", len(text) - start_offset):
        try:
            value = parser.parse_value()
        except _Mismatch as failure:
            return ParseResult(None, failure.pos, failure.kind, text)
    return ParseResult(value, scanner.pos, None, text)


__all__ = [
    "JsonParser",
    "JsonScanner",
    "ParseConfig",
    "parse",
]
