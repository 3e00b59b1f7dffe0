"""Conversion between JSON string literal bodies and native strings."""

import re

from ._profiling import ProfileContext

_ENCODE_MAP = {
    "\\": "\\\\",
    "\b": "\\b",
    "\f": "\\f",
    "\n": "\\n",
    "\r": "\\r",
    "\t": "\\t",
    '"': '\\"',
}
_NEEDS_ENCODING = re.compile(r'[\x00-\x1f\\"]')

_DECODE_MAP = {
    '"': '"',
    "\\": "\\",
    "/": "/",
    "b": "\b",
    "f": "\f",
    "n": "\n",
    "r": "\r",
    "t": "\t",
}
# A backslash and whatever it escapes, consumed as one unit so that the
# character after an escaped backslash is never taken as an escape itself.
# An escaped high surrogate directly followed by an escaped low surrogate is
# matched as a single pair.
_ESCAPE = re.compile(
    r"\\(u[dD][89abAB][0-9a-fA-F]{2}\\u[dD][c-fC-F][0-9a-fA-F]{2}"
    r"|u[0-9a-fA-F]{4}|.?)",
    re.DOTALL,
)
_SURROGATE_PAIR_LENGTH = 11
_UNICODE_HEX_DIGITS = 4


def encode_string(s: str) -> str:
    """
    Escapes a native string for use between JSON double quotes.

    Strings without characters that need escaping are returned as-is.
    """
    if _NEEDS_ENCODING.search(s) is None:
        return s
    with ProfileContext("encode_string", len(s)):
        return _NEEDS_ENCODING.sub(_encode_char, s)


def _encode_char(match: re.Match[str]) -> str:
    char = match.group()
    escaped = _ENCODE_MAP.get(char)
    if escaped is None:
        return f"\\u{ord(char):04x}"
    return escaped


def decode_string(s: str) -> str:
    """
    Resolves the escape sequences of a JSON string body.

    A ``\\uXXXX`` high surrogate directly followed by a ``\\uXXXX`` low
    surrogate combines into a single code point; any other ``\\u`` escape maps
    to exactly one code unit. Characters that were not escaped are never
    combined. Raises ``ValueError`` on an unknown or truncated escape.
    """
    if "\\" not in s:
        return s
    with ProfileContext("decode_string", len(s)):
        return _ESCAPE.sub(lambda m: _decode_escape(m, s), s)


def _decode_escape(match: re.Match[str], s: str) -> str:
    body = match.group(1)
    if body in _DECODE_MAP:
        return _DECODE_MAP[body]
    if len(body) == _SURROGATE_PAIR_LENGTH:
        high = int(body[1:5], 16)
        low = int(body[7:], 16)
        return chr(0x10000 + ((high - 0xD800) << 10) + (low - 0xDC00))
    if body.startswith("u") and len(body) == _UNICODE_HEX_DIGITS + 1:
        return chr(int(body[1:], 16))
    if body.startswith("u"):
        raise ValueError(
            f"Incomplete unicode escape sequence at {match.start()}: {s!r}"
        )
    raise ValueError(f"Invalid escape sequence: \\{body}")
