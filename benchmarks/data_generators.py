"""
Test data generators for pathjson benchmarks.

Every generator draws from its own seeded ``random.Random`` so repeated runs
time identical documents. Besides JSON text, ``generate_paths`` produces path
strings addressing real locations of a generated document.
"""

import json
import random
import string
from typing import Any

_SEED = 20240115
_ESCAPES = ['\\"', "\\\\", "\\/", "\\b", "\\f", "\\n", "\\r", "\\t", "\\u00e9"]
_ESCAPE_PROBABILITY = 0.3

DATA_TYPES = [
    "small_object",
    "large_object",
    "mixed_array",
    "nested_structure",
    "string_heavy",
]


def generate_test_data(data_type: str) -> str:
    """Generates JSON text of the named shape."""
    generators = {
        "small_object": _small_object,
        "large_object": _large_object,
        "mixed_array": _mixed_array,
        "nested_structure": _nested_structure,
        "string_heavy": _string_heavy,
    }

    if data_type not in generators:
        raise ValueError(f"Unknown data type: {data_type}")

    return generators[data_type](random.Random(_SEED))


def generate_paths(count: int = 200) -> list[str]:
    """
    Returns paths into the ``large_object`` document.

    Every path resolves, so query benchmarks time successful lookups only.
    """
    rng = random.Random(_SEED + 1)
    paths = []
    for _ in range(count):
        match rng.randint(0, 3):
            case 0:
                paths.append(f"accounts[{rng.randrange(50)}].balance")
            case 1:
                paths.append(f"accounts[{rng.randrange(50)}].tags[-1]")
            case 2:
                paths.append(f"events[{-rng.randrange(1, 31)}].source.ip")
            case _:
                paths.append("profile.address.city")
    return paths


def _small_object(rng: random.Random) -> str:
    data = {
        "id": rng.randint(1, 99999),
        "name": _word(rng, 12),
        "active": True,
        "ratio": round(rng.random(), 4),
        "tags": [_word(rng, 5) for _ in range(3)],
        "meta": {"created": "2024-01-15T10:30:00Z", "source": "api"},
    }
    return json.dumps(data)


def _large_object(rng: random.Random) -> str:
    data = {
        "profile": {
            "name": _word(rng, 10),
            "address": {"city": _word(rng, 8), "zip": f"{rng.randint(10000, 99999)}"},
        },
        "accounts": [
            {
                "id": f"acct_{i:05d}",
                "balance": round(rng.uniform(-500.0, 5000.0), 2),
                "currency": rng.choice(["USD", "EUR", "GBP", "JPY"]),
                "tags": [_word(rng, 6) for _ in range(rng.randint(1, 4))],
            }
            for i in range(50)
        ],
        "events": [
            {
                "at": f"2024-{rng.randint(1, 12):02d}-{rng.randint(1, 28):02d}",
                "kind": rng.choice(["login", "logout", "purchase", "view"]),
                "source": {
                    "ip": ".".join(str(rng.randint(1, 255)) for _ in range(4)),
                    "agent": f"Mozilla/5.0 ({_word(rng, 16)})",
                },
            }
            for _ in range(30)
        ],
    }
    return json.dumps(data)


def _mixed_array(rng: random.Random) -> str:
    makers = [
        lambda: rng.randint(-1000, 1000),
        lambda: round(rng.uniform(-100.0, 100.0), 3),
        lambda: _word(rng, rng.randint(5, 30)),
        lambda: rng.choice([True, False]),
        lambda: None,
        lambda: {"value": _word(rng, 10), "score": rng.randint(0, 100)},
    ]
    array: list[Any] = [rng.choice(makers)() for _ in range(200)]
    return json.dumps(array)


def _nested_structure(rng: random.Random) -> str:
    def level(depth: int) -> dict[str, Any]:
        if depth <= 0:
            return {"leaf": _word(rng, 10)}
        return {
            "depth": depth,
            "children": [level(depth - 1) for _ in range(3)],
            "next": level(depth - 1),
        }

    return json.dumps(level(7))


def _string_heavy(rng: random.Random) -> str:
    def escaped() -> str:
        return "".join(
            rng.choice(_ESCAPES)
            if rng.random() < _ESCAPE_PROBABILITY
            else rng.choice(string.ascii_letters + " ")
            for _ in range(50)
        )

    # Build the text directly so the escapes reach the parser undecoded
    strings = ",".join(f'"{escaped()}"' for _ in range(100))
    fields = ",".join(f'"key_{i}\\n": "{escaped()}"' for i in range(20))
    return f'{{"strings": [{strings}], "fields": {{{fields}}}}}'


def _word(rng: random.Random, length: int) -> str:
    return "".join(rng.choices(string.ascii_letters, k=length))
