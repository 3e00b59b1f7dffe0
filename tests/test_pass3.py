"""
JSON specification pass3 test from json.org test suite.

Validates parsing of nested object structure with proper
handling of string keys and values.
"""

import pathjson

# from https://json.org/JSON_checker/test/pass3.json
JSON = r"""
{
    "JSON Test Pattern pass3": {
        "The outermost value": "must be an object or array.",
        "In this test": "It is an object."
    }
}
"""


def test_parse() -> None:
    """
    Validates JSON parsing and round-trip generation for nested objects.

    Tests parser's ability to handle nested object structure with
    string keys and values, ensuring proper reconstruction.
    """
    res = pathjson.loads(JSON)

    out = pathjson.generate(res, pathjson.COMPACT)
    assert res == pathjson.loads(out)
    assert out == (
        '{"JSON Test Pattern pass3":{"The outermost value":'
        '"must be an object or array.","In this test":"It is an object."}}'
    )
