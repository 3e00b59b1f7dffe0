"""
Benchmark suite for pathjson.

Compares parsing and generation against the standard library json, orjson
and ujson, and times path queries and mutations on generated documents.
Run explicitly with ``pytest benchmarks``.
"""
