"""
Benchmark suite for jspan scan-in-place extraction.

Compares reading single values out of JSON text without building a document
against parsing the whole text and indexing the result with:
- Python standard library json
- orjson (C-optimized)
- ujson (ultra-fast JSON)

Measures extraction speed and memory usage across different document shapes.
"""
