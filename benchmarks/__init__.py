"""
Benchmark suite for jslice parsing performance.

Compares jslice against full-decoding JSON libraries including:
- Python standard library json
- orjson (C-optimized)
- ujson (ultra-fast JSON)

Measures parsing speed and memory usage across different document shapes.
"""
