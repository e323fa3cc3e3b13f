"""
Benchmark suite for toonfmt transcoding performance.

Compares TOON encoding and decoding against JSON libraries on the same
values:
- Python standard library json
- orjson (C-optimized)
- ujson (ultra-fast JSON)

Measures speed, peak memory, and how much smaller TOON output is.
"""
