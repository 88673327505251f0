"""Core cleaning, alignment, and intermediate representation modules.

WHY: The core package is the algorithmic heart of the aligner: the IR
dataclasses, timestamp arithmetic, the caption cleaner and the segment
aligner. Formatters and the CLI are thin layers over it.

HOW: ir.py defines the data structures, timecode.py converts between
milliseconds and SubRip timestamps, cleaner.py removes noise from raw
caption files, aligner.py parses cues and times sentences, grouping.py
sits at the boundary with the external sentence-grouping service.

RULES:
- IR dataclasses are the contract; change with care
- No file I/O anywhere in this package
- Malformed input degrades to a best-effort result, never an exception
  (grouping.py is the one boundary allowed to reject unusable payloads)
"""
