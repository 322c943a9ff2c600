"""Exhaustive partition search engine.

Sub-modules:
- combinations – fixed-size subset enumeration
- partitions   – canonical (symmetry-reduced) team partitions
- scoring      – pairwise conflict scoring
- optimizer    – search driver with bounded best-set and cancellation
"""
