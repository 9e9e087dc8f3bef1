"""Property-based tests using Hypothesis.

These tests use generative testing to explore edge cases:
- Cursor pagination over arbitrary work sets and page sizes
- Wave dispatch concurrency ceilings
- Host rewriting with arbitrary paths, queries and fragments

To run property tests:
    pytest tests/property/ -v --hypothesis-show-statistics

Requires:
    hypothesis>=6.100.0
"""
