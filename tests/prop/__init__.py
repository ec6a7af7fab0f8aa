"""
Property-based tests for the 68000 decoder.

This package hosts Hypothesis strategies and the test entrypoints for both
the fast CI lane and the nightly fuzz job.
"""
