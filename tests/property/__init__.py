# tests/property/__init__.py
"""Property-based tests for aggfuncs.

Property-based testing validates invariants that must hold for ALL inputs,
not just the specific examples we think of.

Test categories:
- functions/: Sweep vs brute force, merge order, calendar agreement
- engine/: Fan-out and NULL-filtering invariance
"""
