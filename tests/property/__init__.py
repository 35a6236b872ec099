# tests/property/__init__.py
"""Property-based tests for sluice.

These check invariants that must hold for every input the strategies can
generate: gate bookkeeping under arbitrary interleavings and the algebra of
schema compatibility.
"""
