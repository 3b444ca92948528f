"""
Test suite for the time-zone evaluation engine

Contains:
- tests/unit/          : Unit tests for individual modules
"""
