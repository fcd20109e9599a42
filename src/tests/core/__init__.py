"""Tests for flowgraph core modules."""
