"""Tests for node classes."""
