"""Base node implementations."""
