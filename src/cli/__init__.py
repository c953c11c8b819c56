"""Command-line interface for entity operations."""
