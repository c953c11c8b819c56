"""Shared configuration, errors, types, and logging."""
