"""
Utility modules for the shift scheduler application.

This package contains shared utility functions and helpers used across
the application, including datetime utilities, validation helpers, and
locking helpers.
"""
