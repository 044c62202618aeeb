"""Storage layer for open metadata archives.

This package persists archive headers, type definitions, and instances as
one JSON file per element and serves them back through lazy views.
"""
