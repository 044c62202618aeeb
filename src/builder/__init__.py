"""In-memory archive consistency cache.

This package validates archive content as it is added: duplicate GUIDs,
duplicate type names, and malformed type names are rejected before the
store persists anything. It also serves type lookups by name.
"""
