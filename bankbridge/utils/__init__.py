"""Process-level helpers (logging setup)."""
