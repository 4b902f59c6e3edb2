"""Per-domain endpoint modules, each exposing a ``router``."""
