"""HTTP routers.  ``router`` aggregates the per-domain endpoint modules."""
