"""
Top-level package for the Bazaar Ramadhan API.

All functionality lives in submodules under ``app``; run the server
with ``uvicorn bazaar_api.app.main:app``.
"""

__all__ = []
