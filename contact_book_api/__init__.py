"""
Top‑level package for the Contact Book API.

All functionality lives in submodules under ``app``; import the ASGI
application as ``contact_book_api.app.main:app``.
"""

__all__ = []
