"""
Application package.

``core`` holds configuration, logging, the SQLite‑backed record store
and the identity adapter; ``services`` the contact business rules;
``schemas`` the Pydantic DTOs; ``api`` the versioned HTTP routes.
``main.create_app`` wires them together.
"""
