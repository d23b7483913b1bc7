"""Kernel utilities shared across layers.

Rules:
- Kernel code must not import from handlers or the HTTP adapter.
- Keep it small and stable; no business logic here.
"""
