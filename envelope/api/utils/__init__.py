"""Utility modules for API-specific functionality.

- **responses**: Buffered sink and Starlette response helpers for envelopes
"""
