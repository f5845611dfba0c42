"""Pydantic models describing the JSON envelope written to clients."""
