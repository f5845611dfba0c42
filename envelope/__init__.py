"""JSON envelope responses for HTTP services.

Every response is written as ``{"status": {...}, "body": ...}`` with matching
headers. See ``envelope.api.writer`` for the entry points.
"""
