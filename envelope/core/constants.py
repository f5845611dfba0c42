"""Core application constants."""

# Security and redaction
REDACTED = "[REDACTED]"

# Exit status passed to the termination hook when a response cannot be encoded
EXIT_SERIALIZATION_FAILURE = 1
