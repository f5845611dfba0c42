"""Core infrastructure package for shared application functionality.

- **config**: Centralized configuration management with environment support
- **exceptions**: Application errors that carry an HTTP status code
- **logging**: Structured logging with Loguru
- **types**: Type aliases for better code clarity
"""
