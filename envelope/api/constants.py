"""API-related constants."""

# HTTP headers
CONTENT_TYPE_HEADER = "Content-Type"
CONTENT_LENGTH_HEADER = "Content-Length"

# Content types
JSON_CONTENT_TYPE = "application/json; charset=UTF-8"

# Status codes whose error responses are also logged for operators.
# 506-510 are deliberately absent.
FATAL_STATUS_CODES = frozenset({500, 501, 502, 503, 504, 505, 511})

# Log message for error responses with a fatal status code
FATAL_RESPONSE_LOG_MESSAGE = "API Handler returned an error!"
SERIALIZATION_FAILURE_LOG_MESSAGE = "Could not marshal JSON in the API writer"

# HTTP status codes
HTTP_422_UNPROCESSABLE_ENTITY = 422
