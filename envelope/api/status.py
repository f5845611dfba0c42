"""Status code helpers: reason phrases and fatal-code classification."""

from http import HTTPStatus

from envelope.api.constants import FATAL_STATUS_CODES


def status_text(code: int) -> str:
    """Return the standard reason phrase for ``code``.

    Args:
        code: HTTP status code.

    Returns:
        str: The reason phrase, or an empty string for unknown codes.
    """
    try:
        return HTTPStatus(code).phrase
    except ValueError:
        return ""


def is_fatal_status(code: int) -> bool:
    """Tell whether an error response with ``code`` should be logged."""
    return code in FATAL_STATUS_CODES
