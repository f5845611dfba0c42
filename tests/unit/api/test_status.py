"""Unit tests for status code helpers."""

import pytest

from envelope.api.constants import FATAL_STATUS_CODES
from envelope.api.status import is_fatal_status, status_text


@pytest.mark.unit
class TestIsFatalStatus:
    """Test fatal status classification."""

    def test_fatal_set_is_exact(self) -> None:
        """Test the fatal set holds exactly the documented codes."""
        assert frozenset({500, 501, 502, 503, 504, 505, 511}) == FATAL_STATUS_CODES

    @pytest.mark.parametrize("code", [500, 501, 502, 503, 504, 505, 511])
    def test_fatal_codes(self, code: int) -> None:
        """Test every member of the set is fatal."""
        assert is_fatal_status(code) is True

    @pytest.mark.parametrize(
        "code", [506, 507, 508, 509, 510, 512, 599, 499, 404, 400, 200, 0, -500]
    )
    def test_non_fatal_codes(self, code: int) -> None:
        """Test codes outside the set, other 5xx included, are not fatal."""
        assert is_fatal_status(code) is False

    def test_every_code_in_range(self) -> None:
        """Test classification agrees with set membership across 100-599."""
        fatal = [code for code in range(100, 600) if is_fatal_status(code)]

        assert fatal == [500, 501, 502, 503, 504, 505, 511]


@pytest.mark.unit
class TestStatusText:
    """Test reason phrase lookup."""

    @pytest.mark.parametrize(
        ("code", "phrase"),
        [
            (200, "OK"),
            (400, "Bad Request"),
            (401, "Unauthorized"),
            (404, "Not Found"),
            (500, "Internal Server Error"),
            (503, "Service Unavailable"),
            (511, "Network Authentication Required"),
        ],
    )
    def test_known_codes(self, code: int, phrase: str) -> None:
        """Test standard reason phrases."""
        assert status_text(code) == phrase

    @pytest.mark.parametrize("code", [0, 299, 509, 599, 999])
    def test_unknown_codes(self, code: int) -> None:
        """Test codes without a reason phrase map to an empty string."""
        assert status_text(code) == ""
