"""Tests for HTTP utilities module."""

from __future__ import annotations

from unittest.mock import AsyncMock, MagicMock, patch

import httpx
import pytest

from apidoc2md.exceptions import DocumentNotFoundError, FetchError, RateLimitError
from apidoc2md.http_utils import RETRY_STATUS_CODES, fetch_text_with_retries


def _response(status_code: int, text: str = "") -> MagicMock:
    response = MagicMock()
    response.status_code = status_code
    response.text = text
    response.raise_for_status = MagicMock()
    return response


def _client(**get_kwargs) -> AsyncMock:
    mock_client = AsyncMock()
    mock_client.get = AsyncMock(**get_kwargs)
    mock_client.__aenter__ = AsyncMock(return_value=mock_client)
    mock_client.__aexit__ = AsyncMock(return_value=None)
    return mock_client


class TestRetryStatusCodes:
    """Tests for RETRY_STATUS_CODES constant."""

    def test_contains_expected_codes(self) -> None:
        """Should contain all expected retryable status codes."""
        assert RETRY_STATUS_CODES == frozenset({429, 500, 502, 503, 504})

    def test_is_immutable(self) -> None:
        """Should be a frozenset (immutable)."""
        assert isinstance(RETRY_STATUS_CODES, frozenset)


class TestFetchTextWithRetries:
    """Tests for fetch_text_with_retries function."""

    @pytest.mark.asyncio
    async def test_returns_text(self) -> None:
        """Returns the response body as text."""
        with patch("apidoc2md.http_utils.httpx.AsyncClient") as mock_client_class:
            mock_client = _client(return_value=_response(200, "# fs\n"))
            mock_client_class.return_value = mock_client

            result = await fetch_text_with_retries("https://example.com/fs.md")

        assert result == "# fs\n"

    @pytest.mark.asyncio
    async def test_raises_not_found_on_404(self) -> None:
        """Raises DocumentNotFoundError on 404 without retrying."""
        with patch("apidoc2md.http_utils.httpx.AsyncClient") as mock_client_class:
            mock_client = _client(return_value=_response(404))
            mock_client_class.return_value = mock_client

            with pytest.raises(DocumentNotFoundError, match="not found"):
                await fetch_text_with_retries("https://example.com/missing.md", max_retries=2)

            assert mock_client.get.call_count == 1

    @pytest.mark.asyncio
    async def test_not_found_is_a_fetch_error(self) -> None:
        """DocumentNotFoundError can be handled as a FetchError."""
        with patch("apidoc2md.http_utils.httpx.AsyncClient") as mock_client_class:
            mock_client_class.return_value = _client(return_value=_response(404))

            with pytest.raises(FetchError):
                await fetch_text_with_retries("https://example.com/missing.md")

    @pytest.mark.asyncio
    async def test_retries_on_503(self) -> None:
        """Retries on 503 status code."""
        with patch("apidoc2md.http_utils.httpx.AsyncClient") as mock_client_class:
            mock_client = _client(side_effect=[_response(503), _response(200, "success")])
            mock_client_class.return_value = mock_client

            result = await fetch_text_with_retries(
                "https://example.com", max_retries=2, backoff_s=0.01
            )

        assert result == "success"
        assert mock_client.get.call_count == 2

    @pytest.mark.asyncio
    async def test_raises_after_max_retries(self) -> None:
        """Raises FetchError after exhausting retries."""
        with patch("apidoc2md.http_utils.httpx.AsyncClient") as mock_client_class:
            mock_client = _client(return_value=_response(503))
            mock_client_class.return_value = mock_client

            with pytest.raises(FetchError, match="Failed to fetch"):
                await fetch_text_with_retries(
                    "https://example.com", max_retries=2, backoff_s=0.01
                )

            # Initial attempt + 2 retries = 3 total
            assert mock_client.get.call_count == 3

    @pytest.mark.asyncio
    async def test_raises_rate_limit_when_last_attempt_is_429(self) -> None:
        """Raises RateLimitError when still rate limited after retries."""
        with patch("apidoc2md.http_utils.httpx.AsyncClient") as mock_client_class:
            mock_client_class.return_value = _client(return_value=_response(429))

            with pytest.raises(RateLimitError):
                await fetch_text_with_retries(
                    "https://example.com", max_retries=1, backoff_s=0.01
                )

    @pytest.mark.asyncio
    async def test_backs_off_exponentially(self) -> None:
        """Sleeps backoff_s * 2**attempt between attempts."""
        with (
            patch("apidoc2md.http_utils.asyncio.sleep", new=AsyncMock()) as mock_sleep,
            patch("apidoc2md.http_utils.httpx.AsyncClient") as mock_client_class,
        ):
            mock_client_class.return_value = _client(return_value=_response(500))

            with pytest.raises(FetchError):
                await fetch_text_with_retries(
                    "https://example.com", max_retries=2, backoff_s=1.0
                )

        assert [call.args[0] for call in mock_sleep.await_args_list] == [1.0, 2.0]

    @pytest.mark.asyncio
    async def test_retries_on_request_error(self) -> None:
        """Retries on network request errors."""
        with patch("apidoc2md.http_utils.httpx.AsyncClient") as mock_client_class:
            mock_client_class.return_value = _client(
                side_effect=[
                    httpx.RequestError("Connection failed"),
                    _response(200, "success"),
                ]
            )

            result = await fetch_text_with_retries(
                "https://example.com", max_retries=2, backoff_s=0.01
            )

        assert result == "success"

    @pytest.mark.asyncio
    async def test_wraps_request_error_after_retries(self) -> None:
        """Wraps the last network error in a FetchError."""
        with patch("apidoc2md.http_utils.httpx.AsyncClient") as mock_client_class:
            mock_client_class.return_value = _client(
                side_effect=httpx.RequestError("Connection failed")
            )

            with pytest.raises(FetchError, match="Connection failed"):
                await fetch_text_with_retries(
                    "https://example.com", max_retries=0, backoff_s=0.01
                )

    @pytest.mark.asyncio
    async def test_uses_provided_client(self) -> None:
        """Uses provided httpx.AsyncClient if passed."""
        mock_client = AsyncMock()
        mock_client.get = AsyncMock(return_value=_response(200, "success"))

        result = await fetch_text_with_retries("https://example.com", client=mock_client)

        assert result == "success"
        mock_client.get.assert_called_once_with("https://example.com")

    @pytest.mark.asyncio
    async def test_client_has_correct_settings(self) -> None:
        """Creates client with correct timeout and redirect settings."""
        with patch("apidoc2md.http_utils.httpx.AsyncClient") as mock_client_class:
            mock_client_class.return_value = _client(return_value=_response(200, "success"))

            await fetch_text_with_retries("https://example.com")

            call_kwargs = mock_client_class.call_args[1]
            assert call_kwargs["follow_redirects"] is True
            assert call_kwargs["max_redirects"] == 5
            assert "timeout" in call_kwargs
            assert "User-Agent" in call_kwargs["headers"]
