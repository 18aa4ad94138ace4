"""
Unit tests for the Alpha Vantage quote source.
Testing request handling, response parsing, caching and batching.
"""

from unittest.mock import Mock

import pytest
import requests

from stockfolio.core.exceptions.portfolio import (
    ConfigurationError,
    ExternalSourceError,
    QuoteRateLimitError,
)
from stockfolio.infrastructure.quotes import AlphaVantageQuoteSource, unique_symbols


def quote_response(payload: object) -> Mock:
    response = Mock()
    response.raise_for_status.return_value = None
    response.json.return_value = payload
    return response


def global_quote(price: str) -> dict:
    return {"Global Quote": {"01. symbol": "X", "05. price": price}}


def make_source(session: Mock, **kwargs: object) -> AlphaVantageQuoteSource:
    options: dict = {"api_key": "demo", "batch_delay_seconds": 0, "session": session}
    options.update(kwargs)
    return AlphaVantageQuoteSource(**options)


def priced_session(prices: dict[str, object]) -> Mock:
    """Session whose GET answers per requested symbol."""
    session = Mock()

    def get(url: str, params: dict, timeout: float) -> Mock:
        value = prices[params["symbol"]]
        if isinstance(value, dict):
            return quote_response(value)
        return quote_response(global_quote(str(value)))

    session.get.side_effect = get
    return session


class TestUniqueSymbols:
    def test_should_fold_case_and_duplicates(self) -> None:
        assert unique_symbols(["aapl", " AAPL ", "msft", "", "Msft", "vti"]) == [
            "AAPL",
            "MSFT",
            "VTI",
        ]


class TestFetchPrice:
    """Test single-symbol fetching."""

    def test_should_request_global_quote(self) -> None:
        """Test the request parameters and the parsed price."""
        # Arrange
        session = Mock()
        session.get.return_value = quote_response(global_quote("187.4400"))
        source = make_source(session, request_timeout_seconds=3.0)

        # Act
        price = source.fetch_price("aapl")

        # Assert
        assert price == 187.44
        session.get.assert_called_once_with(
            "https://www.alphavantage.co/query",
            params={"function": "GLOBAL_QUOTE", "symbol": "AAPL", "apikey": "demo"},
            timeout=3.0,
        )

    def test_should_serve_repeat_requests_from_cache(self) -> None:
        session = Mock()
        session.get.return_value = quote_response(global_quote("10.00"))
        source = make_source(session)

        assert source.fetch_price("AAPL") == 10.0
        assert source.fetch_price("aapl") == 10.0

        assert session.get.call_count == 1

    def test_should_refetch_after_cache_clear(self) -> None:
        session = Mock()
        session.get.return_value = quote_response(global_quote("10.00"))
        source = make_source(session)

        source.fetch_price("AAPL")
        source.clear_cache()
        source.fetch_price("AAPL")

        assert session.get.call_count == 2

    def test_should_require_api_key(self) -> None:
        source = make_source(Mock(), api_key=None)

        with pytest.raises(ConfigurationError, match="API key"):
            source.fetch_price("AAPL")

    def test_should_detect_rate_limit_note(self) -> None:
        session = Mock()
        session.get.return_value = quote_response(
            {"Note": "Thank you for using Alpha Vantage! Our standard API call frequency is..."}
        )
        source = make_source(session)

        with pytest.raises(QuoteRateLimitError) as exc_info:
            source.fetch_price("AAPL")

        assert exc_info.value.symbol == "AAPL"

    @pytest.mark.parametrize(
        ("payload", "message"),
        [
            ({"Error Message": "Invalid API call"}, "API error"),
            ({"Global Quote": {}}, "No price data found"),
            ({}, "No price data found"),
            (global_quote("n/a"), "Invalid price"),
            (global_quote("0.0000"), "Invalid price"),
            (["not", "a", "dict"], "Unexpected quote payload"),
        ],
    )
    def test_should_reject_unusable_payloads(self, payload: object, message: str) -> None:
        session = Mock()
        session.get.return_value = quote_response(payload)
        source = make_source(session)

        with pytest.raises(ExternalSourceError, match=message):
            source.fetch_price("AAPL")

    def test_should_wrap_transport_errors(self) -> None:
        session = Mock()
        session.get.side_effect = requests.exceptions.ConnectionError("offline")
        source = make_source(session)

        with pytest.raises(ExternalSourceError, match="Quote request failed"):
            source.fetch_price("AAPL")

    def test_should_wrap_invalid_json(self) -> None:
        session = Mock()
        response = quote_response(None)
        response.json.side_effect = ValueError("Expecting value")
        session.get.return_value = response
        source = make_source(session)

        with pytest.raises(ExternalSourceError, match="Invalid JSON"):
            source.fetch_price("AAPL")

    def test_should_reject_invalid_batch_size(self) -> None:
        with pytest.raises(ConfigurationError):
            make_source(Mock(), batch_size=0)


class TestFetchPrices:
    """Test batched fetching."""

    @pytest.mark.asyncio
    async def test_should_fetch_every_symbol_once(self) -> None:
        """Test duplicates are folded and all batches are fetched."""
        # Arrange
        session = priced_session({"AAPL": "100", "MSFT": "200", "VTI": "300"})
        source = make_source(session, batch_size=2)

        # Act
        prices = await source.fetch_prices(["AAPL", "msft", "aapl", "VTI"])

        # Assert
        assert prices == {"AAPL": 100.0, "MSFT": 200.0, "VTI": 300.0}
        assert session.get.call_count == 3

    @pytest.mark.asyncio
    async def test_should_skip_failed_symbols(self) -> None:
        """Test a partial result is returned when some symbols fail."""
        session = priced_session({"AAPL": "100", "BAD": {"Error Message": "unknown"}})
        source = make_source(session)

        prices = await source.fetch_prices(["AAPL", "BAD"])

        assert prices == {"AAPL": 100.0}

    @pytest.mark.asyncio
    async def test_should_stop_after_rate_limited_batch(self) -> None:
        """Test no further batches are requested once the limit is hit."""
        # Arrange
        session = priced_session(
            {
                "AAPL": "100",
                "MSFT": {"Note": "API call frequency exceeded"},
                "VTI": "300",
                "QQQ": "400",
            }
        )
        source = make_source(session, batch_size=2)

        # Act
        prices = await source.fetch_prices(["AAPL", "MSFT", "VTI", "QQQ"])

        # Assert
        assert prices == {"AAPL": 100.0}
        requested = [c.kwargs["params"]["symbol"] for c in session.get.call_args_list]
        assert sorted(requested) == ["AAPL", "MSFT"]

    @pytest.mark.asyncio
    async def test_should_return_empty_without_api_key(self) -> None:
        session = Mock()
        source = make_source(session, api_key="")

        assert await source.fetch_prices(["AAPL"]) == {}
        session.get.assert_not_called()

    @pytest.mark.asyncio
    async def test_should_return_empty_for_no_symbols(self) -> None:
        session = Mock()
        source = make_source(session)

        assert await source.fetch_prices([]) == {}
        session.get.assert_not_called()

    @pytest.mark.asyncio
    async def test_should_propagate_unexpected_errors(self) -> None:
        session = Mock()
        session.get.side_effect = RuntimeError("bug")
        source = make_source(session)

        with pytest.raises(RuntimeError, match="bug"):
            await source.fetch_prices(["AAPL"])
