"""
Unit tests for the quotes API client
"""

import asyncio

import aiohttp
import pytest

from api.client import QuoteApiClient
from api.models import CreateQuoteInput, Quote
from utils.exceptions import ErrorCodes, ServerRejection, TransportFault, ValidationError
from tests.conftest import TEST_BASE_URL
from tests.factories import QuoteFactory
from tests.mocks import quote_envelope, recorded_requests


@pytest.mark.unit
class TestQuoteApiClient:
    """Test cases for QuoteApiClient"""

    def test_build_url(self, api_config):
        client = QuoteApiClient(config=api_config)
        assert client.build_url("create/") == TEST_BASE_URL + "create/"
        assert client.build_url("update/5") == TEST_BASE_URL + "update/5"

    def test_content_type_always_json(self, api_config):
        client = QuoteApiClient(config=api_config, headers={"Content-Type": "text/plain", "X-Trace": "1"})
        assert client.headers["Content-Type"] == "application/json"
        assert client.headers["X-Trace"] == "1"

    @pytest.mark.asyncio
    async def test_create(self, api_client, http_mock, naruto_input):
        url = TEST_BASE_URL + "create/"
        record = dict(naruto_input, id=1)
        http_mock.post(url, payload=quote_envelope(record), status=201)

        quote = await api_client.create(CreateQuoteInput(**naruto_input))

        assert quote == Quote(**record)
        calls = recorded_requests(http_mock, "POST", url)
        assert len(calls) == 1
        assert calls[0].kwargs["json"] == naruto_input
        assert calls[0].kwargs["headers"]["Content-Type"] == "application/json"

    @pytest.mark.asyncio
    async def test_create_with_invalid_mapping_sends_nothing(self, api_client, http_mock):
        with pytest.raises(ValidationError) as exc_info:
            await api_client.create({"quote": "", "category": "x", "anime": "y", "character": "z"})

        assert exc_info.value.field_errors == {"quote": "Quote is required"}
        assert http_mock.requests == {}

    @pytest.mark.asyncio
    async def test_retrieve(self, api_client, http_mock):
        record = QuoteFactory.create_quote(quote_id=7)
        http_mock.get(TEST_BASE_URL + "random/", payload=quote_envelope(record))

        quote = await api_client.retrieve()

        assert quote.id == 7
        assert quote.quote == record["quote"]

    @pytest.mark.asyncio
    async def test_update_sends_only_supplied_fields(self, api_client, http_mock):
        url = TEST_BASE_URL + "update/5"
        record = QuoteFactory.create_quote(quote_id=5, category="new-category")
        http_mock.patch(url, payload=quote_envelope(record))

        quote = await api_client.update(5, {"category": "new-category"})

        assert quote.category == "new-category"
        calls = recorded_requests(http_mock, "PATCH", url)
        assert calls[0].kwargs["json"] == {"category": "new-category"}

    @pytest.mark.asyncio
    async def test_delete_ignores_body(self, api_client, http_mock):
        url = TEST_BASE_URL + "delete/9"
        http_mock.delete(url, status=204)

        assert await api_client.delete(9) is None
        assert len(recorded_requests(http_mock, "DELETE", url)) == 1

    @pytest.mark.asyncio
    async def test_non_2xx_raises_transport_fault_with_body(self, api_client, http_mock, naruto_input):
        http_mock.post(TEST_BASE_URL + "create/", status=409,
                       payload={"status": "fail", "message": "Duplicate quote"})

        with pytest.raises(TransportFault) as exc_info:
            await api_client.create(naruto_input)

        fault = exc_info.value
        assert fault.status == 409
        assert fault.response_data == {"status": "fail", "message": "Duplicate quote"}
        assert fault.error_code == ErrorCodes.NETWORK_BAD_STATUS

    @pytest.mark.asyncio
    async def test_non_json_error_body_kept_as_text(self, api_client, http_mock):
        http_mock.get(TEST_BASE_URL + "random/", status=502, body="Bad Gateway")

        with pytest.raises(TransportFault) as exc_info:
            await api_client.retrieve()

        assert exc_info.value.response_data == "Bad Gateway"

    @pytest.mark.asyncio
    async def test_connection_error(self, api_client, http_mock):
        http_mock.get(TEST_BASE_URL + "random/", exception=aiohttp.ClientConnectionError("refused"))

        with pytest.raises(TransportFault) as exc_info:
            await api_client.retrieve()

        assert exc_info.value.status is None
        assert exc_info.value.message == "refused"
        assert isinstance(exc_info.value.original, aiohttp.ClientConnectionError)

    @pytest.mark.asyncio
    async def test_timeout(self, api_client, http_mock):
        http_mock.get(TEST_BASE_URL + "random/", exception=asyncio.TimeoutError())

        with pytest.raises(TransportFault) as exc_info:
            await api_client.retrieve()

        assert exc_info.value.error_code == ErrorCodes.NETWORK_TIMEOUT

    @pytest.mark.asyncio
    async def test_no_retry_on_failure(self, api_client, http_mock, naruto_input):
        url = TEST_BASE_URL + "create/"
        http_mock.post(url, status=500, payload={"detail": "boom"})

        with pytest.raises(TransportFault):
            await api_client.create(naruto_input)

        assert len(recorded_requests(http_mock, "POST", url)) == 1

    @pytest.mark.asyncio
    async def test_failure_envelope_raises_server_rejection(self, api_client, http_mock):
        body = {"status": "fail", "quote": None, "message": "No quotes yet"}
        http_mock.get(TEST_BASE_URL + "random/", payload=body)

        with pytest.raises(ServerRejection) as exc_info:
            await api_client.retrieve()

        assert exc_info.value.response_data == body
        assert exc_info.value.error_code == ErrorCodes.SERVER_REJECTED

    @pytest.mark.asyncio
    async def test_success_without_quote_is_rejected(self, api_client, http_mock):
        http_mock.get(TEST_BASE_URL + "random/", payload={"status": "success", "quote": None})

        with pytest.raises(ServerRejection):
            await api_client.retrieve()

    @pytest.mark.asyncio
    async def test_health_check(self, api_client, http_mock):
        http_mock.get(TEST_BASE_URL + "healthcheck",
                      payload={"status": "success", "result": "healthy"})

        response = await api_client.health_check()

        assert response.is_success
        assert response.message == "healthy"

    @pytest.mark.asyncio
    async def test_context_manager_closes_session(self, api_config):
        async with QuoteApiClient(config=api_config) as client:
            session = client._ensure_session()
            assert not session.closed
        assert session.closed
