"""
Unit tests for API data models
"""

import pytest
from pydantic import ValidationError

from api.models import ErrorBody, GenericResponse, Quote, QuoteResponse
from tests.factories import QuoteFactory


@pytest.mark.unit
class TestQuoteResponse:
    """Test cases for response envelopes"""

    def test_success_envelope(self):
        record = QuoteFactory.create_quote(quote_id=1)
        envelope = QuoteResponse.model_validate({"status": "success", "quote": record})
        assert envelope.is_success
        assert envelope.quote == Quote(**record)

    def test_failure_status(self):
        envelope = QuoteResponse.model_validate({"status": "fail", "quote": None})
        assert not envelope.is_success
        assert envelope.quote is None

    def test_result_key_accepted(self):
        record = QuoteFactory.create_quote(quote_id=3)
        envelope = QuoteResponse.model_validate({"status": "success", "result": record})
        assert envelope.quote.id == 3

    def test_string_id_coerced(self):
        record = QuoteFactory.create_quote()
        record["id"] = "12"
        assert Quote.model_validate(record).id == 12

    def test_persisted_quote_requires_id(self):
        with pytest.raises(ValidationError):
            Quote.model_validate(QuoteFactory.create_input())

    def test_generic_response(self):
        response = GenericResponse.model_validate({"status": "success", "message": "deleted"})
        assert response.is_success
        assert response.message == "deleted"

    def test_error_body_ignores_unknown_fields(self):
        body = ErrorBody.model_validate({"message": "Duplicate quote", "code": 409})
        assert body.message == "Duplicate quote"
        assert body.detail is None
