"""
Selects the user-facing text for a failed mutation.

The server error body is treated as a tagged union: it either carries a
``message``, or a ``detail``, or neither. When neither is present the text
falls back to the fault's own message and finally to its string form.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional

from pydantic import ValidationError as PydanticValidationError

from api.models import ErrorBody
from utils import ApiError


class ErrorEnvelopeKind(str, Enum):
    HAS_MESSAGE = "has_message"
    HAS_DETAIL = "has_detail"
    GENERIC = "generic"


@dataclass(frozen=True)
class ErrorEnvelope:
    kind: ErrorEnvelopeKind
    text: str


def _non_empty_text(value: Any) -> Optional[str]:
    if isinstance(value, str) and value:
        return value
    return None


def _parse_error_body(error: BaseException) -> Optional[ErrorBody]:
    data = error.response_data if isinstance(error, ApiError) else None
    if not isinstance(data, dict):
        return None
    try:
        return ErrorBody.model_validate(data)
    except PydanticValidationError:
        return None


def _transport_message(error: BaseException) -> Optional[str]:
    message = getattr(error, "message", None)
    if _non_empty_text(message):
        return message
    return _non_empty_text(str(error))


def classify_error(error: BaseException) -> ErrorEnvelope:
    """把故障归类为 HAS_MESSAGE / HAS_DETAIL / GENERIC 之一"""
    body = _parse_error_body(error)
    if body is not None:
        message = _non_empty_text(body.message)
        if message:
            return ErrorEnvelope(ErrorEnvelopeKind.HAS_MESSAGE, message)
        detail = _non_empty_text(body.detail)
        if detail:
            return ErrorEnvelope(ErrorEnvelopeKind.HAS_DETAIL, detail)

    return ErrorEnvelope(ErrorEnvelopeKind.GENERIC, _transport_message(error) or repr(error))


def resolve_error_message(error: BaseException) -> str:
    return classify_error(error).text
