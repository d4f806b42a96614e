"""
Input validation for the quote client.
Checks quote write inputs before anything reaches the network layer.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Generic, Mapping, Optional, TypeVar

from pydantic import BaseModel, ValidationError as PydanticValidationError

from api.models import QUOTE_TEXT_FIELDS, CreateQuoteInput, UpdateQuoteInput
from .exceptions import ValidationError
from .logging_manager import validation_logger

T = TypeVar('T', bound=BaseModel)

# 每个字段的必填提示
REQUIRED_MESSAGES = {
    'quote': "Quote is required",
    'category': "Category is required",
    'anime': "Anime is required",
    'character': "Character is required",
}

QUOTE_ID_MESSAGE = "Quote id must be a positive integer"

# 视为"缺失"的 pydantic 错误类型
_REQUIRED_ERROR_TYPES = {'missing', 'string_too_short', 'value_error'}


@dataclass
class ValidationResult(Generic[T]):
    """验证结果：要么是通过验证的模型，要么是按字段的错误信息"""
    value: Optional[T] = None
    errors: Dict[str, str] = field(default_factory=dict)

    @property
    def is_valid(self) -> bool:
        return not self.errors

    def unwrap(self) -> T:
        """返回验证后的模型，失败时抛出 ValidationError"""
        if self.errors:
            raise ValidationError(self.errors)
        return self.value


class QuoteValidator:
    """名言输入验证器"""

    @staticmethod
    def validate_create(data: Any) -> ValidationResult[CreateQuoteInput]:
        """验证创建输入，所有字段一起检查"""
        return QuoteValidator._validate(CreateQuoteInput, data)

    @staticmethod
    def validate_update(data: Any) -> ValidationResult[UpdateQuoteInput]:
        """验证部分更新输入，只检查提供的字段"""
        return QuoteValidator._validate(UpdateQuoteInput, data)

    @staticmethod
    def validate_quote_id(quote_id: Any) -> ValidationResult[int]:
        """验证名言ID"""
        if isinstance(quote_id, bool) or not isinstance(quote_id, int) or quote_id < 1:
            return ValidationResult(errors={'id': QUOTE_ID_MESSAGE})
        return ValidationResult(value=quote_id)

    @staticmethod
    def _validate(model: type, data: Any) -> ValidationResult:
        if isinstance(data, model):
            return ValidationResult(value=data)

        if not isinstance(data, Mapping):
            validation_logger.warning(f"[Validation] Expected a mapping, got {type(data).__name__}")
            return ValidationResult(errors=dict(REQUIRED_MESSAGES))

        try:
            return ValidationResult(value=model.model_validate(dict(data)))
        except PydanticValidationError as e:
            errors = QuoteValidator._collect_field_errors(e)
            validation_logger.info(f"[Validation] Rejected {model.__name__}: {sorted(errors)}")
            return ValidationResult(errors=errors)

    @staticmethod
    def _collect_field_errors(error: PydanticValidationError) -> Dict[str, str]:
        """把 pydantic 错误转换为按字段的提示信息"""
        errors: Dict[str, str] = {}
        for item in error.errors():
            field_name = str(item['loc'][0]) if item['loc'] else None
            if field_name not in QUOTE_TEXT_FIELDS or field_name in errors:
                continue

            if item['type'] in _REQUIRED_ERROR_TYPES or item.get('input') is None:
                errors[field_name] = REQUIRED_MESSAGES[field_name]
            else:
                errors[field_name] = f"{field_name.capitalize()} must be a string"
        return errors


def validate_create_input(data: Any) -> ValidationResult[CreateQuoteInput]:
    return QuoteValidator.validate_create(data)


def validate_update_input(data: Any) -> ValidationResult[UpdateQuoteInput]:
    return QuoteValidator.validate_update(data)


def validate_quote_id(quote_id: Any) -> ValidationResult[int]:
    return QuoteValidator.validate_quote_id(quote_id)
