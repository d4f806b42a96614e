"""
API data models for the quote client.
Pydantic models for quote records, write inputs and response envelopes.
"""

from enum import Enum
from typing import Any, Optional
from pydantic import AliasChoices, BaseModel, Field, field_validator


QUOTE_TEXT_FIELDS = ("quote", "category", "anime", "character")


class EnvelopeStatusEnum(str, Enum):
    """信封状态枚举"""
    SUCCESS = "success"
    FAIL = "fail"
    ERROR = "error"


class Quote(BaseModel):
    """持久化的名言记录"""
    id: int = Field(..., description="服务端分配的ID")
    quote: str = Field(..., min_length=1, description="名言内容")
    category: str = Field(..., min_length=1, description="分类")
    anime: str = Field(..., min_length=1, description="动画名称")
    character: str = Field(..., min_length=1, description="角色")


class CreateQuoteInput(BaseModel):
    """创建名言的输入（不含ID）"""
    quote: str = Field(..., min_length=1, description="名言内容")
    category: str = Field(..., min_length=1, description="分类")
    anime: str = Field(..., min_length=1, description="动画名称")
    character: str = Field(..., min_length=1, description="角色")

    def to_payload(self) -> dict:
        return self.model_dump()


class UpdateQuoteInput(BaseModel):
    """部分更新的输入，只序列化显式提供的字段"""
    quote: Optional[str] = Field(None, min_length=1, description="名言内容")
    category: Optional[str] = Field(None, min_length=1, description="分类")
    anime: Optional[str] = Field(None, min_length=1, description="动画名称")
    character: Optional[str] = Field(None, min_length=1, description="角色")

    @field_validator(*QUOTE_TEXT_FIELDS, mode='before')
    @classmethod
    def reject_explicit_null(cls, v):
        # 未提供的字段不会进入此校验器
        if v is None:
            raise ValueError("field may be omitted but not null")
        return v

    def to_payload(self) -> dict:
        return self.model_dump(exclude_unset=True)


class QuoteResponse(BaseModel):
    """单条记录操作的响应信封"""
    status: str = Field(..., description="成功/失败标识")
    # 原服务端的随机接口使用 result 作为键
    quote: Optional[Quote] = Field(
        None,
        validation_alias=AliasChoices("quote", "result"),
        description="名言记录"
    )

    @property
    def is_success(self) -> bool:
        return self.status == EnvelopeStatusEnum.SUCCESS.value


class GenericResponse(BaseModel):
    """通用确认响应信封"""
    status: str = Field(..., description="成功/失败标识")
    message: Optional[str] = Field(
        None,
        validation_alias=AliasChoices("message", "result"),
        description="说明信息"
    )

    @property
    def is_success(self) -> bool:
        return self.status == EnvelopeStatusEnum.SUCCESS.value


class ErrorBody(BaseModel):
    """错误响应体中可能携带的提示字段"""
    status: Optional[Any] = None
    message: Optional[Any] = None
    detail: Optional[Any] = None
