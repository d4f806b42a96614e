"""
HTTP client for the remote quotes service.
Translates quote operations into JSON requests and parses typed envelopes.

Failures are not interpreted here: non-2xx responses and network errors are
raised as TransportFault carrying the raw status and body, and 2xx envelopes
whose status is not "success" are raised as ServerRejection. Requests are
never retried, since create is not idempotent.
"""

import asyncio
import json
from typing import Any, Dict, Mapping, Optional, Union

import aiohttp
from pydantic import ValidationError as PydanticValidationError

from utils import (
    ApiConfig, ErrorCodes, LogContext, ServerRejection, TransportFault,
    api_logger, api_metrics, config_manager, log_execution,
)
from utils.validation import validate_create_input, validate_update_input
from .models import CreateQuoteInput, GenericResponse, Quote, QuoteResponse, UpdateQuoteInput


class QuoteEndpoints:
    """服务端路径（相对于 base_url）"""
    CREATE = "create/"
    RANDOM = "random/"
    UPDATE = "update/{quote_id}"
    DELETE = "delete/{quote_id}"
    HEALTHCHECK = "healthcheck"


class QuoteApiClient:
    """名言服务客户端"""

    def __init__(self, base_url: str = None, timeout: float = None,
                 with_credentials: bool = None, headers: Dict[str, str] = None,
                 session: Optional[aiohttp.ClientSession] = None,
                 config: Optional[ApiConfig] = None):
        config = config or config_manager.get_api_config()
        self.base_url = base_url or config.base_url
        self.timeout = timeout if timeout is not None else config.timeout
        self.with_credentials = config.with_credentials if with_credentials is None else with_credentials
        self.headers = dict(config.headers)
        self.headers.update(headers or {})
        self.headers["Content-Type"] = "application/json"

        self._session = session
        self._owns_session = session is None

    async def __aenter__(self):
        self._ensure_session()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()

    def _ensure_session(self) -> aiohttp.ClientSession:
        if self._session is None or self._session.closed:
            # unsafe=True 让 localhost/IP 主机的 cookie 也会被保存并回传
            cookie_jar = aiohttp.CookieJar(unsafe=True) if self.with_credentials else aiohttp.DummyCookieJar()
            self._session = aiohttp.ClientSession(
                timeout=aiohttp.ClientTimeout(total=self.timeout),
                headers=self.headers,
                cookie_jar=cookie_jar
            )
            self._owns_session = True
            api_logger.debug(f"[QuoteApi] Session opened for {self.base_url}")
        return self._session

    async def close(self):
        """关闭HTTP会话"""
        if self._session is not None and self._owns_session and not self._session.closed:
            await self._session.close()
            api_logger.debug("[QuoteApi] Session closed")
        self._session = None

    def build_url(self, path: str) -> str:
        return f"{self.base_url.rstrip('/')}/{path.lstrip('/')}"

    async def _request(self, method: str, path: str, payload: Optional[dict] = None,
                       parse_body: bool = True) -> Any:
        """发送请求，非2xx或网络错误统一抛出 TransportFault"""
        session = self._ensure_session()
        url = self.build_url(path)
        api_metrics.increment("requests")
        api_logger.debug(f"[QuoteApi] {method} {url}")

        try:
            async with session.request(method, url, json=payload, headers=self.headers) as response:
                body = await self._read_body(response) if parse_body or response.status >= 400 else None
                if response.status >= 400:
                    api_metrics.increment("failures")
                    raise TransportFault(
                        f"Request failed with status code {response.status}",
                        ErrorCodes.NETWORK_BAD_STATUS,
                        status=response.status,
                        response_data=body
                    )
                return body
        except asyncio.TimeoutError as e:
            api_metrics.increment("failures")
            raise TransportFault(
                f"Request timed out after {self.timeout}s",
                ErrorCodes.NETWORK_TIMEOUT,
                original=e
            ) from e
        except aiohttp.ClientError as e:
            api_metrics.increment("failures")
            raise TransportFault(
                str(e) or e.__class__.__name__,
                ErrorCodes.NETWORK_CONNECTION_ERROR,
                original=e
            ) from e

    @staticmethod
    async def _read_body(response: aiohttp.ClientResponse) -> Any:
        """读取响应体，能解析为JSON时返回对象，否则返回文本"""
        text = await response.text()
        if not text:
            return None
        try:
            return json.loads(text)
        except ValueError:
            return text

    @staticmethod
    def _parse_quote_envelope(body: Any) -> Quote:
        """解析单条记录信封"""
        try:
            envelope = QuoteResponse.model_validate(body)
        except PydanticValidationError as e:
            raise ServerRejection(
                "Invalid response envelope",
                ErrorCodes.SERVER_INVALID_RESPONSE,
                response_data=body,
                original=e
            ) from e

        if not envelope.is_success:
            raise ServerRejection(
                f"Server responded with status '{envelope.status}'",
                ErrorCodes.SERVER_REJECTED,
                response_data=body
            )
        if envelope.quote is None:
            raise ServerRejection(
                "Response envelope carried no quote",
                ErrorCodes.SERVER_INVALID_RESPONSE,
                response_data=body
            )
        return envelope.quote

    @log_execution("QuoteApi", "create")
    async def create(self, quote_input: Union[CreateQuoteInput, Mapping[str, Any]]) -> Quote:
        """创建名言"""
        quote_input = validate_create_input(quote_input).unwrap()
        body = await self._request("POST", QuoteEndpoints.CREATE, quote_input.to_payload())
        return self._parse_quote_envelope(body)

    @log_execution("QuoteApi", "retrieve")
    async def retrieve(self) -> Quote:
        """获取服务端随机选择的一条名言"""
        body = await self._request("GET", QuoteEndpoints.RANDOM)
        return self._parse_quote_envelope(body)

    async def update(self, quote_id: int,
                     quote_input: Union[UpdateQuoteInput, Mapping[str, Any]]) -> Quote:
        """部分更新名言"""
        with LogContext("QuoteApi", "update", quote_id=quote_id):
            quote_input = validate_update_input(quote_input).unwrap()
            body = await self._request(
                "PATCH", QuoteEndpoints.UPDATE.format(quote_id=quote_id), quote_input.to_payload()
            )
            return self._parse_quote_envelope(body)

    async def delete(self, quote_id: int) -> None:
        """删除名言，响应体被忽略"""
        with LogContext("QuoteApi", "delete", quote_id=quote_id):
            await self._request("DELETE", QuoteEndpoints.DELETE.format(quote_id=quote_id), parse_body=False)

    async def health_check(self) -> GenericResponse:
        """检查服务端健康状态"""
        body = await self._request("GET", QuoteEndpoints.HEALTHCHECK)
        try:
            return GenericResponse.model_validate(body)
        except PydanticValidationError as e:
            raise ServerRejection(
                "Invalid health check response",
                ErrorCodes.SERVER_INVALID_RESPONSE,
                response_data=body,
                original=e
            ) from e
