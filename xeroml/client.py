"""
XeroML Client Implementation

Async client for the XeroML intent-parsing API, supporting one-shot
parsing and multi-turn sessions.
"""

import asyncio
import json
import re
import time
from typing import Any, Dict, List, Optional, Type, TypeVar, Union

import httpx
from pydantic import BaseModel, ValidationError
import structlog

from .config import DEFAULT_BASE_URL, DEFAULT_TIMEOUT, load_config
from .errors import XeroMLConfigError, XeroMLServerError, XeroMLTimeoutError, map_error
from .session import Session
from .types import (
    IntentGraph,
    ParseResponse,
    SessionInfo,
    SessionListItem,
    SessionListResponse,
    UsageInfo,
)


logger = structlog.get_logger()

ModelT = TypeVar("ModelT", bound=BaseModel)

TIMEOUT_BODY = {"error": {"code": "timeout", "message": "Request timed out."}}
RETRY_AFTER_PATTERN = re.compile(r"\s*([0-9]+)")  # leading integer seconds


class XeroML:
    """
    Client for the XeroML API.

    Supports:
    - One-shot parsing (1 credit per call)
    - Creating and listing multi-turn sessions
    - Credit balance and usage stats

    Example:
        async with XeroML(api_key="xml_...") as xeroml:
            graph = await xeroml.parse("Help me plan a trip to Tokyo")
            session = await xeroml.create_session()
            graph = await session.parse("Build a REST API")
    """

    def __init__(
        self,
        api_key: str,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        if not api_key:
            raise XeroMLConfigError("XeroML: api_key is required.")
        if timeout is not None and timeout <= 0:
            raise XeroMLConfigError("XeroML: timeout must be positive.")

        self.api_key = api_key
        self.base_url = (base_url or DEFAULT_BASE_URL).rstrip("/")
        self.timeout = timeout if timeout is not None else DEFAULT_TIMEOUT
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None

    @classmethod
    def from_env(cls, transport: Optional[httpx.AsyncBaseTransport] = None, **overrides) -> "XeroML":
        """Create a client from XEROML_* environment variables (and .env)."""
        config = load_config(**overrides)
        return cls(
            api_key=config.api_key,
            base_url=config.base_url,
            timeout=config.timeout,
            transport=transport,
        )

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.aclose()

    async def aclose(self):
        """Close the underlying HTTP connection pool."""
        if self._client:
            await self._client.aclose()
            self._client = None

    @property
    def client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(
                timeout=httpx.Timeout(self.timeout),
                transport=self._transport,
            )
        return self._client

    def __repr__(self) -> str:
        return f"XeroML(base_url={self.base_url!r}, timeout={self.timeout})"

    async def parse(self, message: str, provider: Optional[str] = None) -> IntentGraph:
        """
        One-shot parse with no session. Costs 1 credit.

        Args:
            message: The user text to parse
            provider: Optional LLM provider to use server-side

        Returns:
            The parsed IntentGraph
        """
        body: Dict[str, Any] = {"message": message}
        if provider:
            body["provider"] = provider

        result = await self.request("POST", "/v1/parse", body, response_model=ParseResponse)
        return result.graph

    async def create_session(self, session_id: Optional[str] = None) -> Session:
        """
        Create a new multi-turn session. Free.

        Args:
            session_id: Optional caller-chosen session id

        Returns:
            A Session bound to the server's session id
        """
        body: Dict[str, Any] = {}
        if session_id:
            body["session_id"] = session_id

        info = await self.request("POST", "/v1/sessions", body, response_model=SessionInfo)
        logger.info("Session created", session_id=info.session_id)
        return Session(self, info.session_id)

    async def list_sessions(self, limit: Optional[int] = None) -> List[SessionListItem]:
        """List sessions for the authenticated API key, newest first."""
        query = f"?limit={limit}" if limit else ""
        result = await self.request(
            "GET", f"/v1/sessions{query}", None, response_model=SessionListResponse
        )
        return result.sessions

    async def get_usage(self) -> UsageInfo:
        """Get credit balance and usage stats. Free."""
        return await self.request("GET", "/v1/usage", None, response_model=UsageInfo)

    async def request(
        self,
        method: str,
        path: str,
        body: Optional[Dict[str, Any]] = None,
        response_model: Optional[Type[ModelT]] = None,
    ) -> Union[ModelT, Any]:
        """
        Send one request to the API. Used by Session as well.

        Args:
            method: HTTP method
            path: Path (with query string) appended to base_url
            body: JSON body, or None to send no payload
            response_model: Model to validate a successful response into

        Returns:
            The validated model, or the decoded JSON when no model is given

        Raises:
            XeroMLError: A typed error for any non-2xx response or timeout
        """
        url = f"{self.base_url}{path}"
        headers = {"X-API-Key": self.api_key}
        content = None
        if body is not None:
            headers["Content-Type"] = "application/json"
            content = json.dumps(body)

        logger.debug("Sending request", method=method, path=path)
        started = time.monotonic()

        try:
            response = await asyncio.wait_for(
                self.client.request(method, url, headers=headers, content=content),
                timeout=self.timeout,
            )
        except (asyncio.TimeoutError, httpx.TimeoutException) as e:
            logger.warning("Request timed out", method=method, path=path, timeout=self.timeout)
            raise map_error(XeroMLTimeoutError.status, TIMEOUT_BODY) from e

        logger.debug(
            "Received response",
            method=method,
            path=path,
            status=response.status_code,
            latency_ms=round((time.monotonic() - started) * 1000, 1),
        )

        if not response.is_success:
            error = map_error(
                response.status_code,
                self._error_body(response),
                self._retry_after(response),
            )
            logger.warning(
                "Request failed",
                method=method,
                path=path,
                status=error.status,
                code=error.code,
                request_id=error.request_id,
            )
            raise error

        return self._decode(response, response_model)

    @staticmethod
    def _error_body(response: httpx.Response) -> Dict[str, Any]:
        """Decode an error body, or synthesize one from the status text."""
        try:
            data = response.json()
        except ValueError:
            data = None
        if not isinstance(data, dict):
            data = {"error": {"message": response.reason_phrase}}
        return data

    @staticmethod
    def _retry_after(response: httpx.Response) -> Optional[int]:
        value = response.headers.get("Retry-After")
        if value is None:
            return None
        match = RETRY_AFTER_PATTERN.match(value)
        return int(match.group(1)) if match else None

    @staticmethod
    def _decode(response: httpx.Response, response_model: Optional[Type[ModelT]]):
        """Decode a 2xx body. A body that isn't the expected shape is a server error."""
        try:
            data = response.json()
            if response_model is None:
                return data
            return response_model.model_validate(data)
        except (ValueError, ValidationError) as e:
            logger.warning(
                "Invalid response body",
                status=response.status_code,
                model=getattr(response_model, "__name__", None),
                error=str(e),
            )
            raise XeroMLServerError(
                response.status_code,
                "invalid_response",
                "Response body did not match the expected format.",
                response.headers.get("X-Request-ID"),
            ) from e
