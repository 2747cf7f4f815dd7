"""
XeroML Session

Handle for a multi-turn conversation tracked server-side.
"""

from typing import TYPE_CHECKING, Any, Dict, Optional
from urllib.parse import quote

import structlog

from .types import (
    DriftReport,
    IntentGraph,
    SessionGraphResponse,
    SessionHistory,
    SessionParseResponse,
    StatusResponse,
)

if TYPE_CHECKING:
    from .client import XeroML


logger = structlog.get_logger()


class Session:
    """
    A multi-turn session bound to a server-side session id.

    Holds no state beyond the id; turn counts, status and drift live on
    the server. Use `XeroML.create_session()` rather than constructing
    this directly.
    """

    def __init__(self, client: "XeroML", session_id: str):
        self._client = client
        self._session_id = session_id
        self._path = f"/v1/sessions/{quote(session_id, safe='')}"

    @property
    def session_id(self) -> str:
        return self._session_id

    def __repr__(self) -> str:
        return f"Session(session_id={self._session_id!r})"

    async def parse(self, message: str, provider: Optional[str] = None) -> IntentGraph:
        """
        Parse a user message within this session. Costs 1 credit.

        Args:
            message: The user text to parse
            provider: Optional LLM provider to use server-side

        Returns:
            The IntentGraph for this turn
        """
        body: Dict[str, Any] = {"message": message}
        if provider:
            body["provider"] = provider

        result = await self._client.request(
            "POST", f"{self._path}/parse", body, response_model=SessionParseResponse
        )
        return result.graph

    async def update(self, message: str, role: Optional[str] = None) -> None:
        """
        Feed an LLM response back into the session for drift tracking. Free.

        Args:
            message: The response text
            role: Who produced it (e.g. "assistant"); server default if omitted
        """
        body: Dict[str, Any] = {"message": message}
        if role:
            body["role"] = role

        await self._client.request(
            "POST", f"{self._path}/update", body, response_model=StatusResponse
        )

    async def check_drift(self) -> DriftReport:
        """Check whether intent drift has occurred. Free."""
        return await self._client.request(
            "GET", f"{self._path}/drift", None, response_model=DriftReport
        )

    async def get_graph(self) -> Optional[IntentGraph]:
        """Get the current IntentGraph, or None before the first parse. Free."""
        result = await self._client.request(
            "GET", f"{self._path}/graph", None, response_model=SessionGraphResponse
        )
        return result.graph

    async def get_history(self) -> SessionHistory:
        """Get per-turn graphs, drift events and the current evolved graph. Free."""
        return await self._client.request(
            "GET", f"{self._path}/history", None, response_model=SessionHistory
        )

    async def end(self) -> None:
        """End this session. Free."""
        await self._client.request(
            "POST", f"{self._path}/end", {}, response_model=StatusResponse
        )
        logger.info("Session ended", session_id=self._session_id)
