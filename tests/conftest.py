"""
Pytest configuration and fixtures for XeroML SDK tests.
"""

import copy
import json
import os
import sys
from typing import Any, AsyncGenerator, Dict, List, Optional

import httpx
import pytest
import pytest_asyncio

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from xeroml import XeroML


MOCK_GRAPH: Dict[str, Any] = {
    "schema_version": "1.0",
    "root_goal": "book a flight",
    "sub_goals": [],
    "meta": {
        "source": "openai",
        "confidence": 0.95,
        "negotiation_history": [],
        "latent_states": {
            "goal_intent": "book_flight",
            "action_readiness": "deciding",
            "ambiguity_level": "clear",
            "risk_sensitivity": "low",
            "intent_scope": "single",
        },
    },
}

NESTED_GRAPH: Dict[str, Any] = {
    "schema_version": "1.0",
    "root_goal": "plan a trip to Tokyo",
    "sub_goals": [
        {
            "id": "sg_1",
            "goal": "book flights",
            "status": "active",
            "priority": 1,
            "success_criteria": ["round trip under $1200"],
            "constraints": ["economy"],
            "uncertainty": 0.2,
            "context_requirements": ["travel dates"],
            "modality": "text",
            "dependencies": [],
            "children": [
                {
                    "id": "sg_1_1",
                    "goal": "compare airlines",
                    "status": "pending",
                    "priority": 2,
                    "success_criteria": [],
                    "constraints": [],
                    "uncertainty": 0.4,
                    "context_requirements": [],
                    "modality": "text",
                    "dependencies": [],
                    "children": [],
                }
            ],
        },
        {
            "id": "sg_2",
            "goal": "book a hotel",
            "status": "blocked",
            "priority": 2,
            "success_criteria": [],
            "constraints": ["near Shinjuku"],
            "uncertainty": 0.5,
            "context_requirements": [],
            "modality": "text",
            "dependencies": ["sg_1"],
            "children": [],
        },
    ],
    "meta": {
        "source": "anthropic",
        "confidence": 0.82,
        "negotiation_history": ["user narrowed dates to April"],
        "latent_states": {
            "goal_intent": "plan_trip",
            "action_readiness": "exploring",
            "ambiguity_level": "partial",
            "risk_sensitivity": "medium",
            "intent_scope": "multi_step",
        },
    },
}

MOCK_USAGE: Dict[str, Any] = {
    "credits": {"used": 10, "total": 1000, "remaining": 990},
    "tier": "free",
    "rate_limit": 60,
    "usage": [{"month": "2026-02", "parse_calls": 10, "drift_checks": 2, "session_creates": 3}],
}

MOCK_SESSIONS: List[Dict[str, Any]] = [
    {
        "session_id": "s1",
        "status": "active",
        "turn_count": 3,
        "created_at": "2026-02-01T00:00:00Z",
        "updated_at": "2026-02-01T01:00:00Z",
    },
]

SESSION_CREATED: Dict[str, Any] = {
    "session_id": "sess_1",
    "status": "active",
    "created_at": "2026-02-01T00:00:00Z",
}


class MockAPI:
    """
    Queue of canned responses served through httpx.MockTransport.

    Every request the client sends is recorded in `requests`.
    """

    def __init__(self):
        self.requests: List[httpx.Request] = []
        self._responses: List[httpx.Response] = []

    def add(
        self,
        json: Any = None,
        status_code: int = 200,
        headers: Optional[Dict[str, str]] = None,
        content: Optional[bytes] = None,
    ):
        if content is not None:
            response = httpx.Response(status_code, content=content, headers=headers)
        else:
            response = httpx.Response(status_code, json=json, headers=headers)
        self._responses.append(response)

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if not self._responses:
            raise AssertionError(f"Unexpected request: {request.method} {request.url}")
        return self._responses.pop(0)

    @property
    def last_request(self) -> httpx.Request:
        return self.requests[-1]

    def body(self, index: int = -1) -> Any:
        """Decoded JSON body of a recorded request."""
        return json.loads(self.requests[index].content)

    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)


@pytest.fixture
def api() -> MockAPI:
    return MockAPI()


@pytest_asyncio.fixture
async def client(api: MockAPI) -> AsyncGenerator[XeroML, None]:
    """A client wired to the mock API."""
    xeroml = XeroML(api_key="test_key", transport=api.transport())
    yield xeroml
    await xeroml.aclose()


@pytest.fixture
def mock_graph() -> Dict[str, Any]:
    return copy.deepcopy(MOCK_GRAPH)


@pytest.fixture
def nested_graph() -> Dict[str, Any]:
    return copy.deepcopy(NESTED_GRAPH)


@pytest.fixture
def mock_usage() -> Dict[str, Any]:
    return copy.deepcopy(MOCK_USAGE)


@pytest.fixture
def mock_sessions() -> List[Dict[str, Any]]:
    return copy.deepcopy(MOCK_SESSIONS)


@pytest_asyncio.fixture
async def session(api: MockAPI, client: XeroML):
    """A session created through the mock API; its create request is discarded."""
    api.add(json=SESSION_CREATED)
    created = await client.create_session()
    api.requests.clear()
    return created


@pytest.fixture
def clean_env(monkeypatch):
    """Remove XEROML_* variables and stop .env files leaking into tests."""
    for name in ("XEROML_API_KEY", "XEROML_BASE_URL", "XEROML_TIMEOUT"):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setattr("xeroml.config.load_dotenv", lambda *args, **kwargs: False)
    return monkeypatch
