"""
XeroML Python SDK

Async client for the XeroML intent-parsing API.
"""

from .client import XeroML
from .session import Session
from .config import DEFAULT_BASE_URL, DEFAULT_TIMEOUT, ClientConfig, load_config
from .types import (
    ActionReadiness,
    AmbiguityLevel,
    Credits,
    DriftEvent,
    DriftReport,
    ErrorBody,
    ErrorDetail,
    GraphTurn,
    IntentGraph,
    IntentMeta,
    IntentScope,
    LatentStates,
    ParseResponse,
    RiskSensitivity,
    SessionGraphResponse,
    SessionHistory,
    SessionInfo,
    SessionListItem,
    SessionListResponse,
    SessionParseResponse,
    StatusResponse,
    SubGoal,
    SubGoalStatus,
    UsageInfo,
    UsageMonth,
)
from .errors import (
    XeroMLConfigError,
    XeroMLError,
    XeroMLAuthError,
    XeroMLCreditError,
    XeroMLRateLimitError,
    XeroMLValidationError,
    XeroMLParseError,
    XeroMLNotFoundError,
    XeroMLSessionEndedError,
    XeroMLTimeoutError,
    XeroMLServerError,
    map_error,
)

__version__ = "0.1.0"

__all__ = [
    "XeroML",
    "Session",
    "ClientConfig",
    "load_config",
    "DEFAULT_BASE_URL",
    "DEFAULT_TIMEOUT",
    "ActionReadiness",
    "AmbiguityLevel",
    "Credits",
    "DriftEvent",
    "DriftReport",
    "ErrorBody",
    "ErrorDetail",
    "GraphTurn",
    "IntentGraph",
    "IntentMeta",
    "IntentScope",
    "LatentStates",
    "ParseResponse",
    "RiskSensitivity",
    "SessionGraphResponse",
    "SessionHistory",
    "SessionInfo",
    "SessionListItem",
    "SessionListResponse",
    "SessionParseResponse",
    "StatusResponse",
    "SubGoal",
    "SubGoalStatus",
    "UsageInfo",
    "UsageMonth",
    "XeroMLConfigError",
    "XeroMLError",
    "XeroMLAuthError",
    "XeroMLCreditError",
    "XeroMLRateLimitError",
    "XeroMLValidationError",
    "XeroMLParseError",
    "XeroMLNotFoundError",
    "XeroMLSessionEndedError",
    "XeroMLTimeoutError",
    "XeroMLServerError",
    "map_error",
]
