"""
XeroML API Models

Pydantic models matching the XeroML intent-parsing API wire format.
Every model is immutable and built from a decoded response body.
"""

from enum import Enum
from typing import Any, Dict, Iterator, List, Optional
from pydantic import BaseModel, ConfigDict, Field


class _Record(BaseModel):
    """Base for all wire records: frozen, unknown fields ignored."""
    model_config = ConfigDict(frozen=True, extra="ignore")


# =============================================================================
# Latent States
# =============================================================================

class SubGoalStatus(str, Enum):
    """Lifecycle of a sub-goal within an intent graph."""
    PENDING = "pending"
    ACTIVE = "active"
    DONE = "done"
    BLOCKED = "blocked"
    ABANDONED = "abandoned"
    BACKGROUND = "background"  # Still relevant but not being worked on


class ActionReadiness(str, Enum):
    EXPLORING = "exploring"
    DECIDING = "deciding"
    EXECUTING = "executing"


class AmbiguityLevel(str, Enum):
    CLEAR = "clear"
    PARTIAL = "partial"
    CONFLICTING = "conflicting"


class RiskSensitivity(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class IntentScope(str, Enum):
    SINGLE = "single"
    COMPOUND = "compound"
    MULTI_STEP = "multi_step"


class LatentStates(_Record):
    """
    Categorical read of the conversation behind an intent.
    """
    goal_intent: str
    action_readiness: ActionReadiness
    ambiguity_level: AmbiguityLevel
    risk_sensitivity: RiskSensitivity
    intent_scope: IntentScope


# =============================================================================
# Intent Graph
# =============================================================================

class IntentMeta(_Record):
    """Confidence and provenance metadata for an intent graph."""
    source: str
    confidence: float
    negotiation_history: List[str] = Field(default_factory=list)
    latent_states: LatentStates


class SubGoal(_Record):
    """
    A node in the sub-goal tree.

    `children` are owned by this node and form a tree. `dependencies` hold
    ids of other sub-goals (often siblings) and are references only.
    """
    id: str
    goal: str
    status: SubGoalStatus
    priority: float
    success_criteria: List[str] = Field(default_factory=list)
    constraints: List[str] = Field(default_factory=list)
    uncertainty: float = 0.0
    context_requirements: List[str] = Field(default_factory=list)
    modality: str = ""
    dependencies: List[str] = Field(default_factory=list)
    children: List["SubGoal"] = Field(default_factory=list)

    def walk(self) -> Iterator["SubGoal"]:
        """Yield this sub-goal and all its descendants, depth-first."""
        yield self
        for child in self.children:
            yield from child.walk()


class IntentGraph(_Record):
    """
    One parsed snapshot of user intent: a root goal, a tree of
    sub-goals, and metadata about confidence and ambiguity.
    """
    schema_version: str
    root_goal: str
    sub_goals: List[SubGoal] = Field(default_factory=list)
    meta: IntentMeta

    def walk(self) -> Iterator[SubGoal]:
        """Yield every sub-goal in the graph, depth-first."""
        for sub_goal in self.sub_goals:
            yield from sub_goal.walk()

    def find_sub_goal(self, sub_goal_id: str) -> Optional[SubGoal]:
        """Return the sub-goal with the given id, or None."""
        for sub_goal in self.walk():
            if sub_goal.id == sub_goal_id:
                return sub_goal
        return None


# =============================================================================
# Drift
# =============================================================================

class DriftReport(_Record):
    """Result of a drift check on a session."""
    detected: bool
    drift_type: Optional[str] = None
    severity: float = 0.0
    description: str = ""
    previous_goal: Optional[str] = None
    current_goal: Optional[str] = None


# =============================================================================
# Response Models
# =============================================================================

class ParseResponse(_Record):
    """Response from POST /v1/parse."""
    graph: IntentGraph
    session_id: Optional[str] = None
    request_id: str
    latency_ms: float


class SessionParseResponse(_Record):
    """Response from POST /v1/sessions/{id}/parse."""
    graph: IntentGraph
    session_id: str
    turn_number: int
    request_id: str
    latency_ms: float


class SessionInfo(_Record):
    """Response from POST /v1/sessions."""
    session_id: str
    status: str
    created_at: str


class SessionListItem(_Record):
    session_id: str
    status: str
    turn_count: int
    created_at: str
    updated_at: str


class SessionListResponse(_Record):
    sessions: List[SessionListItem] = Field(default_factory=list)


class SessionGraphResponse(_Record):
    """Response from GET /v1/sessions/{id}/graph. `graph` is null before the first parse."""
    graph: Optional[IntentGraph]
    session_id: str
    turn_count: int


class StatusResponse(_Record):
    """Acknowledgement returned by session update and end."""
    status: str
    session_id: str


# =============================================================================
# Session History
# =============================================================================

class GraphTurn(_Record):
    """The graph produced by one session turn, with its metadata."""
    turn_number: int
    graph: IntentGraph
    root_goal: str
    confidence: float
    sub_goal_count: int
    provider: str
    latency_ms: float
    created_at: str


class DriftEvent(_Record):
    """A drift detected between two turns."""
    turn_number: int
    drift_type: str
    severity: float
    description: str
    previous_goal: Optional[str] = None
    current_goal: Optional[str] = None
    created_at: str


class SessionHistory(_Record):
    """Response from GET /v1/sessions/{id}/history."""
    session_id: str
    status: str
    turn_count: int
    current_graph: Optional[IntentGraph] = None
    graphs: List[GraphTurn] = Field(default_factory=list)
    drift_events: List[DriftEvent] = Field(default_factory=list)


# =============================================================================
# Usage
# =============================================================================

class Credits(_Record):
    used: int
    total: int
    remaining: int


class UsageMonth(_Record):
    month: str  # YYYY-MM
    parse_calls: int
    drift_checks: int
    session_creates: int


class UsageInfo(_Record):
    """Credit balance and per-month usage for the authenticated API key."""
    credits: Credits
    tier: str
    rate_limit: int
    usage: List[UsageMonth] = Field(default_factory=list)


# =============================================================================
# Errors
# =============================================================================

class ErrorDetail(_Record):
    code: Optional[str] = None
    message: Optional[str] = None
    status: Optional[int] = None
    request_id: Optional[str] = None
    details: Optional[Dict[str, Any]] = None


class ErrorBody(_Record):
    """Error envelope: {"error": {code, message, status?, request_id?, details?}}."""
    error: Optional[ErrorDetail] = None
