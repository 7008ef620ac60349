"""Orchestrator package -- the conversation state machine.

Provides the Orchestrator class, its state enum, and the SessionResult
returned when a session ends.
"""

from agentloop.orchestrator.loop import Inference, Orchestrator
from agentloop.orchestrator.models import OrchestratorState, SessionResult

__all__ = [
    "Orchestrator",
    "Inference",
    "OrchestratorState",
    "SessionResult",
]
