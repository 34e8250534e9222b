"""Rewrite engine: resolve, preview, await a delimiter, plan, commit."""

from .errors import EngineBusyError, EngineStateError
from .plan import EditPlan, plan_add, plan_rewrap
from .rewrite import PendingCommand, RewriteEngine, RewriteResult
from .states import EngineState, TRANSITIONS

__all__ = [
    "EditPlan",
    "EngineBusyError",
    "EngineState",
    "EngineStateError",
    "PendingCommand",
    "RewriteEngine",
    "RewriteResult",
    "TRANSITIONS",
    "plan_add",
    "plan_rewrap",
]
