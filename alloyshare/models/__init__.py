"""
Data models for AlloyShare.

Core models:
- Model, Link: Persisted documents and the links that share them
- Instance, SolverRequest, SolverResponse, SolverMessage: Solver wire models
- CacheState, NavOutcome, NavigationResult: Instance navigation
- Feedback, LogClass: User-facing log lines
- SecretRegion, SecretSplit: Secret block extraction
- ShareResult, ResolvedLink: Sharing and link resolution results
- Command, CommandKind: Commands declared in a model
"""

from alloyshare.models.command import Command, CommandKind
from alloyshare.models.instance import Instance, SolverMessage, SolverRequest, SolverResponse
from alloyshare.models.model import Link, Model
from alloyshare.models.navigation import (
    CacheState,
    Feedback,
    LogClass,
    NavigationResult,
    NavOutcome,
)
from alloyshare.models.secret import SecretRegion, SecretSplit
from alloyshare.models.share import ResolvedLink, ShareResult

__all__ = [
    # Persisted models
    "Model",
    "Link",
    # Solver models
    "Instance",
    "SolverMessage",
    "SolverRequest",
    "SolverResponse",
    # Navigation models
    "CacheState",
    "NavOutcome",
    "NavigationResult",
    "Feedback",
    "LogClass",
    # Secret models
    "SecretRegion",
    "SecretSplit",
    # Sharing models
    "ShareResult",
    "ResolvedLink",
    # Commands
    "Command",
    "CommandKind",
]
