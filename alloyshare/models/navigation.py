"""
Instance navigation and user-facing feedback models.
"""

from enum import Enum

from pydantic import BaseModel, Field

from alloyshare.models.instance import Instance


class CacheState(str, Enum):
    """Lifecycle of an instance cache within one execution session."""

    EMPTY = "empty"  # Nothing cached yet
    LOADED = "loaded"  # At least one instance cached, no fetch outstanding
    EXHAUSTED_PENDING = "exhausted_pending"  # At last known instance, fetch requested
    TERMINAL = "terminal"  # Solver confirmed no further instances


class NavOutcome(str, Enum):
    """Result of a single advance/retreat on the cache."""

    MOVED = "moved"
    NEEDS_FETCH = "needs_fetch"
    FETCH_PENDING = "fetch_pending"
    NO_MORE = "no_more"
    NO_PREVIOUS = "no_previous"
    EMPTY = "empty"


class NavigationResult(BaseModel):
    """Outcome of a navigation step plus the instance now current, if it moved."""

    outcome: NavOutcome
    cursor: int
    instance: Instance | None = None

    @property
    def moved(self) -> bool:
        return self.outcome == NavOutcome.MOVED


class LogClass(str, Enum):
    """Styling class of a feedback line."""

    ERROR = "log-error"
    WARNING = "log-warning"
    COMPLETE = "log-complete"
    WRONG = "log-wrong"
    INFO = "log-info"


class Feedback(BaseModel):
    """Ordered log lines shown to the user after an execution or navigation step."""

    messages: list[str] = Field(default_factory=list)
    classes: list[LogClass] = Field(default_factory=list)

    def add(self, message: str, log_class: LogClass) -> "Feedback":
        self.messages.append(message)
        self.classes.append(log_class)
        return self

    @classmethod
    def error(cls, message: str) -> "Feedback":
        return cls().add(message, LogClass.ERROR)

    @classmethod
    def info(cls, message: str) -> "Feedback":
        return cls().add(message, LogClass.INFO)

    @property
    def is_error(self) -> bool:
        return LogClass.ERROR in self.classes

    def __str__(self) -> str:
        return "\n".join(self.messages)
