"""
Executable commands declared in an Alloy model.
"""

from enum import Enum

from pydantic import BaseModel, Field


class CommandKind(str, Enum):
    """Alloy analysis command kinds."""

    RUN = "run"
    CHECK = "check"


class Command(BaseModel):
    """A `run` or `check` command, in declaration order."""

    index: int = Field(..., ge=0, description="Position among the model's commands")
    kind: CommandKind
    label: str = Field(..., description="Command name shown in feedback")
    offset: int = Field(default=0, ge=0, description="Character offset of the command keyword")

    @property
    def is_check(self) -> bool:
        return self.kind == CommandKind.CHECK
