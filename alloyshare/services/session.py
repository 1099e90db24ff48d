"""
Execution session state.
"""

from pydantic import BaseModel, ConfigDict, Field

from alloyshare.services.instance_cache import InstanceCache


class ExecutionSession(BaseModel):
    """
    One execution of one command, and the instances it produced.

    Replaced with a higher epoch whenever the command is re-run, the document
    is edited, or an in-flight request is cancelled. Responses carrying an
    older epoch are stale.
    """

    model_config = ConfigDict(arbitrary_types_allowed=True)

    epoch: int = Field(default=0, ge=0)
    command_index: int = Field(default=-1, description="Selected command, -1 if none")
    command_label: str = ""
    is_check: bool = False
    cache: InstanceCache = Field(default_factory=InstanceCache)
    last_model_id: str | None = Field(
        default=None, description="Model id returned by the last execution, for derivations"
    )
    busy: bool = Field(default=False, description="A solver request is outstanding")
