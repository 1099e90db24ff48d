"""
Solver request/response models.

The solver speaks a loose JSON dialect: a response is either a single
instance object or an envelope with an `instances` list, and error details
may arrive flat (`alloy_error: true, msg, line, ...`) or nested
(`alloy_error: {msg, line, ...}`). These models normalize both.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator

_MESSAGE_KEYS = ("msg", "line", "column", "line2", "column2")


class SolverMessage(BaseModel):
    """Error or warning reported by the solver, with an optional 1-based source range."""

    msg: str = ""
    line: int | None = None
    column: int | None = None
    line2: int | None = None
    column2: int | None = None

    @property
    def has_range(self) -> bool:
        return bool(self.line)

    def describe(self) -> str:
        """Message text, suffixed with `(line:column)-(line2:column2)` when a range exists."""
        if not self.has_range:
            return self.msg
        column = self.column or 1
        line2 = self.line2 or self.line
        column2 = self.column2 or column
        return f"{self.msg} ({self.line}:{column})-({line2}:{column2})"

    def zero_based_range(self) -> tuple[int, int, int, int] | None:
        """
        Convert the solver's 1-based range to the editor's 0-based one.

        Returns:
            (line, column, line2, column2) or None if the message has no range
        """
        if not self.has_range:
            return None
        line = self.line
        column = self.column or 1
        line2 = self.line2 or line
        column2 = self.column2 or column
        return (line - 1, column - 1, line2 - 1, column2 - 1)


class Instance(BaseModel):
    """
    One solver answer for a command.

    Either a concrete solution (`instance` holds its states, rendered by the
    visualizer) or a marker that no further solution exists (`unsat`).
    Any extra solver-defined payload is kept as-is.
    """

    model_config = ConfigDict(extra="allow")

    unsat: bool = False
    check: bool = False
    instance: list[Any] = Field(default_factory=list)
    alloy_error: SolverMessage | None = None
    warning_error: SolverMessage | None = None

    @model_validator(mode="before")
    @classmethod
    def _lift_flat_messages(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        data = dict(data)
        flat = {key: data[key] for key in _MESSAGE_KEYS if key in data}
        for key in ("alloy_error", "warning_error"):
            value = data.get(key)
            if value is True:
                data[key] = flat
            elif value is False:
                data[key] = None
        return data

    @property
    def satisfiable(self) -> bool:
        return not self.unsat and self.alloy_error is None

    @property
    def graph(self) -> Any:
        """First state of the solution, or None."""
        return self.instance[0] if self.instance else None


class SolverRequest(BaseModel):
    """Payload of a get/next instances call."""

    model_config = ConfigDict(populate_by_name=True)

    source_text: str = Field(..., alias="sourceText")
    command_index: int = Field(..., alias="commandIndex")
    is_private: bool = Field(default=False, alias="isPrivateSession")
    last_model_id: str | None = Field(default=None, alias="lastDerivationId")

    def to_wire(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True)


class SolverResponse(BaseModel):
    """
    Normalized solver reply: the derivation id plus a batch of instances.

    A bare instance object is wrapped into a one-element batch.
    """

    model_config = ConfigDict(populate_by_name=True)

    new_model_id: str | None = Field(default=None, alias="newModelId")
    instances: list[Instance] = Field(default_factory=list)

    @model_validator(mode="before")
    @classmethod
    def _normalize_batch(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        if data.get("instances") is not None:
            return data
        single = dict(data)
        single.pop("instances", None)
        new_model_id = single.pop("newModelId", None)
        snake_id = single.pop("new_model_id", None)
        return {"newModelId": new_model_id or snake_id, "instances": [single]}

    @property
    def first(self) -> Instance | None:
        return self.instances[0] if self.instances else None
