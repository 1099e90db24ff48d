"""
Persisted model and link records.

Models form two overlapping structures:
- derivation tree: Model.derivation_of points at the model it was edited from
- visibility forest: Model.original points at the nearest ancestor that is a
  lineage root (a model that introduced secret text, or the first model)
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class Model(BaseModel):
    """
    A versioned Alloy document.

    Created once per share/execute action and immutable afterwards, except for
    the `original` backfill performed while it is being created.
    """

    model_config = ConfigDict(json_encoders={datetime: lambda v: v.isoformat()})

    id: str = Field(..., description="Unique model ID (model_xxx)")
    source_text: str = Field(..., description="Full Alloy source text")
    created_at: datetime = Field(default_factory=datetime.now, description="Creation timestamp")
    derivation_of: str | None = Field(
        default=None, description="Model this one was derived from"
    )
    original: str | None = Field(
        default=None, description="Visibility root of this model's lineage"
    )

    def is_root(self) -> bool:
        """Check whether this model is its own visibility root."""
        return self.original == self.id


class Link(BaseModel):
    """
    Shareable link to a model.

    A link never changes after creation. Each share creates one public link
    and, when the text holds secrets, one private link.
    """

    id: str = Field(..., description="Unique link ID (link_xxx)")
    model_id: str = Field(..., description="Model the link resolves to")
    is_private: bool = Field(default=False, description="Grants access to secret text")
    created_at: datetime = Field(default_factory=datetime.now, description="Creation timestamp")
