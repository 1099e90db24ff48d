"""
Results of sharing a model and resolving a shared link.
"""

from pydantic import BaseModel, Field


class ShareResult(BaseModel):
    """
    Links created for a newly shared model.

    `private_link_id` is None when the text holds no secrets; that means no
    private sharing is needed, not that something failed.
    """

    public_link_id: str
    private_link_id: str | None = None
    model_id: str
    original: str = Field(..., description="Visibility root assigned to the new model")

    @property
    def has_private_link(self) -> bool:
        return self.private_link_id is not None


class ResolvedLink(BaseModel):
    """A model as seen through one of its links."""

    link_id: str
    model_id: str
    is_private: bool
    source_text: str = Field(..., description="Full text for private links, redacted for public")
    root_id: str | None = Field(default=None, description="Visibility root of the model")
    derivation_of: str | None = None
    redacted: bool = Field(default=False, description="True when secret regions were removed")
