"""
Secret region models.
"""

from pydantic import BaseModel, Field


class SecretRegion(BaseModel):
    """Half-open [start, end) character range of a secret block."""

    start: int = Field(..., ge=0, description="Offset of the start marker")
    end: int = Field(..., ge=0, description="Offset of the end marker, or text length")
    closed: bool = Field(default=True, description="False when no end marker followed the start")

    @property
    def length(self) -> int:
        return self.end - self.start

    def text_of(self, text: str) -> str:
        return text[self.start : self.end]


class SecretSplit(BaseModel):
    """Source text split into its publicly visible part and the removed secrets."""

    public_text: str
    secrets: list[str] = Field(default_factory=list)

    @property
    def has_secrets(self) -> bool:
        return bool(self.secrets)
