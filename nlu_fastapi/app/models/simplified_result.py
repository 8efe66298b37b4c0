"""Response model for the simplified NLU result."""

from pydantic import BaseModel, Field


class SimplifiedResult(BaseModel):
    location: str = Field(
        ..., description='First Location entity found, or "none"'
    )
    concepts: list[str] = Field(..., description="Concept labels in provider order")
    entities: list[str] = Field(
        ..., description="Texts of all non-Location entities in provider order"
    )
