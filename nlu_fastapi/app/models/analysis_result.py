"""Models for the raw analysis returned by the NLU provider.

Only the fields the service reads are declared; any other provider metadata
(relevance, count, confidence, disambiguation, ...) is kept as extra fields.
"""

from pydantic import BaseModel, ConfigDict, Field


class DetectedEntity(BaseModel):
    model_config = ConfigDict(extra="allow")

    text: str = Field(..., description="The entity text as found in the input")
    type: str = Field(..., description="Entity type, e.g. Location or Person")


class DetectedKeyword(BaseModel):
    model_config = ConfigDict(extra="allow")

    text: str = Field(..., description="The keyword text")


class DetectedConcept(BaseModel):
    model_config = ConfigDict(extra="allow")

    text: str = Field(..., description="The concept label")


class AnalysisResult(BaseModel):
    model_config = ConfigDict(extra="allow")

    entities: list[DetectedEntity] = Field(default_factory=list)
    keywords: list[DetectedKeyword] = Field(default_factory=list)
    concepts: list[DetectedConcept] = Field(default_factory=list)
