"""Model for a single text analysis sent to the NLU provider."""

from pydantic import BaseModel, Field, PositiveInt


class FeatureLimits(BaseModel):
    entities: PositiveInt = Field(default=3, description="Maximum entities returned")
    keywords: PositiveInt = Field(default=3, description="Maximum keywords returned")
    concepts: PositiveInt = Field(default=3, description="Maximum concepts returned")


class AnalysisRequest(BaseModel):
    text: str = Field(..., min_length=1, description="The text to analyze")
    feature_limits: FeatureLimits = Field(
        default_factory=FeatureLimits, description="Per-feature result caps"
    )
