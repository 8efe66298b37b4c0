"""Initialize the models package."""

from .analysis_request import AnalysisRequest, FeatureLimits
from .analysis_result import (
    AnalysisResult,
    DetectedConcept,
    DetectedEntity,
    DetectedKeyword,
)
from .error_detail import ErrorDetail, ErrorResponse
from .simplified_result import SimplifiedResult

__all__ = [
    "AnalysisRequest",
    "AnalysisResult",
    "DetectedConcept",
    "DetectedEntity",
    "DetectedKeyword",
    "ErrorDetail",
    "ErrorResponse",
    "FeatureLimits",
    "SimplifiedResult",
]
