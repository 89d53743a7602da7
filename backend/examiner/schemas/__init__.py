from examiner.schemas.schemas import (
    DocumentResponse,
    AnalysisResponse,
    FeedbackReportResponse,
    AnalysisAccepted,
)

__all__ = [
    "DocumentResponse",
    "AnalysisResponse",
    "FeedbackReportResponse",
    "AnalysisAccepted",
]
