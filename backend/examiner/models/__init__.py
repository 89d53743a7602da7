from examiner.models.models import (
    Document, Analysis, FeedbackReport,
    FileType, DocumentType, DocumentStatus, AnalysisStatus, FeedbackType, Severity,
    COMPREHENSIVE_ANALYSIS,
)

__all__ = [
    "Document", "Analysis", "FeedbackReport",
    "FileType", "DocumentType", "DocumentStatus", "AnalysisStatus", "FeedbackType", "Severity",
    "COMPREHENSIVE_ANALYSIS",
]
