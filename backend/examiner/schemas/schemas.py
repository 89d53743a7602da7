import uuid
from datetime import datetime
from pydantic import BaseModel, ConfigDict
from examiner.models import (
    AnalysisStatus, DocumentStatus, DocumentType, FeedbackType, FileType, Severity,
)


class DocumentResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    owner_id: uuid.UUID
    title: str
    filename: str
    file_type: FileType
    file_size: int
    word_count: int | None
    page_count: int | None
    document_type: DocumentType
    status: DocumentStatus
    version: int
    parent_document_id: uuid.UUID | None
    created_at: datetime
    updated_at: datetime


class AnalysisResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    document_id: uuid.UUID
    analysis_type: str
    status: AnalysisStatus
    structure_score: float | None = None
    argumentation_score: float | None = None
    methodology_score: float | None = None
    writing_quality_score: float | None = None
    examinability_score: float | None = None
    overall_score: float | None = None
    processing_time: int | None = None
    tokens_used: int | None = None
    error_message: str | None = None
    created_at: datetime
    completed_at: datetime | None = None


class FeedbackReportResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    analysis_id: uuid.UUID
    section: str
    feedback_type: FeedbackType
    title: str | None
    content: str
    severity: Severity
    page_reference: str | None
    order_index: int
    created_at: datetime


class AnalysisAccepted(BaseModel):
    message: str = "Analysis started"
    document_id: uuid.UUID
    analysis: AnalysisResponse
