from typing import Annotated, NoReturn
from fastapi import Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession
from examiner.core import get_db
from examiner.core.exceptions import (
    AnalysisInProgressError,
    ExaminerError,
    ExtractionError,
    InvalidDocumentError,
    NotFoundError,
)
from examiner.services.analysis_service import AnalysisService
from examiner.services.document_service import DocumentService


def get_document_service(db: Annotated[AsyncSession, Depends(get_db)]) -> DocumentService:
    return DocumentService(db)


def get_analysis_service(db: Annotated[AsyncSession, Depends(get_db)]) -> AnalysisService:
    return AnalysisService(db)


def raise_http_error(error: ExaminerError) -> NoReturn:
    """Translate a service error into the matching HTTP response."""
    if isinstance(error, NotFoundError):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(error))
    if isinstance(error, AnalysisInProgressError):
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(error))
    if isinstance(error, (InvalidDocumentError, ExtractionError)):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(error))
    raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(error))
