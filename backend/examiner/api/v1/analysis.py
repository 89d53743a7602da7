import uuid
from typing import Annotated
from fastapi import APIRouter, Depends
from examiner.core.exceptions import ExaminerError
from examiner.schemas import AnalysisResponse, FeedbackReportResponse
from examiner.services.analysis_service import AnalysisService
from examiner.api.v1.deps import get_analysis_service, raise_http_error

router = APIRouter()


@router.get("/{analysis_id}", response_model=AnalysisResponse)
async def get_analysis(
    analysis_id: uuid.UUID,
    analyses: Annotated[AnalysisService, Depends(get_analysis_service)],
):
    try:
        return await analyses.get_analysis(analysis_id)
    except ExaminerError as e:
        raise_http_error(e)


@router.get("/{analysis_id}/feedback", response_model=list[FeedbackReportResponse])
async def get_analysis_feedback(
    analysis_id: uuid.UUID,
    analyses: Annotated[AnalysisService, Depends(get_analysis_service)],
):
    """Feedback items in the order the model returned them."""
    try:
        return await analyses.get_feedback(analysis_id)
    except ExaminerError as e:
        raise_http_error(e)
