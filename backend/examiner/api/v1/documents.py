import uuid
from typing import Annotated
from fastapi import APIRouter, BackgroundTasks, Depends, File, Form, HTTPException, UploadFile, status
from examiner.core.config import get_settings
from examiner.core.exceptions import ExaminerError
from examiner.models import DocumentType
from examiner.schemas import AnalysisAccepted, AnalysisResponse, DocumentResponse
from examiner.services.analysis_service import AnalysisService, run_analysis_task
from examiner.services.document_service import DocumentService
from examiner.api.v1.deps import get_analysis_service, get_document_service, raise_http_error

router = APIRouter()
settings = get_settings()


@router.post("/upload", response_model=DocumentResponse, status_code=status.HTTP_201_CREATED)
async def upload_document(
    documents: Annotated[DocumentService, Depends(get_document_service)],
    owner_id: Annotated[uuid.UUID, Form()],
    file: UploadFile = File(...),
    title: Annotated[str | None, Form()] = None,
    document_type: Annotated[DocumentType | None, Form()] = None,
    parent_document_id: Annotated[uuid.UUID | None, Form()] = None,
):
    """Upload a PDF, DOCX, TXT or MD file."""
    max_size = settings.max_upload_bytes
    content = await file.read(max_size + 1)
    try:
        return await documents.upload_document(
            content,
            file.filename or "",
            owner_id,
            title=title,
            document_type=document_type,
            parent_document_id=parent_document_id,
            max_size=max_size,
        )
    except ExaminerError as e:
        raise_http_error(e)


@router.get("", response_model=list[DocumentResponse])
async def list_documents(
    owner_id: uuid.UUID,
    documents: Annotated[DocumentService, Depends(get_document_service)],
):
    return await documents.list_documents(owner_id)


@router.get("/{document_id}", response_model=DocumentResponse)
async def get_document(
    document_id: uuid.UUID,
    documents: Annotated[DocumentService, Depends(get_document_service)],
):
    try:
        return await documents.get_document(document_id)
    except ExaminerError as e:
        raise_http_error(e)


@router.delete("/{document_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_document(
    document_id: uuid.UUID,
    documents: Annotated[DocumentService, Depends(get_document_service)],
):
    try:
        await documents.delete_document(document_id)
    except ExaminerError as e:
        raise_http_error(e)


@router.post("/{document_id}/analyze", response_model=AnalysisAccepted, status_code=status.HTTP_202_ACCEPTED)
async def analyze_document(
    document_id: uuid.UUID,
    background_tasks: BackgroundTasks,
    analyses: Annotated[AnalysisService, Depends(get_analysis_service)],
):
    """Start an analysis run; poll the returned analysis for the outcome."""
    try:
        analysis = await analyses.request_analysis(document_id)
    except ExaminerError as e:
        raise_http_error(e)

    background_tasks.add_task(run_analysis_task, analysis.id)

    return AnalysisAccepted(
        document_id=document_id,
        analysis=AnalysisResponse.model_validate(analysis),
    )


@router.get("/{document_id}/analyses", response_model=list[AnalysisResponse])
async def list_document_analyses(
    document_id: uuid.UUID,
    analyses: Annotated[AnalysisService, Depends(get_analysis_service)],
):
    try:
        return await analyses.list_analyses(document_id)
    except ExaminerError as e:
        raise_http_error(e)


@router.get("/{document_id}/analyses/latest", response_model=AnalysisResponse)
async def get_latest_document_analysis(
    document_id: uuid.UUID,
    analyses: Annotated[AnalysisService, Depends(get_analysis_service)],
):
    try:
        analysis = await analyses.get_latest_analysis(document_id)
    except ExaminerError as e:
        raise_http_error(e)
    if not analysis:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Document has no analyses")
    return analysis
