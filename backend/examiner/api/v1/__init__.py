from fastapi import APIRouter
from examiner.api.v1 import documents, analysis

router = APIRouter()

router.include_router(documents.router, prefix="/documents", tags=["documents"])
router.include_router(analysis.router, prefix="/analysis", tags=["analysis"])
