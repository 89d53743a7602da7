from examiner.services.storage import StorageService
from examiner.services.text_extractor import TextExtractor
from examiner.services.ai_client import AIClient, AICompletion
from examiner.services.prompt_builder import build_prompt
from examiner.services.response_parser import AnalysisResult, parse
from examiner.services.document_service import DocumentService
from examiner.services.analysis_service import AnalysisService, run_analysis_task

__all__ = [
    "StorageService",
    "TextExtractor",
    "AIClient",
    "AICompletion",
    "build_prompt",
    "AnalysisResult",
    "parse",
    "DocumentService",
    "AnalysisService",
    "run_analysis_task",
]
