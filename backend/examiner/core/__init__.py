from examiner.core.config import Settings, get_settings
from examiner.core.database import Base, get_db, async_session_maker, engine
from examiner.core.exceptions import (
    ExaminerError,
    NotFoundError,
    AnalysisInProgressError,
    InvalidDocumentError,
    ExtractionError,
    UnsupportedFormatError,
    CorruptFileError,
    AIClientError,
    TransportError,
    AITimeoutError,
    MalformedResponseError,
)

__all__ = [
    "Settings",
    "get_settings",
    "Base",
    "get_db",
    "async_session_maker",
    "engine",
    "ExaminerError",
    "NotFoundError",
    "AnalysisInProgressError",
    "InvalidDocumentError",
    "ExtractionError",
    "UnsupportedFormatError",
    "CorruptFileError",
    "AIClientError",
    "TransportError",
    "AITimeoutError",
    "MalformedResponseError",
]
