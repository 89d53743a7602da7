"""Domain errors raised by the examiner services.

API routes translate these into HTTP responses; the analysis orchestrator
catches them at the run boundary and records the message on the analysis.
"""


class ExaminerError(Exception):
    """Base class for all examiner errors."""


class NotFoundError(ExaminerError):
    def __init__(self, entity: str, entity_id: object):
        super().__init__(f"{entity} not found: {entity_id}")
        self.entity = entity
        self.entity_id = entity_id


class AnalysisInProgressError(ExaminerError):
    """The document already has an analysis running."""


class InvalidDocumentError(ExaminerError):
    """Upload rejected before storage (empty or oversized file)."""


class ExtractionError(ExaminerError):
    pass


class UnsupportedFormatError(ExtractionError):
    pass


class CorruptFileError(ExtractionError):
    pass


class AIClientError(ExaminerError):
    pass


class TransportError(AIClientError):
    """Network, connection or HTTP status failure talking to the AI endpoint."""


class AITimeoutError(AIClientError, TimeoutError):
    """No AI response within the configured deadline."""


class MalformedResponseError(ExaminerError):
    """The AI output could not be turned into a valid analysis result."""
