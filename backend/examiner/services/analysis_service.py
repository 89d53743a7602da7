import uuid
import logging
from datetime import datetime, timezone
from decimal import Decimal
from functools import lru_cache
from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
from examiner.core.config import get_settings
from examiner.core.database import async_session_maker
from examiner.core.exceptions import AnalysisInProgressError, NotFoundError
from examiner.models import (
    Analysis,
    AnalysisStatus,
    COMPREHENSIVE_ANALYSIS,
    Document,
    DocumentStatus,
    DocumentType,
    FeedbackReport,
)
from examiner.services.ai_client import AIClient
from examiner.services.openai_settings import get_ai_client_config
from examiner.services.prompt_builder import build_prompt
from examiner.services.response_parser import AnalysisResult, parse
from examiner.services.text_extractor import TextExtractor

logger = logging.getLogger(__name__)

INTERRUPTED_MESSAGE = "Analysis interrupted by service restart"
_SCORE_QUANTUM = Decimal("0.01")


@lru_cache
def get_ai_client() -> AIClient:
    """Process-wide AI client, so every run shares one concurrency limit."""
    return AIClient(get_ai_client_config())


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


def _to_score(value: float) -> Decimal:
    return Decimal(str(value)).quantize(_SCORE_QUANTUM)


def _error_message(error: BaseException) -> str:
    return str(error) or error.__class__.__name__


def _clip(value: str | None, field: str, analysis_id: uuid.UUID, index: int) -> str | None:
    """Fit a feedback value to its column width, logging anything cut off."""
    if value is None:
        return None
    limit = FeedbackReport.__table__.c[field].type.length
    if len(value) <= limit:
        return value
    logger.warning(
        "Analysis %s feedback %d: %s truncated from %d to %d chars",
        analysis_id, index, field, len(value), limit,
    )
    return value[:limit]


class AnalysisService:
    """Drives documents through extraction, AI evaluation and persistence.

    Analysis records move PENDING -> IN_PROGRESS -> COMPLETED | FAILED and are
    never reused once terminal. The owning document's status doubles as an
    advisory lock: ANALYZING while a run is active, COMPLETED or FAILED after.
    """

    def __init__(
        self,
        db: AsyncSession,
        ai_client: AIClient | None = None,
        extractor: TextExtractor | None = None,
        max_document_chars: int | None = None,
    ):
        self.db = db
        self.ai_client = ai_client or get_ai_client()
        self.extractor = extractor or TextExtractor()
        self.max_document_chars = max_document_chars or get_settings().max_document_chars

    async def request_analysis(self, document_id: uuid.UUID) -> Analysis:
        """Accept an analysis request and return the new PENDING record.

        Raises NotFoundError for an unknown document and AnalysisInProgressError
        when another run holds the document.
        """
        document = await self.db.get(Document, document_id)
        if not document:
            raise NotFoundError("Document", document_id)

        locked = await self.db.execute(
            update(Document)
            .where(Document.id == document_id, Document.status != DocumentStatus.ANALYZING)
            .values(status=DocumentStatus.ANALYZING, updated_at=_utc_now())
        )
        if locked.rowcount == 0:
            # Nothing was written; commit keeps the caller's loaded objects intact.
            await self.db.commit()
            raise AnalysisInProgressError(f"Document {document_id} is already being analyzed")

        analysis = Analysis(
            document_id=document_id,
            analysis_type=COMPREHENSIVE_ANALYSIS,
            status=AnalysisStatus.PENDING,
        )
        self.db.add(analysis)
        await self.db.commit()
        await self.db.refresh(analysis)

        logger.info("Accepted analysis %s for document %s", analysis.id, document_id)
        return analysis

    async def run_analysis(self, analysis_id: uuid.UUID) -> Analysis | None:
        """Execute one PENDING analysis to a terminal state.

        Failures are recorded on the analysis and the document, never raised.
        """
        analysis = await self.db.get(Analysis, analysis_id)
        if not analysis:
            logger.warning("Analysis %s disappeared before it could run", analysis_id)
            return None
        if analysis.status != AnalysisStatus.PENDING:
            logger.warning("Analysis %s is %s, not pending; skipping", analysis_id, analysis.status)
            return analysis

        document_id = analysis.document_id
        try:
            analysis.status = AnalysisStatus.IN_PROGRESS
            await self.db.commit()

            document = await self.db.get(Document, document_id)
            if not document:
                raise NotFoundError("Document", document_id)

            logger.info("Starting analysis %s for document %s", analysis_id, document_id)
            text = await self.extractor.extract(document.storage_key, document.file_type)
            prompt = build_prompt(
                text,
                document.document_type or DocumentType.PROPOSAL,
                self.max_document_chars,
            )

            completion = await self.ai_client.complete(prompt)
            processing_time = int(completion.elapsed_seconds)

            result = parse(completion.text)
            self._apply_result(analysis, document, result, processing_time, completion.tokens_used)
            await self.db.commit()

            logger.info(
                "Analysis %s completed for document %s in %d seconds",
                analysis_id, document_id, processing_time,
            )
            return analysis

        except Exception as e:
            logger.exception("Analysis %s failed for document %s", analysis_id, document_id)
            return await self._mark_failed(analysis_id, document_id, e)

    def _apply_result(
        self,
        analysis: Analysis,
        document: Document,
        result: AnalysisResult,
        processing_time: int,
        tokens_used: int | None,
    ) -> None:
        scores = result.scores
        analysis.structure_score = _to_score(scores.structure)
        analysis.argumentation_score = _to_score(scores.argumentation)
        analysis.methodology_score = _to_score(scores.methodology)
        analysis.writing_quality_score = _to_score(scores.writing_quality)
        analysis.examinability_score = _to_score(scores.examinability)
        analysis.overall_score = _to_score(scores.overall)
        analysis.processing_time = processing_time
        analysis.tokens_used = tokens_used
        analysis.status = AnalysisStatus.COMPLETED
        analysis.completed_at = _utc_now()

        for index, item in enumerate(result.feedback):
            self.db.add(FeedbackReport(
                analysis_id=analysis.id,
                section=_clip(item.section, "section", analysis.id, index),
                feedback_type=item.type,
                severity=item.severity,
                title=_clip(item.title, "title", analysis.id, index),
                content=item.content or "",
                page_reference=_clip(item.page_reference, "page_reference", analysis.id, index),
                order_index=index,
            ))

        document.status = DocumentStatus.COMPLETED

    async def _mark_failed(
        self,
        analysis_id: uuid.UUID,
        document_id: uuid.UUID,
        error: BaseException,
    ) -> Analysis | None:
        # Discard anything the failed step left pending, scores included.
        await self.db.rollback()

        analysis = await self.db.get(Analysis, analysis_id)
        if analysis is None:
            return None
        analysis.status = AnalysisStatus.FAILED
        analysis.error_message = _error_message(error)
        analysis.completed_at = _utc_now()

        document = await self.db.get(Document, document_id)
        if document:
            document.status = DocumentStatus.FAILED

        await self.db.commit()
        return analysis

    async def get_analysis(self, analysis_id: uuid.UUID) -> Analysis:
        analysis = await self.db.get(Analysis, analysis_id)
        if not analysis:
            raise NotFoundError("Analysis", analysis_id)
        return analysis

    async def get_feedback(self, analysis_id: uuid.UUID) -> list[FeedbackReport]:
        await self.get_analysis(analysis_id)
        result = await self.db.execute(
            select(FeedbackReport)
            .where(FeedbackReport.analysis_id == analysis_id)
            .order_by(FeedbackReport.order_index.asc())
        )
        return list(result.scalars().all())

    async def list_analyses(self, document_id: uuid.UUID) -> list[Analysis]:
        """All analyses of a document, newest first."""
        if not await self.db.get(Document, document_id):
            raise NotFoundError("Document", document_id)
        result = await self.db.execute(
            select(Analysis)
            .where(Analysis.document_id == document_id)
            .order_by(Analysis.created_at.desc())
        )
        return list(result.scalars().all())

    async def get_latest_analysis(self, document_id: uuid.UUID) -> Analysis | None:
        analyses = await self.list_analyses(document_id)
        return analyses[0] if analyses else None

    async def recover_interrupted_analyses(self) -> int:
        """Fail runs orphaned by a previous process and release their documents."""
        result = await self.db.execute(
            select(Analysis).where(
                Analysis.status.in_([AnalysisStatus.PENDING, AnalysisStatus.IN_PROGRESS])
            )
        )
        orphaned = list(result.scalars().all())
        now = _utc_now()
        for analysis in orphaned:
            analysis.status = AnalysisStatus.FAILED
            analysis.error_message = INTERRUPTED_MESSAGE
            analysis.completed_at = now

        await self.db.execute(
            update(Document)
            .where(Document.status == DocumentStatus.ANALYZING)
            .values(status=DocumentStatus.FAILED, updated_at=now)
        )
        await self.db.commit()

        if orphaned:
            logger.warning("Marked %d interrupted analyses as failed", len(orphaned))
        return len(orphaned)


async def run_analysis_task(
    analysis_id: uuid.UUID,
    *,
    session_factory: async_sessionmaker[AsyncSession] | None = None,
    ai_client: AIClient | None = None,
    extractor: TextExtractor | None = None,
) -> None:
    """Background entry point; the outcome is only visible on the analysis record."""
    async with (session_factory or async_session_maker)() as db:
        service = AnalysisService(db, ai_client=ai_client, extractor=extractor)
        try:
            await service.run_analysis(analysis_id)
        except Exception:
            logger.exception("Analysis task crashed", extra={"analysis_id": str(analysis_id)})

