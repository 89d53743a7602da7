import uuid
import logging
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from examiner.core.exceptions import InvalidDocumentError, NotFoundError
from examiner.models import Document, DocumentStatus, DocumentType
from examiner.services.storage import StorageService
from examiner.services.text_extractor import TextExtractor, detect_file_type

logger = logging.getLogger(__name__)


class DocumentService:
    def __init__(
        self,
        db: AsyncSession,
        storage: StorageService | None = None,
        extractor: TextExtractor | None = None,
    ):
        self.db = db
        self.storage = storage or StorageService()
        self.extractor = extractor or TextExtractor(self.storage)

    async def upload_document(
        self,
        content: bytes,
        filename: str,
        owner_id: uuid.UUID,
        *,
        title: str | None = None,
        document_type: DocumentType | None = None,
        parent_document_id: uuid.UUID | None = None,
        max_size: int | None = None,
    ) -> Document:
        """Store an uploaded file and create its document record.

        Passing ``parent_document_id`` records the upload as a revision of an
        existing document: it inherits the parent's owner and gets the next
        version number.
        """
        if not content:
            raise InvalidDocumentError("File is empty")
        if max_size is not None and len(content) > max_size:
            raise InvalidDocumentError(f"File size exceeds {max_size // (1024 * 1024)}MB limit")

        file_type = detect_file_type(filename)

        version = 1
        if parent_document_id is not None:
            parent = await self.get_document(parent_document_id)
            owner_id = parent.owner_id
            version = parent.version + 1
            document_type = document_type or parent.document_type

        # Extract before storing so unreadable files never reach the blob store.
        extracted = await self.extractor.extract_bytes(content, file_type)
        storage_key = await self.storage.save_file(content, filename)

        document = Document(
            owner_id=owner_id,
            title=title or filename,
            filename=storage_key,
            storage_key=storage_key,
            file_type=file_type,
            file_size=len(content),
            word_count=extracted.word_count,
            page_count=extracted.page_count,
            document_type=document_type or DocumentType.PROPOSAL,
            status=DocumentStatus.UPLOADED,
            version=version,
            parent_document_id=parent_document_id,
        )
        self.db.add(document)
        await self.db.commit()
        await self.db.refresh(document)

        logger.info(
            "Stored document %s (%s, %d words, v%d)",
            document.id, file_type.value, document.word_count or 0, version,
        )
        return document

    async def get_document(self, document_id: uuid.UUID) -> Document:
        document = await self.db.get(Document, document_id)
        if not document:
            raise NotFoundError("Document", document_id)
        return document

    async def list_documents(self, owner_id: uuid.UUID) -> list[Document]:
        result = await self.db.execute(
            select(Document)
            .where(Document.owner_id == owner_id)
            .order_by(Document.created_at.desc())
        )
        return list(result.scalars().all())

    async def delete_document(self, document_id: uuid.UUID) -> None:
        """Delete a document, its stored file, and (by cascade) its analyses."""
        document = await self.get_document(document_id)
        if not await self.storage.delete_file(document.storage_key):
            logger.warning("Stored file already missing for document %s", document_id)
        await self.db.delete(document)
        await self.db.commit()
