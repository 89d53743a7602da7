import io
import asyncio
import logging
from dataclasses import dataclass
from pathlib import Path
from docx import Document as DocxDocument
from pypdf import PdfReader
from examiner.core.exceptions import CorruptFileError, UnsupportedFormatError
from examiner.models import FileType
from examiner.services.storage import StorageService

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ExtractedText:
    text: str
    page_count: int | None = None

    @property
    def word_count(self) -> int:
        return count_words(self.text)


def count_words(text: str) -> int:
    return len(text.split()) if text else 0


def detect_file_type(filename: str) -> FileType:
    """Map a filename extension onto a supported file type."""
    ext = Path(filename or "").suffix.lstrip(".").upper()
    try:
        return FileType(ext)
    except ValueError:
        raise UnsupportedFormatError(f"Unsupported file type: {ext or 'none'}") from None


def _coerce_file_type(file_type: FileType | str) -> FileType:
    try:
        return FileType(file_type)
    except ValueError:
        raise UnsupportedFormatError(f"Unsupported file type: {file_type}") from None


def _extract_pdf(content: bytes) -> ExtractedText:
    reader = PdfReader(io.BytesIO(content))
    pages = [page.extract_text() or "" for page in reader.pages]
    return ExtractedText(text="\n".join(pages), page_count=len(pages))


def _extract_docx(content: bytes) -> ExtractedText:
    document = DocxDocument(io.BytesIO(content))
    return ExtractedText(text="".join(f"{p.text}\n" for p in document.paragraphs))


def _extract_plain(content: bytes) -> ExtractedText:
    try:
        return ExtractedText(text=content.decode("utf-8-sig"))
    except UnicodeDecodeError:
        return ExtractedText(text=content.decode("latin-1"))


_EXTRACTORS = {
    FileType.PDF: _extract_pdf,
    FileType.DOCX: _extract_docx,
    FileType.TXT: _extract_plain,
    FileType.MD: _extract_plain,
}


class TextExtractor:
    """Turns stored document bytes into plain text.

    PDF and DOCX parsing is blocking, so it runs in a worker thread.
    """

    def __init__(self, storage: StorageService | None = None):
        self.storage = storage or StorageService()

    async def extract_bytes(self, content: bytes, file_type: FileType | str) -> ExtractedText:
        file_type = _coerce_file_type(file_type)
        try:
            return await asyncio.to_thread(_EXTRACTORS[file_type], content)
        except Exception as e:
            logger.warning("Text extraction failed for %s content: %s", file_type.value, e)
            raise CorruptFileError(f"Failed to extract text from {file_type.value} document: {e}") from e

    async def extract(self, storage_key: str, file_type: FileType | str) -> str:
        file_type = _coerce_file_type(file_type)
        try:
            content = await self.storage.read_file(storage_key)
        except FileNotFoundError as e:
            raise CorruptFileError(f"Stored document is missing: {storage_key}") from e
        extracted = await self.extract_bytes(content, file_type)
        return extracted.text
