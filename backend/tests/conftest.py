import os
import uuid

os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite://")
os.environ.setdefault("OPENAI_API_KEY", "sk-test")

import pytest
import pytest_asyncio

from examiner.core.database import Base, create_engine, create_session_maker
from examiner.models import DocumentType
from examiner.services.document_service import DocumentService
from examiner.services.storage import StorageService
from examiner.services.text_extractor import TextExtractor
from factories import THESIS_TEXT


@pytest_asyncio.fixture
async def engine(tmp_path):
    engine = create_engine(f"sqlite+aiosqlite:///{tmp_path / 'examiner.db'}")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return create_session_maker(engine)


@pytest_asyncio.fixture
async def db(session_factory):
    async with session_factory() as session:
        yield session


@pytest.fixture
def storage(tmp_path):
    return StorageService(tmp_path / "uploads")


@pytest.fixture
def extractor(storage):
    return TextExtractor(storage)


@pytest.fixture
def document_service(db, storage, extractor):
    return DocumentService(db, storage, extractor)


@pytest.fixture
def owner_id():
    return uuid.uuid4()


@pytest_asyncio.fixture
async def document(document_service, owner_id):
    return await document_service.upload_document(
        THESIS_TEXT.encode("utf-8"),
        "telemedicine.txt",
        owner_id,
        document_type=DocumentType.THESIS,
    )
