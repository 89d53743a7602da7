import uuid
from typing import Annotated
import httpx
import pytest
import pytest_asyncio
from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession
from examiner.api.v1 import documents as documents_api
from examiner.api.v1.deps import get_analysis_service, get_document_service
from examiner.core import get_db
from examiner.main import app
from examiner.services.analysis_service import AnalysisService, run_analysis_task
from examiner.services.document_service import DocumentService
from factories import THESIS_TEXT, FakeAIClient, fenced, make_payload

PREFIX = "/api/v1"


@pytest.fixture
def fake_ai():
    return FakeAIClient(response=fenced(make_payload()))


@pytest.fixture
def background_runs(monkeypatch, session_factory, fake_ai, extractor):
    """Route background analysis runs to the test database; records dispatched ids."""
    dispatched = []

    async def _run(analysis_id):
        dispatched.append(analysis_id)
        await run_analysis_task(
            analysis_id, session_factory=session_factory, ai_client=fake_ai, extractor=extractor
        )

    monkeypatch.setattr(documents_api, "run_analysis_task", _run)
    return dispatched


@pytest_asyncio.fixture
async def client(session_factory, storage, extractor, fake_ai):
    async def _get_db():
        async with session_factory() as session:
            yield session

    def _documents(db: Annotated[AsyncSession, Depends(get_db)]):
        return DocumentService(db, storage, extractor)

    def _analyses(db: Annotated[AsyncSession, Depends(get_db)]):
        return AnalysisService(db, ai_client=fake_ai, extractor=extractor, max_document_chars=10_000)

    app.dependency_overrides[get_db] = _get_db
    app.dependency_overrides[get_document_service] = _documents
    app.dependency_overrides[get_analysis_service] = _analyses
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as http:
        yield http
    app.dependency_overrides.clear()


async def _upload(client, owner_id, filename="thesis.txt", content=THESIS_TEXT.encode(), **form):
    data = {"owner_id": str(owner_id), **form}
    return await client.post(
        f"{PREFIX}/documents/upload",
        data=data,
        files={"file": (filename, content, "text/plain")},
    )


async def test_health(client):
    response = await client.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "healthy"


async def test_upload_and_fetch_document(client, owner_id):
    response = await _upload(client, owner_id, document_type="THESIS")
    assert response.status_code == 201
    body = response.json()
    assert body["file_type"] == "TXT"
    assert body["document_type"] == "THESIS"
    assert body["status"] == "UPLOADED"
    assert body["word_count"] == 21

    fetched = await client.get(f"{PREFIX}/documents/{body['id']}")
    assert fetched.status_code == 200
    assert fetched.json()["id"] == body["id"]

    listed = await client.get(f"{PREFIX}/documents", params={"owner_id": str(owner_id)})
    assert [d["id"] for d in listed.json()] == [body["id"]]


async def test_upload_rejects_unsupported_format(client, owner_id):
    response = await _upload(client, owner_id, filename="thesis.rtf", content=b"{\\rtf1}")
    assert response.status_code == 400


async def test_analyze_unknown_document(client, background_runs):
    response = await client.post(f"{PREFIX}/documents/{uuid.uuid4()}/analyze")
    assert response.status_code == 404
    assert background_runs == []


async def test_analysis_runs_and_results_are_readable(client, owner_id, background_runs):
    document_id = (await _upload(client, owner_id)).json()["id"]

    accepted = await client.post(f"{PREFIX}/documents/{document_id}/analyze")
    assert accepted.status_code == 202
    analysis_id = accepted.json()["analysis"]["id"]
    assert accepted.json()["analysis"]["status"] == "PENDING"
    assert background_runs == [uuid.UUID(analysis_id)]

    analysis = (await client.get(f"{PREFIX}/analysis/{analysis_id}")).json()
    assert analysis["status"] == "COMPLETED"
    assert analysis["overall_score"] == 78
    assert analysis["writing_quality_score"] == 85
    assert analysis["tokens_used"] == 1500

    feedback = (await client.get(f"{PREFIX}/analysis/{analysis_id}/feedback")).json()
    assert [f["section"] for f in feedback] == ["Intro", "Methods"]
    assert [f["order_index"] for f in feedback] == [0, 1]

    latest = await client.get(f"{PREFIX}/documents/{document_id}/analyses/latest")
    assert latest.json()["id"] == analysis_id
    document = (await client.get(f"{PREFIX}/documents/{document_id}")).json()
    assert document["status"] == "COMPLETED"


async def test_second_request_while_running_conflicts(client, owner_id, monkeypatch):
    async def _never_runs(analysis_id):
        return None

    monkeypatch.setattr(documents_api, "run_analysis_task", _never_runs)
    document_id = (await _upload(client, owner_id)).json()["id"]

    first = await client.post(f"{PREFIX}/documents/{document_id}/analyze")
    second = await client.post(f"{PREFIX}/documents/{document_id}/analyze")

    assert first.status_code == 202
    assert second.status_code == 409
    analyses = (await client.get(f"{PREFIX}/documents/{document_id}/analyses")).json()
    assert len(analyses) == 1


async def test_document_without_analyses_has_no_latest(client, owner_id):
    document_id = (await _upload(client, owner_id)).json()["id"]
    response = await client.get(f"{PREFIX}/documents/{document_id}/analyses/latest")
    assert response.status_code == 404


async def test_unknown_analysis(client):
    assert (await client.get(f"{PREFIX}/analysis/{uuid.uuid4()}")).status_code == 404
    assert (await client.get(f"{PREFIX}/analysis/{uuid.uuid4()}/feedback")).status_code == 404


async def test_delete_document(client, owner_id):
    document_id = (await _upload(client, owner_id)).json()["id"]
    assert (await client.delete(f"{PREFIX}/documents/{document_id}")).status_code == 204
    assert (await client.get(f"{PREFIX}/documents/{document_id}")).status_code == 404
