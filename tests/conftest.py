from __future__ import annotations

from collections.abc import AsyncIterator

import pytest
from httpx import ASGITransport, AsyncClient

from exam_portal.config import get_settings
from exam_portal.main import app
from exam_portal.observability.metrics import reset_metrics
from exam_portal.services.answer_service import get_answer_store
from exam_portal.services.exam_service import get_catalog


@pytest.fixture(autouse=True)
def test_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("EXAMS_FILE", raising=False)
    monkeypatch.setenv("MAX_UPLOAD_SIZE_MB", "1")
    monkeypatch.setenv("ENABLE_PARAGRAPH_FALLBACK", "false")
    get_settings.cache_clear()
    get_catalog.cache_clear()
    get_answer_store().reset()
    reset_metrics()

    yield

    get_answer_store().reset()
    get_catalog.cache_clear()
    get_settings.cache_clear()


@pytest.fixture
async def api_client() -> AsyncIterator[AsyncClient]:
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
