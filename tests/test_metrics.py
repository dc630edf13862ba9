import pytest

from exam_portal.config import get_settings


async def test_metrics_endpoint_returns_snapshot_and_counts_requests(api_client) -> None:
    m1 = await api_client.get("/api/metrics")
    assert m1.status_code == 200
    payload1 = m1.json()
    assert "counters" in payload1
    assert "latency_ms" in payload1

    # /api/metrics itself should NOT affect http_requests_total.
    m1b = await api_client.get("/api/metrics")
    assert m1b.json()["counters"]["http_requests_total"] == payload1["counters"]["http_requests_total"]

    health = await api_client.get("/health")
    assert health.status_code == 200

    payload2 = (await api_client.get("/api/metrics")).json()
    assert payload2["counters"]["http_requests_total"] == payload1["counters"]["http_requests_total"] + 1


async def test_extractions_are_counted_by_strategy(api_client) -> None:
    await api_client.post("/api/extract", json={"text": "Question 1: A", "question_count": 1})
    await api_client.post("/api/extract", json={"text": "nothing here", "question_count": 1})

    payload = (await api_client.get("/api/metrics")).json()
    assert payload["counters"]["extractions_total"] == 2
    assert payload["counters"]["extractions_empty_total"] == 1
    assert payload["strategy_hits"] == {"block": 1, "none": 1}
    assert payload["latency_ms"]["extraction_ms"]["count"] == 2


async def test_metrics_endpoint_can_be_disabled(api_client, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("ENABLE_METRICS_ENDPOINT", "false")
    get_settings.cache_clear()

    resp = await api_client.get("/api/metrics")
    assert resp.status_code == 404
