"""
Tests for application wiring: health, correlation IDs and log formatting.
"""

import json
import logging

import pytest

from backend.app.core.observability import JsonFormatter


@pytest.mark.asyncio
async def test_health(client):
    response = await client.get("/health")

    assert response.status_code == 200
    assert response.json()["status"] == "healthy"


@pytest.mark.asyncio
async def test_correlation_id_is_echoed(client):
    response = await client.get("/health", headers={"X-Correlation-ID": "abc-123"})

    assert response.headers["X-Correlation-ID"] == "abc-123"
    assert float(response.headers["X-Process-Time"]) >= 0


@pytest.mark.asyncio
async def test_correlation_id_generated(client):
    response = await client.get("/")

    assert len(response.headers["X-Correlation-ID"]) == 36


@pytest.mark.asyncio
async def test_unknown_route_uses_error_envelope(client):
    response = await client.get("/v1/accounting/nowhere")

    assert response.status_code == 404
    assert "error_code" in response.json()


def test_json_formatter_includes_extra_context():
    record = logging.makeLogRecord({
        "name": "storefront.accounting.posting",
        "levelname": "INFO",
        "msg": "Journal entry posted",
        "entry_id": 7,
    })

    payload = json.loads(JsonFormatter().format(record))

    assert payload["message"] == "Journal entry posted"
    assert payload["logger"] == "storefront.accounting.posting"
    assert payload["entry_id"] == 7
