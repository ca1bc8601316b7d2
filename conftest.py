"""
Shared pytest fixtures for the commissioning client tests.
"""

import json
from typing import Callable

import httpx
import pytest

from shared.config import ClientConfig
from service_commissioning.app.domain.models import Description, Document, Product, ProductionType

API_URL = "https://ismp.crpt.ru/api/v3/lk/documents/commissioning/contract/create"


@pytest.fixture
def client_config():
    """Client configuration with a generous rate window."""
    return ClientConfig(token="test-token", api_url=API_URL, time_unit_seconds=60.0, request_limit=2)


@pytest.fixture
def product():
    """Sample product."""
    return Product(
        owner_inn="7701234567",
        producer_inn="7707654321",
        production_date="2024-03-01",
        tnved_code="0401201100",
        uit_code="010460406000000021ABC",
    )


@pytest.fixture
def document(product):
    """Sample commissioning document."""
    return Document(
        description=Description(participant_inn="7701234567"),
        doc_id="doc-0001",
        doc_status="DRAFT",
        doc_type="manual",
        owner_inn="7701234567",
        participant_inn="7701234567",
        producer_inn="7707654321",
        production_date="2024-03-01",
        production_type=ProductionType.OWN_PRODUCTION,
        products=[product],
        reg_date="2024-03-02",
    )


@pytest.fixture
def registry_reply() -> Callable[..., httpx.Response]:
    """Build a registry reply."""
    def _reply(body, status_code: int = 200) -> httpx.Response:
        content = body if isinstance(body, bytes) else json.dumps(body).encode("utf-8")
        return httpx.Response(
            status_code=status_code,
            content=content,
            headers={"Content-Type": "application/json"},
        )
    return _reply


@pytest.fixture
def make_http_client() -> Callable[[Callable], httpx.AsyncClient]:
    """Create an httpx client whose requests are answered by ``handler``."""
    def _make(handler) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return _make
