"""Shared fixtures for Bizplan Assistant tests."""

import json
import os
import pytest
from fastapi.testclient import TestClient

# Ensure we use test/mock settings
os.environ.setdefault("NVIDIA_API_KEY", "test-key")
os.environ.setdefault("LLM_DEFAULT_MODEL", "test/default-model")
os.environ.setdefault("LLM_PLAN_MODEL", "test/plan-model")
os.environ.setdefault("LLM_COST_MODE_MODEL", "test/cost-model")
os.environ.setdefault("LLM_FAST_MODEL", "test/fast-model")

from llm.providers.nim import ChatCompletionResult


class FakeProvider:
    """Generation provider that replays scripted outputs and records requests."""

    def __init__(self, outputs):
        self.outputs = list(outputs)
        self.requests = []

    async def chat_completion(self, request):
        self.requests.append(request)
        output = self.outputs.pop(0)
        if isinstance(output, Exception):
            raise output
        return ChatCompletionResult(content=output, model=request.model)

    @property
    def call_count(self) -> int:
        return len(self.requests)


@pytest.fixture
def sample_signals():
    """A valid LeadSignals payload (wire keys)."""
    return {
        "budgetBand": "$5k–$20k",
        "authority": "Owner/Partner",
        "urgency": "Soon (31–90d)",
        "needClarity": "Clear",
        "dataReadiness": "Medium",
        "stackMaturity": "Basic SaaS",
        "complexity": "Med",
        "researchCoverage": 70,
        "score": 55,
    }


@pytest.fixture
def sample_signals_json(sample_signals):
    return json.dumps(sample_signals, ensure_ascii=False)


@pytest.fixture
def fake_provider_factory():
    return FakeProvider


@pytest.fixture
def client():
    """FastAPI test client with services bound to a scripted provider."""
    from api.main import app
    from api.services import get_services

    services = get_services()
    services.reset()
    provider = FakeProvider([])
    services.initialize(provider=provider)

    test_client = TestClient(app)
    test_client.provider = provider
    yield test_client

    services.reset()
