"""
Pytest configuration and fixtures for vector RAG tests.

Provides in-memory fakes for the remote services and a clean environment.
"""

import os
from typing import Dict, List, Sequence
from unittest.mock import Mock

import pytest

from vector_rag.domain.errors import EmbeddingError
from vector_rag.domain.interfaces import EmbeddingService, GenerationService, VectorStore
from vector_rag.domain.models import StoreMatch, StoreRecord, TaskType, Vector
from vector_rag.domain.result import RemoteResult
from vector_rag.infrastructure.config import Settings


class FakeEmbeddingService(EmbeddingService):
    """Deterministic embeddings from a lookup table; records every call."""

    def __init__(self, table: Dict[str, List[float]], fail: bool = False) -> None:
        self.table = table
        self.fail = fail
        self.calls: List[tuple] = []

    def embed_texts(self, texts: Sequence[str], task_type: TaskType) -> RemoteResult[List[Vector]]:
        self.calls.append((list(texts), task_type))
        if self.fail:
            return RemoteResult.failure(EmbeddingError("embedding backend down"))
        return RemoteResult.success([Vector.of(self.table[t]) for t in texts])

    def get_dimension(self) -> int:
        return len(next(iter(self.table.values())))


class FakeVectorStore(VectorStore):
    """Keeps upserted records in a dict; query returns preset matches."""

    def __init__(self, matches: Sequence[StoreMatch] = ()) -> None:
        self.records: Dict[str, StoreRecord] = {}
        self.matches = list(matches)
        self.queries: List[tuple] = []

    def upsert_records(self, records):
        for r in records:
            self.records[r.id] = r
        return RemoteResult.success({"upsertedCount": len(records)})

    def query(self, vector, top_k, include_metadata=True):
        self.queries.append((vector, top_k, include_metadata))
        return RemoteResult.success(self.matches[:top_k])

    def describe_stats(self):
        return RemoteResult.success({"totalVectorCount": len(self.records)})


class FakeGenerationService(GenerationService):
    def __init__(self, answer: str = "Water is essential for plants.") -> None:
        self.answer = answer
        self.prompts: List[str] = []

    def generate(self, prompt: str) -> RemoteResult[str]:
        self.prompts.append(prompt)
        return RemoteResult.success(self.answer)


@pytest.fixture
def settings():
    """Settings with fake credentials and a fixed index host."""
    return Settings(
        gemini_api_key="test-gemini-key",
        pinecone_api_key="test-pinecone-key",
        pinecone_index="learn",
        pinecone_index_host="learn-abc123.svc.pinecone.io",
        embed_dim=3,
    )


@pytest.fixture
def fake_embeddings():
    return FakeEmbeddingService(
        {
            "water": [1.0, 0.0, 0.0],
            "sun": [0.0, 1.0, 0.0],
            "moon": [-1.0, 0.0, 0.0],
            "what is water?": [0.9, 0.1, 0.0],
        }
    )


@pytest.fixture
def fake_store():
    return FakeVectorStore(
        matches=[
            StoreMatch(id="3", score=0.91, metadata={"text": "Water (H2O) is made of two hydrogen atoms and one oxygen atom."}),
            StoreMatch(id="2", score=0.74, metadata={"text": "Photosynthesis is the process by which plants use sunlight to create food."}),
        ]
    )


@pytest.fixture
def fake_generator():
    return FakeGenerationService()


@pytest.fixture
def mock_session():
    """requests.Session stand-in; set ``request.return_value`` per test."""
    session = Mock()
    session.headers = {}
    return session


def _make_response(payload, status_code: int = 200):
    resp = Mock()
    resp.status_code = status_code
    resp.content = b"{}" if payload is not None else b""
    resp.json.return_value = payload
    resp.text = str(payload)
    resp.raise_for_status.return_value = None
    return resp


@pytest.fixture
def response_factory():
    """Build a fake requests.Response carrying ``payload`` as JSON."""
    return _make_response


@pytest.fixture
def clean_environment():
    """Clean environment variables for testing."""
    env_vars_to_clean = [
        'GEMINI_API_KEY',
        'PINECONE_API_KEY',
        'PINECONE_INDEX',
        'PINECONE_INDEX_HOST',
        'EMBED_MODEL',
        'EMBED_DIM',
        'RAG_TOP_K',
    ]

    original_env = {}
    for var in env_vars_to_clean:
        if var in os.environ:
            original_env[var] = os.environ[var]
            del os.environ[var]

    yield

    for var, value in original_env.items():
        os.environ[var] = value


def pytest_configure(config):
    """Configure pytest markers."""
    config.addinivalue_line("markers", "unit: mark test as unit test")
    config.addinivalue_line("markers", "cli: mark test as CLI command test")
    config.addinivalue_line("markers", "env: mark test as environment resolution test")
