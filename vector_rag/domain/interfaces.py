from __future__ import annotations

from abc import ABC, abstractmethod
from typing import List, Sequence
from .models import Vector, StoreRecord, StoreMatch, TaskType
from .result import RemoteResult


class EmbeddingService(ABC):
    """Port for embedding provider (e.g., Gemini)."""

    @abstractmethod
    def embed_texts(self, texts: Sequence[str], task_type: TaskType) -> RemoteResult[List[Vector]]:
        """Embed a batch of texts into vectors, one per text, in input order."""
        raise NotImplementedError

    @abstractmethod
    def get_dimension(self) -> int:
        """Return embedding dimension, probing provider if needed."""
        raise NotImplementedError


class VectorStore(ABC):
    """Port for vector storage (e.g., Pinecone)."""

    @abstractmethod
    def upsert_records(self, records: Sequence[StoreRecord]) -> RemoteResult[dict]:
        """Insert-or-update records keyed by id; returns provider response JSON."""
        raise NotImplementedError

    @abstractmethod
    def query(self, vector: Vector, top_k: int, include_metadata: bool = True) -> RemoteResult[List[StoreMatch]]:
        """Return up to ``top_k`` matches, best first."""
        raise NotImplementedError

    @abstractmethod
    def describe_stats(self) -> RemoteResult[dict]:
        """Return index statistics (dimension, record count)."""
        raise NotImplementedError


class GenerationService(ABC):
    """Port for single-shot text generation."""

    @abstractmethod
    def generate(self, prompt: str) -> RemoteResult[str]:
        raise NotImplementedError
