from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List


class TaskType(str, Enum):
    """Hint for the embedding provider on how the text will be used."""
    RETRIEVAL_QUERY = "RETRIEVAL_QUERY"
    RETRIEVAL_DOCUMENT = "RETRIEVAL_DOCUMENT"


@dataclass(frozen=True)
class Vector:
    """Embedding vector with explicit dimension.

    Fields:
        values: The numeric embedding.
        dim: Dimension; fixed per embedding model.
    """
    values: List[float]
    dim: int

    @classmethod
    def of(cls, values) -> "Vector":
        vals = [float(x) for x in values]
        return cls(values=vals, dim=len(vals))


@dataclass(frozen=True)
class DocumentRecord:
    """A document with its embedding, as produced by an indexing pass."""
    id: str
    text: str
    vector: Vector


@dataclass(frozen=True)
class SimilarityResult:
    """A ranked candidate.

    Fields:
        id: Document identifier.
        text: Document text.
        score: Cosine similarity in [-1, 1].
    """
    id: str
    text: str
    score: float


@dataclass(frozen=True)
class StoreRecord:
    """A record to upsert into the vector store.

    Fields:
        id: Store-unique identifier.
        vector: Embedding vector.
        metadata: Arbitrary metadata; carries ``text`` for retrieval.
    """
    id: str
    vector: Vector
    metadata: Dict[str, object] = field(default_factory=dict)


@dataclass(frozen=True)
class StoreMatch:
    """Top-K match returned by the store.

    Fields:
        id: Record ID.
        score: Similarity score (store-defined; higher is better for cosine).
        metadata: Returned metadata.
    """
    id: str
    score: float
    metadata: Dict[str, object] = field(default_factory=dict)

    @property
    def text(self) -> str:
        return str(self.metadata.get("text", ""))
