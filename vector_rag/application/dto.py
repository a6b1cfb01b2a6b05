from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional

from ..domain.models import SimilarityResult, StoreMatch


@dataclass(frozen=True)
class EmbedTextRequest:
    text: str


@dataclass(frozen=True)
class EmbedTextResponse:
    dimension: int
    document_vector: List[float]
    query_vector: List[float]

    @property
    def vectors_differ(self) -> bool:
        return self.document_vector != self.query_vector


@dataclass(frozen=True)
class IndexRequest:
    documents: List[str]
    id_prefix: str = ""


@dataclass(frozen=True)
class IndexResponse:
    ids: List[str]
    upserted: int
    raw: dict = field(default_factory=dict)


@dataclass(frozen=True)
class SearchRequest:
    query: str
    k: int = 2


@dataclass(frozen=True)
class RankRequest:
    query: str
    documents: List[str]
    k: Optional[int] = None


@dataclass(frozen=True)
class AskRequest:
    question: str
    k: int = 2


@dataclass(frozen=True)
class AskResponse:
    answer: str
    prompt: str
    matches: List[StoreMatch]


@dataclass(frozen=True)
class RankResponse:
    results: List[SimilarityResult]
