from __future__ import annotations

from ..dto import RankRequest, RankResponse
from ...domain.errors import ContractError, EmbeddingError
from ...domain.interfaces import EmbeddingService
from ...domain.models import DocumentRecord, TaskType
from ...domain.similarity import rank_by_similarity, top_k


class RankDocumentsUseCase:
    """Use-case: rank documents against a query locally, without a vector store."""

    def __init__(self, embeddings: EmbeddingService) -> None:
        self._emb = embeddings

    def execute(self, req: RankRequest) -> RankResponse:
        if not req.query.strip():
            raise ContractError("query must not be empty")
        if req.k is not None and req.k < 1:
            raise ContractError(f"k must be >= 1, got {req.k}")
        docs = [d for d in req.documents if d.strip()]
        doc_vecs = self._emb.embed_texts(docs, TaskType.RETRIEVAL_DOCUMENT).unwrap()
        if len(doc_vecs) != len(docs):
            raise EmbeddingError(f"Expected {len(docs)} embeddings, got {len(doc_vecs)}")
        query_vec = self._emb.embed_texts([req.query], TaskType.RETRIEVAL_QUERY).unwrap()[0]
        candidates = [
            DocumentRecord(id=str(i + 1), text=text, vector=v)
            for i, (text, v) in enumerate(zip(docs, doc_vecs))
        ]
        ranked = rank_by_similarity(query_vec, candidates)
        if req.k is not None:
            ranked = top_k(ranked, req.k)
        return RankResponse(results=ranked)
