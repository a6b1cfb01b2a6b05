from __future__ import annotations

from typing import List

from ..dto import SearchRequest
from ...domain.errors import ContractError
from ...domain.interfaces import EmbeddingService, VectorStore
from ...domain.models import StoreMatch, TaskType


class SearchDocumentsUseCase:
    """Use-case: embed query string and search the store."""

    def __init__(self, embeddings: EmbeddingService, store: VectorStore) -> None:
        self._emb = embeddings
        self._store = store

    def execute(self, req: SearchRequest) -> List[StoreMatch]:
        if not req.query.strip():
            raise ContractError("query must not be empty")
        if req.k < 1:
            raise ContractError(f"k must be >= 1, got {req.k}")
        vec = self._emb.embed_texts([req.query], TaskType.RETRIEVAL_QUERY).unwrap()[0]
        return self._store.query(vec, top_k=req.k, include_metadata=True).unwrap()
