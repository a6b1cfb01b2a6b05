from __future__ import annotations

from typing import List

from ..dto import IndexRequest, IndexResponse
from ...domain.errors import DimensionMismatchError, EmbeddingError
from ...domain.interfaces import EmbeddingService, VectorStore
from ...domain.models import StoreRecord, TaskType
from ...infrastructure.logging import get_logger

logger = get_logger("vector_rag.index")


class IndexDocumentsUseCase:
    """Use-case: embed documents, build records with 1-based IDs, and upsert into the store."""

    def __init__(self, embeddings: EmbeddingService, store: VectorStore) -> None:
        self._emb = embeddings
        self._store = store

    def execute(self, req: IndexRequest) -> IndexResponse:
        docs = [d for d in req.documents if d.strip()]
        if not docs:
            return IndexResponse(ids=[], upserted=0, raw={"upsertedCount": 0})

        vecs = self._emb.embed_texts(docs, TaskType.RETRIEVAL_DOCUMENT).unwrap()
        if len(vecs) != len(docs):
            raise EmbeddingError(f"Expected {len(docs)} embeddings, got {len(vecs)}")
        dim = vecs[0].dim
        for v in vecs:
            if v.dim != dim:
                raise DimensionMismatchError(f"Inconsistent embedding dimension: got {v.dim}, expected {dim}")

        records: List[StoreRecord] = [
            StoreRecord(id=f"{req.id_prefix}{i + 1}", vector=v, metadata={"text": text})
            for i, (text, v) in enumerate(zip(docs, vecs))
        ]
        logger.info("Upsert request | records=%d | dim=%d", len(records), dim)
        raw = self._store.upsert_records(records).unwrap()
        upserted = int(raw.get("upsertedCount", len(records)))
        return IndexResponse(ids=[r.id for r in records], upserted=upserted, raw=raw)
