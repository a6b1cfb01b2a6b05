from __future__ import annotations

from ..dto import EmbedTextRequest, EmbedTextResponse
from ...domain.errors import ContractError
from ...domain.interfaces import EmbeddingService
from ...domain.models import TaskType


class EmbedTextUseCase:
    """Use-case: embed one text as a document and as a query.

    The two vectors are expected to differ, since the task type biases the
    embedding.
    """

    def __init__(self, embeddings: EmbeddingService) -> None:
        self._emb = embeddings

    def execute(self, req: EmbedTextRequest) -> EmbedTextResponse:
        if not req.text.strip():
            raise ContractError("text must not be empty")
        doc = self._emb.embed_texts([req.text], TaskType.RETRIEVAL_DOCUMENT).unwrap()[0]
        query = self._emb.embed_texts([req.text], TaskType.RETRIEVAL_QUERY).unwrap()[0]
        return EmbedTextResponse(dimension=doc.dim, document_vector=doc.values, query_vector=query.values)
