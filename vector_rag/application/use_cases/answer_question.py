from __future__ import annotations

from ..dto import AskRequest, AskResponse, SearchRequest
from ..prompt import build_prompt
from .search_documents import SearchDocumentsUseCase
from ...domain.interfaces import EmbeddingService, GenerationService, VectorStore
from ...infrastructure.logging import get_logger

logger = get_logger("vector_rag.ask")


class AnswerQuestionUseCase:
    """Use-case: retrieve context from the store and ask the model to answer from it."""

    def __init__(self, embeddings: EmbeddingService, store: VectorStore, generator: GenerationService) -> None:
        self._search = SearchDocumentsUseCase(embeddings, store)
        self._gen = generator

    def execute(self, req: AskRequest) -> AskResponse:
        matches = self._search.execute(SearchRequest(query=req.question, k=req.k))
        context = [m.text for m in matches if m.text]
        prompt = build_prompt(context, req.question)
        logger.info("Generate request | context_items=%d", len(context))
        answer = self._gen.generate(prompt).unwrap()
        return AskResponse(answer=answer, prompt=prompt, matches=matches)
