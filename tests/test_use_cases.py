"""
Unit tests for the application use-cases using in-memory fakes.
"""

import pytest

from vector_rag.application.dto import AskRequest, EmbedTextRequest, IndexRequest, RankRequest, SearchRequest
from vector_rag.application.prompt import build_prompt
from vector_rag.application.use_cases.answer_question import AnswerQuestionUseCase
from vector_rag.application.use_cases.embed_text import EmbedTextUseCase
from vector_rag.application.use_cases.index_documents import IndexDocumentsUseCase
from vector_rag.application.use_cases.rank_documents import RankDocumentsUseCase
from vector_rag.application.use_cases.search_documents import SearchDocumentsUseCase
from vector_rag.domain.errors import ContractError, DimensionMismatchError, EmbeddingError
from vector_rag.domain.models import TaskType
from vector_rag.domain.result import RemoteResult

from conftest import FakeEmbeddingService, FakeVectorStore


class TestEmbedText:
    """Test embed-text use-case."""

    def test_embeds_as_document_and_query(self):
        """Test text is embedded with both task types."""
        emb = FakeEmbeddingService({"hello": [0.1, 0.2, 0.3]})
        resp = EmbedTextUseCase(emb).execute(EmbedTextRequest(text="hello"))
        assert resp.dimension == 3
        assert [c[1] for c in emb.calls] == [TaskType.RETRIEVAL_DOCUMENT, TaskType.RETRIEVAL_QUERY]
        assert resp.vectors_differ is False

    def test_empty_text_rejected(self, fake_embeddings):
        """Test empty text is rejected before embedding."""
        with pytest.raises(ContractError):
            EmbedTextUseCase(fake_embeddings).execute(EmbedTextRequest(text="  "))
        assert fake_embeddings.calls == []


class TestIndexDocuments:
    """Test document indexing use-case."""

    def test_upserts_records_with_one_based_ids(self, fake_embeddings, fake_store):
        """Test records get 1-based IDs and text metadata."""
        resp = IndexDocumentsUseCase(fake_embeddings, fake_store).execute(
            IndexRequest(documents=["water", "sun", "moon"])
        )
        assert resp.ids == ["1", "2", "3"]
        assert resp.upserted == 3
        assert fake_store.records["2"].metadata == {"text": "sun"}
        assert fake_store.records["3"].vector.values == [-1.0, 0.0, 0.0]
        assert fake_embeddings.calls == [(["water", "sun", "moon"], TaskType.RETRIEVAL_DOCUMENT)]

    def test_id_prefix(self, fake_embeddings, fake_store):
        """Test ID prefix is applied."""
        resp = IndexDocumentsUseCase(fake_embeddings, fake_store).execute(
            IndexRequest(documents=["water"], id_prefix="kb-")
        )
        assert resp.ids == ["kb-1"]

    def test_empty_documents_skip_remote_calls(self, fake_embeddings, fake_store):
        """Test blank documents make no remote calls."""
        resp = IndexDocumentsUseCase(fake_embeddings, fake_store).execute(IndexRequest(documents=["", "  "]))
        assert resp.upserted == 0
        assert fake_embeddings.calls == []
        assert fake_store.records == {}

    def test_inconsistent_dimensions_abort_before_upsert(self, fake_store):
        """Test mixed dimensions abort before upsert."""
        emb = FakeEmbeddingService({"a": [1.0, 0.0], "b": [1.0, 0.0, 0.0]})
        with pytest.raises(DimensionMismatchError):
            IndexDocumentsUseCase(emb, fake_store).execute(IndexRequest(documents=["a", "b"]))
        assert fake_store.records == {}

    def test_embedding_failure_propagates(self, fake_store):
        """Test embedding failure aborts indexing."""
        emb = FakeEmbeddingService({}, fail=True)
        with pytest.raises(EmbeddingError):
            IndexDocumentsUseCase(emb, fake_store).execute(IndexRequest(documents=["water"]))
        assert fake_store.records == {}


class TestSearchDocuments:
    """Test store search use-case."""

    def test_embeds_query_and_queries_store(self, fake_embeddings, fake_store):
        """Test query is embedded and sent to the store."""
        matches = SearchDocumentsUseCase(fake_embeddings, fake_store).execute(
            SearchRequest(query="what is water?", k=2)
        )
        assert [m.id for m in matches] == ["3", "2"]
        vector, k, include_metadata = fake_store.queries[0]
        assert vector.values == [0.9, 0.1, 0.0]
        assert k == 2 and include_metadata is True
        assert fake_embeddings.calls[0][1] == TaskType.RETRIEVAL_QUERY

    @pytest.mark.parametrize("query,k", [("", 2), ("what is water?", 0)])
    def test_invalid_request(self, fake_embeddings, fake_store, query, k):
        """Test empty query or bad k is rejected before search."""
        with pytest.raises(ContractError):
            SearchDocumentsUseCase(fake_embeddings, fake_store).execute(SearchRequest(query=query, k=k))
        assert fake_store.queries == []


class TestRankDocuments:
    """Test local ranking use-case."""

    def test_ranks_locally(self, fake_embeddings):
        """Test documents are ranked locally by similarity."""
        resp = RankDocumentsUseCase(fake_embeddings).execute(
            RankRequest(query="what is water?", documents=["sun", "moon", "water"])
        )
        assert [r.text for r in resp.results] == ["water", "sun", "moon"]
        assert resp.results[0].id == "3"
        assert resp.results[0].score > resp.results[1].score > resp.results[2].score

    def test_top_k(self, fake_embeddings):
        """Test ranking is cut to top-K."""
        resp = RankDocumentsUseCase(fake_embeddings).execute(
            RankRequest(query="what is water?", documents=["sun", "moon", "water"], k=1)
        )
        assert [r.text for r in resp.results] == ["water"]

    def test_no_documents_gives_empty_ranking(self, fake_embeddings):
        """Test no documents give an empty ranking."""
        resp = RankDocumentsUseCase(fake_embeddings).execute(RankRequest(query="what is water?", documents=[]))
        assert resp.results == []

    def test_short_embedding_batch_is_rejected(self):
        """Test fewer document embeddings than documents raises."""
        class ShortEmbeddingService(FakeEmbeddingService):
            def embed_texts(self, texts, task_type):
                res = super().embed_texts(texts, task_type)
                return RemoteResult.success(res.value[:1])

        emb = ShortEmbeddingService({"a": [1.0, 0.0], "b": [0.0, 1.0], "q": [1.0, 1.0]})
        with pytest.raises(EmbeddingError, match="Expected 2 embeddings, got 1"):
            RankDocumentsUseCase(emb).execute(RankRequest(query="q", documents=["a", "b"]))

    @pytest.mark.parametrize("k", [0, -1])
    def test_invalid_k_rejected_before_embedding(self, fake_embeddings, k):
        """Test bad k is rejected before any embedding call."""
        with pytest.raises(ContractError):
            RankDocumentsUseCase(fake_embeddings).execute(
                RankRequest(query="what is water?", documents=["water"], k=k)
            )
        assert fake_embeddings.calls == []

    def test_dimension_mismatch_propagates(self):
        """Test dimension mismatch propagates from ranking."""
        emb = FakeEmbeddingService({"q": [1.0, 0.0], "doc": [1.0, 0.0, 0.0]})
        with pytest.raises(DimensionMismatchError):
            RankDocumentsUseCase(emb).execute(RankRequest(query="q", documents=["doc"]))


class TestAnswerQuestion:
    """Test retrieval-augmented answer use-case."""

    def test_builds_prompt_from_matches_and_generates(self, fake_embeddings, fake_store, fake_generator):
        """Test prompt is built from matches and sent to the model."""
        resp = AnswerQuestionUseCase(fake_embeddings, fake_store, fake_generator).execute(
            AskRequest(question="what is water?", k=2)
        )
        assert resp.answer == "Water is essential for plants."
        assert fake_generator.prompts == [resp.prompt]
        assert "Water (H2O) is made of two hydrogen atoms and one oxygen atom." in resp.prompt
        assert "Photosynthesis" in resp.prompt
        assert resp.prompt.rstrip().endswith("what is water?")
        assert len(resp.matches) == 2

    def test_generation_skipped_when_retrieval_fails(self, fake_store, fake_generator):
        """Test generation is skipped when retrieval fails."""
        emb = FakeEmbeddingService({}, fail=True)
        with pytest.raises(EmbeddingError):
            AnswerQuestionUseCase(emb, fake_store, fake_generator).execute(AskRequest(question="q", k=2))
        assert fake_generator.prompts == []

    def test_empty_store_still_asks(self, fake_embeddings, fake_generator):
        """Test an empty store still produces a prompt."""
        resp = AnswerQuestionUseCase(fake_embeddings, FakeVectorStore(), fake_generator).execute(
            AskRequest(question="what is water?", k=2)
        )
        assert resp.matches == []
        assert "### Context\n\n" in resp.prompt


class TestPrompt:
    """Test prompt template rendering."""

    def test_sections_and_order(self):
        """Test prompt sections and their order."""
        prompt = build_prompt(["first passage", "second passage"], "Why?")
        assert "### Context\nfirst passage\nsecond passage\n" in prompt
        assert prompt.index("### Context") < prompt.index("### Question")
        assert "### Question\nWhy?" in prompt
        assert "only the context" in prompt
