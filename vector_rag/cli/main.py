from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

from ..infrastructure.config import Settings, load_settings
from ..infrastructure.logging import configure_logging, get_logger
from ..infrastructure.gemini.client import GeminiEmbeddingService, GeminiGenerationService
from ..infrastructure.pinecone.client import PineconeVectorStore
from ..ingestion.documents import DEFAULT_KNOWLEDGE_BASE, load_documents
from ..domain.errors import ConfigurationError, ContractError
from ..domain.models import SimilarityResult, StoreMatch
from ..application.dto import AskRequest, EmbedTextRequest, IndexRequest, RankRequest, SearchRequest
from ..application.use_cases.embed_text import EmbedTextUseCase
from ..application.use_cases.index_documents import IndexDocumentsUseCase
from ..application.use_cases.search_documents import SearchDocumentsUseCase
from ..application.use_cases.rank_documents import RankDocumentsUseCase
from ..application.use_cases.answer_question import AnswerQuestionUseCase
from .parsers import build_parser

logger = get_logger("vector_rag.cli")


def _print(data: Dict[str, Any]) -> None:
    print(json.dumps(data, indent=2, ensure_ascii=False))


def _collect_documents(ns, use_default: bool) -> List[str]:
    """Gather documents from repeated --text and/or --file lines.

    Falls back to the built-in knowledge base when nothing is given and
    ``use_default`` is set.
    """
    docs: List[str] = [str(t).strip() for t in (getattr(ns, "text", None) or []) if str(t).strip()]
    file_arg = getattr(ns, "file", None)
    if file_arg:
        path = Path(file_arg).expanduser()
        if not path.exists():
            raise ContractError(f"Input file '{path}' not found")
        docs.extend(load_documents(path))
    if not docs and use_default:
        return list(DEFAULT_KNOWLEDGE_BASE)
    return docs


def _resolve_k(ns, settings: Settings) -> int:
    k = getattr(ns, "k", None)
    return int(k) if k is not None else settings.top_k


def _serialize_match(m: StoreMatch) -> Dict[str, Any]:
    return {"id": m.id, "score": m.score, "text": m.text, "metadata": m.metadata}


def _serialize_ranked(r: SimilarityResult) -> Dict[str, Any]:
    return {"id": r.id, "score": r.score, "text": r.text}


def embed_command(ns, settings: Settings) -> int:
    resp = EmbedTextUseCase(GeminiEmbeddingService(settings)).execute(EmbedTextRequest(text=str(ns.text)))
    out: Dict[str, Any] = {
        "status": "ok",
        "model": settings.embed_model,
        "dimension": resp.dimension,
        "vectors_differ": resp.vectors_differ,
    }
    if getattr(ns, "show_vectors", False):
        out["document_vector"] = resp.document_vector
        out["query_vector"] = resp.query_vector
    _print(out)
    return 0


def index_command(ns, settings: Settings) -> int:
    """Embed documents and upsert them into the Pinecone index."""
    docs = _collect_documents(ns, use_default=True)
    logger.info("Index request | index=%s | candidates=%d", settings.pinecone_index, len(docs))
    resp = IndexDocumentsUseCase(GeminiEmbeddingService(settings), PineconeVectorStore(settings)).execute(
        IndexRequest(documents=docs, id_prefix=str(getattr(ns, "id_prefix", "") or ""))
    )
    logger.info("Index completed | index=%s | upserted=%d", settings.pinecone_index, resp.upserted)
    _print({"status": "ok", "index": settings.pinecone_index, "upserted": resp.upserted, "ids": resp.ids})
    return 0


def search_command(ns, settings: Settings) -> int:
    matches = SearchDocumentsUseCase(GeminiEmbeddingService(settings), PineconeVectorStore(settings)).execute(
        SearchRequest(query=str(ns.q), k=_resolve_k(ns, settings))
    )
    _print({"status": "ok", "index": settings.pinecone_index, "result": [_serialize_match(m) for m in matches]})
    return 0


def ask_command(ns, settings: Settings) -> int:
    """Retrieve top-K context and generate an answer grounded in it."""
    resp = AnswerQuestionUseCase(
        GeminiEmbeddingService(settings),
        PineconeVectorStore(settings),
        GeminiGenerationService(settings),
    ).execute(AskRequest(question=str(ns.q), k=_resolve_k(ns, settings)))
    out: Dict[str, Any] = {
        "status": "ok",
        "answer": resp.answer,
        "context": [_serialize_match(m) for m in resp.matches],
    }
    if getattr(ns, "show_prompt", False):
        out["prompt"] = resp.prompt
    _print(out)
    return 0


def rank_command(ns, settings: Settings) -> int:
    docs = _collect_documents(ns, use_default=True)
    k = getattr(ns, "k", None)
    resp = RankDocumentsUseCase(GeminiEmbeddingService(settings)).execute(
        RankRequest(query=str(ns.q), documents=docs, k=int(k) if k is not None else None)
    )
    _print({"status": "ok", "result": [_serialize_ranked(r) for r in resp.results]})
    return 0


def stats_command(ns, settings: Settings) -> int:
    stats = PineconeVectorStore(settings).describe_stats().unwrap()
    _print({"status": "ok", "index": settings.pinecone_index, "stats": stats})
    return 0


COMMANDS = {
    "embed": embed_command,
    "index": index_command,
    "search": search_command,
    "ask": ask_command,
    "rank": rank_command,
    "stats": stats_command,
}


def dispatch_commands(ns, settings: Settings) -> int:
    handler = COMMANDS.get(ns.cmd)
    if handler is None:
        _print({"status": "error", "error": f"Unknown command: {ns.cmd}"})
        return 2
    return handler(ns, settings)


def run(argv: Optional[Sequence[str]] = None, settings: Optional[Settings] = None) -> int:
    ap = build_parser()
    ns = ap.parse_args(list(argv or []))
    settings = settings or load_settings()
    configure_logging(settings.log_level)

    try:
        return dispatch_commands(ns, settings)
    except (ConfigurationError, ContractError) as ex:
        _print({"status": "error", "error": f"{type(ex).__name__}: {ex}"})
        return 2
    except Exception as ex:  # keep CLI concise and user-friendly
        logger.debug("Command failed", exc_info=True)
        _print({"status": "error", "error": f"{type(ex).__name__}: {ex}"})
        return 3


def main() -> int:
    import sys
    return run(sys.argv[1:])


if __name__ == "__main__":
    raise SystemExit(main())
