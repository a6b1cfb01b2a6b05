from __future__ import annotations

from typing import List, Optional, Sequence

import requests

from ...domain.errors import DimensionMismatchError, EmbeddingError, GenerationError
from ...domain.interfaces import EmbeddingService, GenerationService
from ...domain.models import TaskType, Vector
from ...domain.result import RemoteResult
from ..config import Settings
from ..http import request_json
from ..logging import get_logger

logger = get_logger("vector_rag.gemini")


def _session(api_key: str, session: Optional[requests.Session]) -> requests.Session:
    s = session or requests.Session()
    s.headers.update({"x-goog-api-key": api_key, "Content-Type": "application/json"})
    return s


class GeminiEmbeddingService(EmbeddingService):
    """Embedding adapter for the Generative Language ``batchEmbedContents`` endpoint."""

    def __init__(self, settings: Settings, session: Optional[requests.Session] = None) -> None:
        self._settings = settings
        self._http = _session(settings.require_gemini(), session)

    def embed_texts(self, texts: Sequence[str], task_type: TaskType) -> RemoteResult[List[Vector]]:
        if not texts:
            return RemoteResult.success([])
        model = self._settings.embed_model
        url = f"{self._settings.gemini_base_url}/models/{model}:batchEmbedContents"
        body = {
            "requests": [
                {
                    "model": f"models/{model}",
                    "content": {"parts": [{"text": t}]},
                    "taskType": TaskType(task_type).value,
                }
                for t in texts
            ]
        }
        logger.debug("Embed request | model=%s | task=%s | count=%d", model, TaskType(task_type).value, len(texts))
        res = request_json(self._http, "POST", url, EmbeddingError, self._settings.http_timeout, json=body)
        if not res.ok:
            return RemoteResult.failure(res.error)

        try:
            vectors = [Vector.of(e["values"]) for e in res.value.get("embeddings") or []]
        except (KeyError, TypeError, ValueError) as ex:
            return RemoteResult.failure(EmbeddingError(f"Malformed embedding response: {ex}"))
        if len(vectors) != len(texts):
            return RemoteResult.failure(
                EmbeddingError(f"Expected {len(texts)} embeddings, got {len(vectors)}")
            )
        expected = self._settings.embed_dim
        for v in vectors:
            if expected and v.dim != expected:
                return RemoteResult.failure(
                    DimensionMismatchError(f"Model {model} returned dim={v.dim}, expected={expected}")
                )
        return RemoteResult.success(vectors)

    def get_dimension(self) -> int:
        vecs = self.embed_texts(["probe"], TaskType.RETRIEVAL_DOCUMENT).unwrap()
        if not vecs:
            raise EmbeddingError("Embedding dimension probe failed (no vectors)")
        return vecs[0].dim


class GeminiGenerationService(GenerationService):
    """Single-shot text generation via ``generateContent``."""

    def __init__(self, settings: Settings, session: Optional[requests.Session] = None) -> None:
        self._settings = settings
        self._http = _session(settings.require_gemini(), session)

    def generate(self, prompt: str) -> RemoteResult[str]:
        model = self._settings.generation_model
        url = f"{self._settings.gemini_base_url}/models/{model}:generateContent"
        body = {"contents": [{"role": "user", "parts": [{"text": prompt}]}]}
        logger.debug("Generate request | model=%s | prompt_chars=%d", model, len(prompt))
        res = request_json(self._http, "POST", url, GenerationError, self._settings.http_timeout, json=body)
        if not res.ok:
            return RemoteResult.failure(res.error)

        try:
            candidates = res.value.get("candidates") or []
            if not candidates:
                reason = (res.value.get("promptFeedback") or {}).get("blockReason", "no candidates")
                return RemoteResult.failure(GenerationError(f"Generation returned no candidates ({reason})"))
            parts = (candidates[0].get("content") or {}).get("parts") or []
            if not isinstance(parts, list):
                raise TypeError(f"parts must be a list, got {type(parts).__name__}")
            text = "".join(str(p["text"]) for p in parts if "text" in p)
        except (AttributeError, KeyError, TypeError) as ex:
            return RemoteResult.failure(GenerationError(f"Malformed generation response: {ex!r}"))
        return RemoteResult.success(text)
