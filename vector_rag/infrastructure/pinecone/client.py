from __future__ import annotations

from typing import Dict, List, Optional, Sequence

import requests

from ...domain.errors import DimensionMismatchError, VectorStoreError
from ...domain.interfaces import VectorStore
from ...domain.models import StoreMatch, StoreRecord, Vector
from ...domain.result import RemoteResult
from ..config import Settings
from ..http import request_json
from ..logging import get_logger

logger = get_logger("vector_rag.pinecone")

API_VERSION = "2024-07"


class PineconeVectorStore(VectorStore):
    """Vector store adapter for the Pinecone REST data plane.

    The data-plane host comes from ``PINECONE_INDEX_HOST`` or is looked up once
    through the control plane (``GET /indexes/{name}``).
    """

    def __init__(self, settings: Settings, session: Optional[requests.Session] = None) -> None:
        self._settings = settings
        self._http = session or requests.Session()
        self._http.headers.update(
            {
                "Api-Key": settings.require_pinecone(),
                "X-Pinecone-API-Version": API_VERSION,
                "Content-Type": "application/json",
            }
        )
        self._host: Optional[str] = settings.pinecone_index_host

    def _base(self) -> RemoteResult[str]:
        if self._host:
            host = self._host
        else:
            url = f"{self._settings.pinecone_control_url}/indexes/{self._settings.pinecone_index}"
            res = request_json(self._http, "GET", url, VectorStoreError, self._settings.http_timeout)
            if not res.ok:
                return RemoteResult.failure(res.error)
            host = str(res.value.get("host") or "").strip()
            if not host:
                return RemoteResult.failure(
                    VectorStoreError(f"Index '{self._settings.pinecone_index}' has no host")
                )
            logger.info("Resolved index host | index=%s | host=%s", self._settings.pinecone_index, host)
            self._host = host
        if not host.startswith(("http://", "https://")):
            host = f"https://{host}"
        return RemoteResult.success(host.rstrip("/"))

    def _post(self, path: str, body: Dict[str, object]) -> RemoteResult[dict]:
        base = self._base()
        if not base.ok:
            return RemoteResult.failure(base.error)
        return request_json(
            self._http, "POST", f"{base.value}{path}", VectorStoreError, self._settings.http_timeout, json=body
        )

    def _with_namespace(self, body: Dict[str, object]) -> Dict[str, object]:
        if self._settings.pinecone_namespace:
            body["namespace"] = self._settings.pinecone_namespace
        return body

    def upsert_records(self, records: Sequence[StoreRecord]) -> RemoteResult[dict]:
        if not records:
            return RemoteResult.success({"upsertedCount": 0})
        dim = records[0].vector.dim
        for rec in records:
            if rec.vector.dim != dim:
                return RemoteResult.failure(
                    DimensionMismatchError(f"Record {rec.id} has dim={rec.vector.dim}, expected={dim}")
                )
        body = self._with_namespace(
            {
                "vectors": [
                    {"id": rec.id, "values": rec.vector.values, "metadata": rec.metadata}
                    for rec in records
                ]
            }
        )
        return self._post("/vectors/upsert", body)

    def query(self, vector: Vector, top_k: int, include_metadata: bool = True) -> RemoteResult[List[StoreMatch]]:
        body = self._with_namespace(
            {
                "vector": vector.values,
                "topK": int(top_k),
                "includeMetadata": bool(include_metadata),
                "includeValues": False,
            }
        )
        res = self._post("/query", body)
        if not res.ok:
            return RemoteResult.failure(res.error)
        try:
            matches: List[StoreMatch] = []
            for it in res.value.get("matches") or []:
                metadata = it.get("metadata") or {}
                if not isinstance(metadata, dict):
                    raise TypeError(f"metadata must be an object, got {type(metadata).__name__}")
                matches.append(StoreMatch(id=str(it["id"]), score=float(it["score"]), metadata=metadata))
        except (AttributeError, KeyError, TypeError, ValueError) as ex:
            return RemoteResult.failure(VectorStoreError(f"Malformed query response: {ex!r}"))
        return RemoteResult.success(matches)

    def describe_stats(self) -> RemoteResult[dict]:
        return self._post("/describe_index_stats", {})
