"""In-memory cosine-similarity ranking.

Intended for small candidate sets (a handful of documents embedded in one
run). Larger collections belong in the vector store, which offers its own
approximate top-K search.
"""
from __future__ import annotations

from typing import List, Sequence, Union

import numpy as np

from .errors import ContractError, DimensionMismatchError, InvalidVectorError
from .models import DocumentRecord, SimilarityResult, Vector

VectorLike = Union[Vector, Sequence[float]]


def _as_array(v: VectorLike) -> np.ndarray:
    values = v.values if isinstance(v, Vector) else v
    return np.asarray(values, dtype=np.float64)


def cosine_similarity(a: VectorLike, b: VectorLike) -> float:
    """Cosine similarity ``dot(a, b) / (|a| * |b|)``, clamped into [-1, 1].

    Raises:
        DimensionMismatchError: ``a`` and ``b`` differ in length.
        InvalidVectorError: either vector has zero magnitude or a non-finite component.
    """
    va = _as_array(a)
    vb = _as_array(b)
    if va.shape != vb.shape:
        raise DimensionMismatchError(f"Vector length mismatch: {va.shape[0]} != {vb.shape[0]}")
    if not (np.all(np.isfinite(va)) and np.all(np.isfinite(vb))):
        raise InvalidVectorError("Cosine similarity is undefined for vectors with NaN or infinite components")
    # rescale by max |x| so the norms neither overflow nor underflow
    scale_a = float(np.max(np.abs(va))) if va.size else 0.0
    scale_b = float(np.max(np.abs(vb))) if vb.size else 0.0
    if scale_a == 0.0 or scale_b == 0.0:
        raise InvalidVectorError("Cosine similarity is undefined for zero-magnitude vectors")
    va = va / scale_a
    vb = vb / scale_b
    norm_a = float(np.linalg.norm(va))
    norm_b = float(np.linalg.norm(vb))
    score = float(np.dot(va, vb) / (norm_a * norm_b))
    return float(np.clip(score, -1.0, 1.0))


def rank_by_similarity(query: VectorLike, candidates: Sequence[DocumentRecord]) -> List[SimilarityResult]:
    """Score every candidate against ``query`` and sort by descending score.

    Ties keep their input order. All scores are computed before sorting, so a
    bad candidate raises without yielding any partial ranking.
    """
    scored = [
        SimilarityResult(id=c.id, text=c.text, score=cosine_similarity(query, c.vector))
        for c in candidates
    ]
    # sorted() is stable with reverse=True as well
    return sorted(scored, key=lambda r: r.score, reverse=True)


def top_k(results: Sequence[SimilarityResult], k: int) -> List[SimilarityResult]:
    if k < 1:
        raise ContractError(f"k must be >= 1, got {k}")
    return list(results[:k])
