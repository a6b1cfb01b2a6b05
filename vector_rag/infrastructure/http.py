from __future__ import annotations

from typing import Any, Dict, Optional, Type

import requests

from ..domain.errors import RemoteServiceError
from ..domain.result import RemoteResult
from .logging import get_logger

logger = get_logger("vector_rag.http")


def request_json(
    session: requests.Session,
    method: str,
    url: str,
    error_cls: Type[RemoteServiceError],
    timeout: float,
    json: Optional[Dict[str, Any]] = None,
) -> RemoteResult[Dict[str, Any]]:
    """Perform one HTTP call and decode its JSON body.

    Network errors, non-2xx statuses and undecodable bodies become
    ``RemoteResult.failure(error_cls(...))``. No retries.
    """
    try:
        r = session.request(method, url, json=json, timeout=timeout)
        r.raise_for_status()
        data = r.json() if r.content else {}
    except requests.HTTPError as ex:
        body = ex.response.text[:500] if ex.response is not None else ""
        logger.warning("HTTP error | %s %s | %s", method, url, ex)
        return RemoteResult.failure(error_cls(f"{ex} {body}".strip()))
    except requests.RequestException as ex:
        logger.warning("Request failed | %s %s | %s", method, url, ex)
        return RemoteResult.failure(error_cls(str(ex)))
    except ValueError as ex:
        return RemoteResult.failure(error_cls(f"Invalid JSON from {url}: {ex}"))
    if not isinstance(data, dict):
        return RemoteResult.failure(error_cls(f"Unexpected response shape from {url}"))
    return RemoteResult.success(data)
