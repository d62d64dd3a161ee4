"""Route-matrix proxy: validation, caching and upstream error mapping."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from http import HTTPStatus
from typing import Any, Callable, Dict, Optional

import requests

from .cache import CacheStore
from .errors import BadRequest, InternalError, RateLimited, RouteMatrixError, UpstreamError
from .matrix_client import (
    REQUEST_TIMEOUT,
    build_matrix_body,
    compute_route_matrix,
    count_destinations,
    get_api_key,
    parse_destinations,
    parse_origin,
)
from .models import RouteMatrixRequest

MAX_DESTINATIONS = 25

Fetcher = Callable[..., requests.Response]

logger = logging.getLogger(__name__)


@dataclass
class MatrixResult:
    payload: Any
    from_cache: bool = False


class RouteMatrixProxy:
    """Serves route matrices from the cache, falling back to the Routes API.

    Every failure leaves :meth:`fetch` as a :class:`RouteMatrixError`; nothing
    is retried. Concurrent misses on the same fingerprint each call upstream.
    """

    def __init__(
        self,
        cache: Optional[CacheStore] = None,
        *,
        api_key_getter: Callable[[], str] = get_api_key,
        fetcher: Fetcher = compute_route_matrix,
        timeout: float = REQUEST_TIMEOUT,
    ) -> None:
        self.cache = cache if cache is not None else CacheStore()
        self._api_key_getter = api_key_getter
        self._fetcher = fetcher
        self.timeout = timeout

    def fetch(self, request: RouteMatrixRequest) -> MatrixResult:
        try:
            return self._fetch(request)
        except RouteMatrixError:
            raise
        except Exception as exc:  # pylint: disable=broad-except
            logger.exception("Routes API proxy error")
            raise InternalError(str(exc) or "Internal Server Error") from exc

    def _fetch(self, request: RouteMatrixRequest) -> MatrixResult:
        if not request.origins or not request.destinations:
            raise BadRequest("Missing origins or destinations")

        api_key = self._api_key_getter()
        if not api_key:
            raise BadRequest("Missing API key")

        if count_destinations(request.destinations) > MAX_DESTINATIONS:
            raise BadRequest(f"Exceeds max {MAX_DESTINATIONS} destinations.")

        fingerprint = request.fingerprint()
        cached = self.cache.get(fingerprint)
        if cached is not None:
            logger.info("Serving from cache: %s", fingerprint)
            return MatrixResult(payload=cached.payload, from_cache=True)

        body = build_matrix_body(
            parse_origin(request.origins),
            parse_destinations(request.destinations),
            mode=request.mode,
            units=request.units,
            language=request.language,
        )
        response = self._fetcher(body, api_key, timeout=self.timeout)

        if not response.ok:
            raise self._map_http_error(response)

        data = response.json()
        if data is not None:
            logger.info("Storing in cache: %s", fingerprint)
            self.cache.put(fingerprint, data)
        else:
            logger.warning("Routes API returned no payload for %s", fingerprint)
        return MatrixResult(payload=data)

    @staticmethod
    def _map_http_error(response: requests.Response) -> RouteMatrixError:
        data = _json_or_empty(response)
        logger.error("API HTTP Error: %s %s %s", response.status_code, response.reason, data)
        if response.status_code == HTTPStatus.TOO_MANY_REQUESTS:
            return RateLimited("Rate limit exceeded. Try later.")
        error_block = data.get("error") if isinstance(data, dict) else None
        message = error_block.get("message") if isinstance(error_block, dict) else None
        return UpstreamError(response.status_code, message)


def _json_or_empty(response: requests.Response) -> Dict[str, Any]:
    try:
        data = response.json()
    except ValueError:
        return {}
    return data if isinstance(data, dict) else {}
