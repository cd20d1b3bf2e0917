"""HTTP plumbing shared by the Dune API route groups."""

import logging
from typing import Any, Dict, Optional, Type, TypeVar

import httpx
from pydantic import BaseModel, ValidationError

from dune_runner.constants import (
    API_KEY_HEADER,
    BASE_URL,
    DEFAULT_REQUEST_TIMEOUT_SECONDS,
    DUNE_CSV_NEXT_OFFSET_HEADER,
    DUNE_CSV_NEXT_URI_HEADER,
)
from dune_runner.errors import MalformedResponseError, TransportError
from dune_runner.models import ExecutionResultCSV
from dune_runner.tracing import trace_api_operation

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)


class Router:
    """Authenticated request helpers on top of a shared ``httpx.AsyncClient``."""

    def __init__(
        self,
        api_key: str,
        base_url: str = BASE_URL,
        *,
        timeout_seconds: float = DEFAULT_REQUEST_TIMEOUT_SECONDS,
        http_client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        """Initialize the router; an owned client is created when none is given."""
        self._api_key = api_key
        self._base_url = base_url.rstrip("/")
        self._owns_client = http_client is None
        self._client = http_client or httpx.AsyncClient(timeout=timeout_seconds)

    async def aclose(self) -> None:
        """Close the underlying HTTP client when this router created it."""
        if self._owns_client:
            await self._client.aclose()

    def _url(self, route: str) -> str:
        return f"{self._base_url}/{route.lstrip('/')}"

    async def _request(
        self,
        method: str,
        url: str,
        *,
        params: Optional[Dict[str, Any]] = None,
        payload: Optional[Dict[str, Any]] = None,
    ) -> httpx.Response:
        logger.debug("%s received input url=%s, payload=%s", method, url, payload)
        operation = self._client.request(
            method,
            url,
            params=params,
            json=payload,
            headers={API_KEY_HEADER: self._api_key},
        )
        try:
            response = await trace_api_operation(
                "dune.api.request", operation, method=method, url=url
            )
        except httpx.HTTPError as exc:
            raise TransportError(f"{method} {url} failed: {exc}") from exc

        if response.status_code >= 400:
            logger.error("response error %s for %s %s", response.status_code, method, url)
            raise TransportError(
                f"{method} {url} returned {response.status_code}: {_error_detail(response)}",
                status_code=response.status_code,
            )
        return response

    async def _get(self, route: str, params: Optional[Dict[str, Any]] = None) -> Any:
        return _decode_json(await self._request("GET", self._url(route), params=params))

    async def _get_by_url(self, url: str) -> Any:
        return _decode_json(await self._request("GET", url))

    async def _get_csv(
        self, route: str, params: Optional[Dict[str, Any]] = None
    ) -> ExecutionResultCSV:
        return _build_csv_page(await self._request("GET", self._url(route), params=params))

    async def _get_csv_by_url(self, url: str) -> ExecutionResultCSV:
        return _build_csv_page(await self._request("GET", url))

    async def _post(self, route: str, payload: Optional[Dict[str, Any]] = None) -> Any:
        return _decode_json(await self._request("POST", self._url(route), payload=payload))

    async def _patch(self, route: str, payload: Dict[str, Any]) -> Any:
        return _decode_json(await self._request("PATCH", self._url(route), payload=payload))


def parse_model(model: Type[ModelT], body: Any) -> ModelT:
    """Validate a decoded body against a response model."""
    try:
        return model.model_validate(body)
    except ValidationError as exc:
        raise MalformedResponseError(
            f"Unexpected {model.__name__} payload: {exc.error_count()} validation error(s)"
        ) from exc


def _decode_json(response: httpx.Response) -> Any:
    try:
        body = response.json()
    except ValueError as exc:
        raise MalformedResponseError(
            f"Response from {response.request.url} is not valid JSON"
        ) from exc
    if isinstance(body, dict) and body.get("error"):
        raise TransportError(_error_message(body["error"]), status_code=response.status_code)
    logger.debug("response %s", body)
    return body


def _error_message(error: Any) -> str:
    if isinstance(error, dict):
        return str(error.get("message") or error.get("type") or error)
    return str(error)


def _error_detail(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        return response.text or response.reason_phrase
    if isinstance(body, dict) and body.get("error"):
        return _error_message(body["error"])
    return str(body)


def _build_csv_page(response: httpx.Response) -> ExecutionResultCSV:
    next_offset = response.headers.get(DUNE_CSV_NEXT_OFFSET_HEADER)
    try:
        offset = int(next_offset) if next_offset else None
    except ValueError as exc:
        raise MalformedResponseError(
            f"Invalid {DUNE_CSV_NEXT_OFFSET_HEADER} header: '{next_offset}'"
        ) from exc
    return ExecutionResultCSV(
        data=response.text,
        next_uri=response.headers.get(DUNE_CSV_NEXT_URI_HEADER) or None,
        next_offset=offset,
    )
