from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from typing import Any, Callable, Dict, Iterable, List, Optional, TypeVar

import requests
from loguru import logger
from pydantic import ValidationError

from omnihr.auth import OmniHRAuth
from omnihr.errors import ApiError, AuthenticationError, PaginationError
from pydantic_models.config.api_config import ApiConfig
from pydantic_models.data.api_responses import PageResponse

T = TypeVar("T")
R = TypeVar("R")


class BatchResult:
    """
    Outcome of one item of a batch: either `value` or `error` is set.
    """

    __slots__ = ("item", "value", "error")

    def __init__(self, item: Any, value: Any = None, error: Optional[Exception] = None):
        self.item = item
        self.value = value
        self.error = error

    @property
    def ok(self) -> bool:
        return self.error is None


def run_in_batches(
    items: Iterable[T],
    fn: Callable[[T], R],
    batch_size: int,
    on_progress: Optional[Callable[[int, int, T], None]] = None,
) -> List[BatchResult]:
    """
    Runs `fn` over `items` in fixed-size batches. All calls of a batch are
    fired together and awaited before the next batch starts. A failing item
    is recorded in its BatchResult and never aborts the batch.

    Args:
        items: Work items, processed in order.
        fn: Called once per item.
        batch_size: Number of concurrent calls per batch.
        on_progress: Called after each batch with (completed, total, last item).

    Returns:
        List[BatchResult]: One result per item, in input order.
    """
    pending = list(items)
    total = len(pending)
    results: List[BatchResult] = []

    def _call(item: T) -> BatchResult:
        try:
            return BatchResult(item, value=fn(item))
        except Exception as e:
            return BatchResult(item, error=e)

    with ThreadPoolExecutor(max_workers=max(1, batch_size)) as executor:
        for start in range(0, total, batch_size):
            batch = pending[start:start + batch_size]
            results.extend(executor.map(_call, batch))
            if on_progress and batch:
                on_progress(len(results), total, batch[-1])
    return results


class OmniHRAPIClient:
    """
    Thin wrapper around requests with OmniHR auth headers, JSON decoding and
    pagination.
    """

    def __init__(self, auth: OmniHRAuth, api_config: Optional[ApiConfig] = None):
        self.auth = auth
        self.api_config = api_config or ApiConfig()
        self.base_url = auth.base_url
        self.session = auth.session

    @staticmethod
    def parse_response(response: requests.Response) -> Any:
        if response.status_code in (204, 205):
            return None
        content_type = response.headers.get("content-type", "")
        if "application/json" in content_type:
            return response.json()
        if "text/" in content_type:
            return response.text
        return response.content

    def _error_body(self, response: requests.Response) -> Any:
        try:
            return self.parse_response(response)
        except ValueError:
            return None

    def make_request(self, method: str, endpoint: str, **kwargs: Any) -> Any:
        """
        Sends one request and returns the decoded body.

        Raises:
            AuthenticationError: On HTTP 401.
            ApiError: On any other non-2xx status or a network failure.
        """
        headers = {**self.auth.get_auth_headers(), **kwargs.pop("headers", {})}
        url = f"{self.base_url}{endpoint}"
        try:
            response = self.session.request(method, url, headers=headers, timeout=self.api_config.timeout, **kwargs)
        except requests.RequestException as e:
            logger.error(f"Network error on {method} {endpoint}: {e}")
            raise ApiError(f"Network error on {method} {endpoint}: {e}") from e

        if response.status_code == 401:
            body = self._error_body(response)
            logger.error(f"Unauthorized (401) on {endpoint}: {body}")
            raise AuthenticationError(f"Unauthorized (401): invalid credentials or subdomain. {body}")

        if not response.ok:
            body = self._error_body(response)
            logger.debug(f"HTTP {response.status_code} on {method} {endpoint}: {body}")
            raise ApiError(
                f"HTTP error! status: {response.status_code}, body: {body}",
                status=response.status_code,
                body=body,
            )

        return self.parse_response(response)

    def get(self, endpoint: str, params: Optional[Dict[str, Any]] = None) -> Any:
        return self.make_request("GET", endpoint, params=params or None)

    def post(self, endpoint: str, data: Optional[Dict[str, Any]] = None) -> Any:
        return self.make_request("POST", endpoint, json=data or {})

    def get_paginated(
        self,
        endpoint: str,
        params: Optional[Dict[str, Any]] = None,
        page_size: Optional[int] = None,
    ) -> List[Dict[str, Any]]:
        """
        Requests page=1,2,... until `next` is null and concatenates the
        `results` arrays. A bare array response is the only page.

        Raises:
            PaginationError: If more than `max_pages` pages would be requested.
            ApiError: If a page has neither an array nor a `results` field.
        """
        size = page_size or self.api_config.page_size
        max_pages = self.api_config.max_pages
        collected: List[Dict[str, Any]] = []
        page = 1
        while True:
            if page > max_pages:
                raise PaginationError(f"{endpoint} returned more than {max_pages} pages; aborting.")
            payload = self.get(endpoint, {**(params or {}), "page": page, "page_size": size})
            try:
                parsed = PageResponse.model_validate(payload)
            except ValidationError as e:
                raise ApiError(f"Unexpected page shape from {endpoint}: {e}", body=payload) from e
            collected.extend(parsed.results)
            logger.debug(f"{endpoint}: page {page} with {len(parsed.results)} records.")
            if parsed.next is None:
                break
            page += 1
        return collected

    def user_endpoint(self, template: str, user_id: int) -> str:
        return template.format(user_id=user_id)
