"""
Client for the Agent0 subgraph GraphQL endpoint.

One request, one response: no retries, no caching. A failed HTTP status or a
GraphQL ``errors`` array fails the call with a single descriptive exception.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

import aiohttp
import requests

from .constants import DEFAULT_TIMEOUT

logger = logging.getLogger(__name__)


class SubgraphError(Exception):
    """Base error for subgraph failures."""


class SubgraphRequestError(SubgraphError):
    """The endpoint answered with a non-success HTTP status."""

    def __init__(self, status_code: int):
        super().__init__(f"Subgraph request failed: {status_code}")
        self.status_code = status_code


class SubgraphQueryError(SubgraphError):
    """The endpoint reported GraphQL errors."""

    def __init__(self, errors: List[Dict[str, Any]]):
        message = "unknown error"
        if errors and isinstance(errors[0], dict):
            message = errors[0].get("message", message)
        super().__init__(f"GraphQL error: {message}")
        self.errors = errors


class SubgraphClient:
    """Posts GraphQL queries to a single subgraph endpoint."""

    def __init__(
        self,
        url: str,
        timeout: float = DEFAULT_TIMEOUT,
        session: Optional[requests.Session] = None,
    ):
        """
        Initialize the subgraph client.

        Args:
            url: GraphQL endpoint of the subgraph
            timeout: Request timeout in seconds (default: 30)
            session: Optional requests session (a new one is created otherwise)
        """
        if not url:
            raise ValueError("Subgraph URL is required")
        self.url = url
        self.timeout = timeout
        self._owns_session = session is None
        self.session = session or requests.Session()

    def close(self) -> None:
        """Close the requests session if this client created it."""
        if self._owns_session:
            self.session.close()

    def __enter__(self) -> SubgraphClient:
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def query(self, query: str) -> Dict[str, Any]:
        """Execute a query and return its ``data`` object."""
        logger.debug(f"Subgraph query to {self.url}: {query.strip()}")
        response = self.session.post(
            self.url,
            json={"query": query},
            headers={"Content-Type": "application/json"},
            timeout=self.timeout,
        )
        if not response.ok:
            return self._extract_data(response.status_code, None)
        try:
            payload = response.json()
        except ValueError as e:
            raise self._malformed(e) from e
        return self._extract_data(response.status_code, payload)

    async def query_async(self, query: str, session: aiohttp.ClientSession) -> Dict[str, Any]:
        """Execute a query on a shared aiohttp session and return its ``data`` object."""
        logger.debug(f"Subgraph query (async) to {self.url}: {query.strip()}")
        async with session.post(
            self.url,
            json={"query": query},
            headers={"Content-Type": "application/json"},
            timeout=aiohttp.ClientTimeout(total=self.timeout),
        ) as response:
            if response.status >= 400:
                return self._extract_data(response.status, None)
            try:
                payload = await response.json(content_type=None)
            except ValueError as e:
                raise self._malformed(e) from e
            return self._extract_data(response.status, payload)

    def _malformed(self, cause: Exception) -> SubgraphError:
        logger.error(f"Subgraph at {self.url} returned a non-JSON body: {cause}")
        return SubgraphError("Subgraph returned a malformed response")

    def _extract_data(self, status: int, payload: Optional[Dict[str, Any]]) -> Dict[str, Any]:
        """Validate the response envelope."""
        if status < 200 or status >= 300:
            logger.error(f"Subgraph request to {self.url} failed with HTTP {status}")
            raise SubgraphRequestError(status)

        if not isinstance(payload, dict):
            raise SubgraphError("Subgraph returned a malformed response")

        errors = payload.get("errors")
        if errors:
            logger.error(f"Subgraph returned {len(errors)} GraphQL error(s): {errors}")
            raise SubgraphQueryError(errors)

        data = payload.get("data")
        if data is None:
            raise SubgraphError("Subgraph response has no data")
        return data
