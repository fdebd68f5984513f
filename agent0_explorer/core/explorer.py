"""
Main explorer class: loads the listing and detail views from the subgraph.
"""

from __future__ import annotations

import asyncio
import logging
import os
from typing import Any, Mapping, Optional

import aiohttp

from .constants import DEFAULT_SUBGRAPH_URL, DEFAULT_TIMEOUT, SUBGRAPH_URL_ENV
from .indexer import AgentIndexer
from .listing import ListingParams, decode_agent_id
from .subgraph_client import SubgraphClient
from .views import DetailPage, ListingPage, build_detail_page, build_listing_page, resolve_total

logger = logging.getLogger(__name__)


def resolve_subgraph_url(subgraph_url: Optional[str] = None) -> str:
    """
    Resolve the subgraph endpoint.

    Priority order:
    1. Explicit argument
    2. Environment variable AGENT0_SUBGRAPH_URL
    3. DEFAULT_SUBGRAPH_URL
    """
    if subgraph_url:
        return subgraph_url
    env_url = os.environ.get(SUBGRAPH_URL_ENV)
    if env_url:
        logger.info(f"Using subgraph URL from environment: {SUBGRAPH_URL_ENV}={env_url}")
        return env_url
    return DEFAULT_SUBGRAPH_URL


class AgentExplorer:
    """Entry point for the explorer views."""

    def __init__(
        self,
        subgraph_url: Optional[str] = None,
        subgraph_client: Optional[SubgraphClient] = None,
        timeout: float = DEFAULT_TIMEOUT,
    ):
        """Initialize with an injected client, or one built from the resolved URL."""
        self.subgraph_client = subgraph_client or SubgraphClient(
            resolve_subgraph_url(subgraph_url), timeout=timeout
        )
        self.indexer = AgentIndexer(self.subgraph_client)

    @property
    def subgraph_url(self) -> str:
        return self.subgraph_client.url

    def load_listing(self, query_params: Optional[Mapping[str, Any]] = None) -> ListingPage:
        """Build the listing view for the given URL query parameters."""
        return asyncio.run(self.load_listing_async(query_params))

    async def load_listing_async(self, query_params: Optional[Mapping[str, Any]] = None) -> ListingPage:
        """
        Build the listing view, fetching agents, stats and (when filtered) the
        filtered count concurrently.

        The requests are independent; if any of them fails the whole page
        fails with that error.
        """
        params = ListingParams.from_query(query_params)
        filters = params.filters
        logger.info(
            f"Loading listing page={params.page} perPage={params.per_page} "
            f"filters={filters if filters.is_active else 'none'}"
        )

        async with aiohttp.ClientSession() as session:
            coros = [
                self.indexer.list_agents_async(session, params.per_page, params.skip, filters),
                self.indexer.global_stats_async(session),
            ]
            if filters.is_active:
                coros.append(self.indexer.count_agents_async(session, filters))

            tasks = [asyncio.ensure_future(coro) for coro in coros]
            try:
                results = await asyncio.gather(*tasks)
            except BaseException:
                # Siblings must not outlive the session
                for task in tasks:
                    task.cancel()
                await asyncio.gather(*tasks, return_exceptions=True)
                raise

        agents, stats = results[0], results[1]
        filtered_count = results[2] if filters.is_active else None

        return build_listing_page(params, agents, resolve_total(stats, filtered_count))

    def load_detail(self, raw_id: str) -> Optional[DetailPage]:
        """Build the detail view for a (possibly percent-encoded) agent id.

        Returns None when the agent does not exist.
        """
        agent_id = decode_agent_id(raw_id)
        logger.info(f"Loading agent {agent_id}")

        detail = self.indexer.get_agent_detail(agent_id)
        if not detail.found:
            return None
        return build_detail_page(detail.agent, detail.feedback)

    def close(self) -> None:
        """Release the subgraph client's HTTP session."""
        self.subgraph_client.close()
