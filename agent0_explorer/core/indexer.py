"""
Agent indexer: data access for agent listings, details and statistics.

All reads go through the Agent0 subgraph. The indexer builds the query, runs a
single request per call through ``SubgraphClient`` and maps the payload onto
the local models. Errors from the client propagate unchanged.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

import aiohttp

from .constants import DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE
from .models import (
    AgentId, AgentRecord, AgentDetail, AgentFilters, FeedbackRecord, GlobalStats
)
from .query_builder import (
    build_agent_filter,
    build_agent_detail_query,
    build_agent_ids_query,
    build_agents_query,
    build_global_stats_query,
)
from .subgraph_client import SubgraphClient

logger = logging.getLogger(__name__)


class AgentIndexer:
    """Indexer for agent discovery backed by the subgraph."""

    def __init__(self, subgraph_client: SubgraphClient):
        self.subgraph_client = subgraph_client

    # Agents

    def list_agents(
        self,
        first: int = DEFAULT_PAGE_SIZE,
        skip: int = 0,
        filters: Optional[AgentFilters] = None,
    ) -> List[AgentRecord]:
        """Fetch one page of agents, newest first."""
        query = build_agents_query(first, skip, build_agent_filter(filters))
        data = self.subgraph_client.query(query)
        return self._map_agents(data)

    async def list_agents_async(
        self,
        session: aiohttp.ClientSession,
        first: int = DEFAULT_PAGE_SIZE,
        skip: int = 0,
        filters: Optional[AgentFilters] = None,
    ) -> List[AgentRecord]:
        query = build_agents_query(first, skip, build_agent_filter(filters))
        data = await self.subgraph_client.query_async(query, session)
        return self._map_agents(data)

    def _map_agents(self, data: Dict[str, Any]) -> List[AgentRecord]:
        return [AgentRecord.from_dict(agent) for agent in data.get("agents") or []]

    def get_agent_detail(self, agent_id: AgentId) -> AgentDetail:
        """Fetch one agent with its recent non-revoked feedback.

        An unknown id is not an error: the result has ``agent=None``.
        """
        data = self.subgraph_client.query(build_agent_detail_query(agent_id))
        agent_data = data.get("agent")

        if not agent_data:
            logger.info(f"Agent {agent_id} not found in subgraph")
            return AgentDetail(agent=None, feedback=[])

        feedback = [FeedbackRecord.from_dict(fb) for fb in agent_data.get("feedback") or []]
        return AgentDetail(
            agent=AgentRecord.from_dict(agent_data),
            feedback=[fb for fb in feedback if not fb.isRevoked],
        )

    # Counting

    def count_agents(self, filters: Optional[AgentFilters] = None) -> int:
        """Count agents matching the filters.

        The subgraph has no count aggregate, so ids are walked in pages of
        1000 until a short page comes back.
        """
        where = build_agent_filter(filters)
        total = 0
        after_id: Optional[str] = None
        while True:
            data = self.subgraph_client.query(build_agent_ids_query(where, after_id))
            ids = self._map_ids(data)
            total += len(ids)
            if len(ids) < MAX_PAGE_SIZE:
                return total
            after_id = ids[-1]

    async def count_agents_async(
        self,
        session: aiohttp.ClientSession,
        filters: Optional[AgentFilters] = None,
    ) -> int:
        where = build_agent_filter(filters)
        total = 0
        after_id: Optional[str] = None
        while True:
            data = await self.subgraph_client.query_async(build_agent_ids_query(where, after_id), session)
            ids = self._map_ids(data)
            total += len(ids)
            if len(ids) < MAX_PAGE_SIZE:
                return total
            after_id = ids[-1]

    def _map_ids(self, data: Dict[str, Any]) -> List[str]:
        return [agent["id"] for agent in data.get("agents") or []]

    # Statistics

    def global_stats(self) -> GlobalStats:
        """Subgraph-wide agent and feedback totals."""
        return self._map_stats(self.subgraph_client.query(build_global_stats_query()))

    async def global_stats_async(self, session: aiohttp.ClientSession) -> GlobalStats:
        data = await self.subgraph_client.query_async(build_global_stats_query(), session)
        return self._map_stats(data)

    def _map_stats(self, data: Dict[str, Any]) -> GlobalStats:
        stats = data.get("globalStats")
        if not stats:
            logger.warning("Subgraph has no globalStats entity, reporting zero totals")
            return GlobalStats()
        return GlobalStats.from_dict(stats)
