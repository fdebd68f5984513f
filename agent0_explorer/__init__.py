"""
Agent0 explorer: browse ERC-8004 agents and their reviews from the Agent0 subgraph.
"""

from .core.explorer import AgentExplorer
from .core.indexer import AgentIndexer
from .core.models import (
    AgentDetail,
    AgentFilters,
    AgentRecord,
    FeedbackFile,
    FeedbackRecord,
    GlobalStats,
    RegistrationFile,
)
from .core.subgraph_client import (
    SubgraphClient,
    SubgraphError,
    SubgraphQueryError,
    SubgraphRequestError,
)

__version__ = "0.1.0"

__all__ = [
    "AgentExplorer",
    "AgentIndexer",
    "AgentDetail",
    "AgentFilters",
    "AgentRecord",
    "FeedbackFile",
    "FeedbackRecord",
    "GlobalStats",
    "RegistrationFile",
    "SubgraphClient",
    "SubgraphError",
    "SubgraphQueryError",
    "SubgraphRequestError",
]
