"""
View models for the agent listing and the agent detail page.

Builders here take records that were already fetched and compute what a
renderer shows. They never call the subgraph.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Optional

from .constants import CARD_TRUST_LIMIT, PAGE_SIZES
from .formatting import (
    active_feedback,
    average_score,
    checksum_address,
    format_address,
    format_timestamp,
    readable_tags,
)
from .listing import ListingParams, agent_path, build_url, page_size_url, total_pages
from .models import AgentRecord, FeedbackRecord, GlobalStats


@dataclass
class AgentCard:
    """One agent in the listing grid."""
    id: str
    href: str
    name: str
    agentId: str
    description: Optional[str]
    trusts: List[str]
    feedbackCount: int
    hasEndpoint: bool
    owner: str  # shortened
    created: str


@dataclass
class ListingPage:
    """Everything the listing view renders."""
    cards: List[AgentCard]
    search: str
    page: int
    perPage: int
    totalAgents: int
    totalPages: int
    hasActiveFilters: bool
    hasReviews: bool
    hasEndpoint: bool
    previousUrl: Optional[str]
    nextUrl: Optional[str]
    hasReviewsToggleUrl: str
    hasEndpointToggleUrl: str
    clearUrl: str
    pageSizeUrls: Dict[int, str] = field(default_factory=dict)

    @property
    def summary(self) -> str:
        if self.hasActiveFilters:
            return f"{self.totalAgents:,} matching agents"
        return f"{self.totalAgents:,} registered agents on Ethereum Sepolia"


@dataclass
class ReviewCard:
    """One feedback entry on the detail page."""
    id: str
    score: int
    text: Optional[str]
    tags: List[str]
    capability: Optional[str]
    skill: Optional[str]
    reviewer: str  # shortened
    created: str


@dataclass
class DetailPage:
    """Everything the detail view renders."""
    id: str
    name: str
    initial: str  # avatar placeholder when there is no image
    description: Optional[str]
    image: Optional[str]
    trusts: List[str]
    mcpEndpoint: Optional[str]
    a2aEndpoint: Optional[str]
    owner: str  # checksummed
    ownerShort: str
    created: str
    totalFeedback: int
    averageScore: Optional[int]
    reviews: List[ReviewCard]


def build_agent_card(agent: AgentRecord) -> AgentCard:
    reg = agent.registrationFile
    return AgentCard(
        id=agent.id,
        href=agent_path(agent.id),
        name=agent.display_name,
        agentId=agent.agentId,
        description=reg.description if reg else None,
        trusts=agent.supported_trusts[:CARD_TRUST_LIMIT],
        feedbackCount=agent.totalFeedback,
        hasEndpoint=agent.has_endpoint,
        owner=format_address(agent.owner),
        created=format_timestamp(agent.createdAt),
    )


def resolve_total(stats: GlobalStats, filtered_count: Optional[int]) -> int:
    """Filtered count when filters are active, otherwise the global total."""
    return filtered_count if filtered_count is not None else stats.totalAgents


def build_listing_page(
    params: ListingParams,
    agents: List[AgentRecord],
    total_agents: int,
) -> ListingPage:
    current = params.to_params()
    pages = total_pages(total_agents, params.per_page)

    return ListingPage(
        cards=[build_agent_card(agent) for agent in agents],
        search=params.search,
        page=params.page,
        perPage=params.per_page,
        totalAgents=total_agents,
        totalPages=pages,
        hasActiveFilters=params.filters.is_active,
        hasReviews=params.has_reviews,
        hasEndpoint=params.has_endpoint,
        previousUrl=build_url(current, {"page": str(params.page - 1)}) if params.page > 1 else None,
        nextUrl=build_url(current, {"page": str(params.page + 1)}) if params.page < pages else None,
        hasReviewsToggleUrl=build_url(current, {
            "hasReviews": None if params.has_reviews else "true",
            "page": "1",
        }),
        hasEndpointToggleUrl=build_url(current, {
            "hasEndpoint": None if params.has_endpoint else "true",
            "page": "1",
        }),
        clearUrl="/",
        pageSizeUrls={size: page_size_url(current, size) for size in PAGE_SIZES},
    )


def build_review_card(feedback: FeedbackRecord) -> ReviewCard:
    feedback_file = feedback.feedbackFile
    return ReviewCard(
        id=feedback.id,
        score=feedback.score,
        text=feedback_file.text if feedback_file else None,
        tags=readable_tags(feedback),
        capability=feedback_file.capability if feedback_file else None,
        skill=feedback_file.skill if feedback_file else None,
        reviewer=format_address(feedback.clientAddress),
        created=format_timestamp(feedback.createdAt),
    )


def build_detail_page(agent: AgentRecord, feedback: List[FeedbackRecord]) -> DetailPage:
    reg = agent.registrationFile
    name = agent.display_name
    reviews = active_feedback(feedback)

    return DetailPage(
        id=agent.id,
        name=name,
        initial=name[:1].upper(),
        description=reg.description if reg else None,
        image=reg.image if reg else None,
        trusts=list(agent.supported_trusts),
        mcpEndpoint=reg.mcpEndpoint if reg else None,
        a2aEndpoint=reg.a2aEndpoint if reg else None,
        owner=checksum_address(agent.owner),
        ownerShort=format_address(agent.owner),
        created=format_timestamp(agent.createdAt),
        totalFeedback=agent.totalFeedback,
        averageScore=average_score(reviews),
        reviews=[build_review_card(fb) for fb in reviews],
    )
