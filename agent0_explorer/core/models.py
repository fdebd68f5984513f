"""
Core data models for the Agent0 explorer.

Every record here is a read-only projection of subgraph state. Records are
built from the subgraph's JSON with ``from_dict`` and never written back.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal, InvalidOperation
from typing import Any, Dict, List, Optional


# Type aliases
AgentId = str  # "chainId:tokenId" (e.g., "11155111:42")
ChainId = int
Address = str  # 0x-hex
URI = str  # https://... or ipfs://...
Timestamp = int  # unix seconds


def _to_int(value: Any, default: int = 0) -> int:
    """Parse a subgraph BigInt/BigDecimal (usually a decimal string) to int.

    Fractional values are truncated toward zero.
    """
    if value is None or value == "":
        return default
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, int):
        return value
    try:
        return int(Decimal(str(value)))
    except (InvalidOperation, ValueError):
        return default


@dataclass
class RegistrationFile:
    """Off-chain registration metadata indexed by the subgraph."""
    name: Optional[str] = None
    description: Optional[str] = None
    image: Optional[URI] = None
    mcpEndpoint: Optional[str] = None
    a2aEndpoint: Optional[str] = None
    supportedTrusts: List[str] = field(default_factory=list)
    # Only requested by the detail query
    ens: Optional[str] = None
    agentWallet: Optional[Address] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> RegistrationFile:
        """Create from subgraph JSON."""
        return cls(
            name=data.get("name"),
            description=data.get("description"),
            image=data.get("image"),
            mcpEndpoint=data.get("mcpEndpoint"),
            a2aEndpoint=data.get("a2aEndpoint"),
            supportedTrusts=list(data.get("supportedTrusts") or []),
            ens=data.get("ens"),
            agentWallet=data.get("agentWallet"),
        )


@dataclass
class AgentRecord:
    """An ERC-8004 agent as indexed by the subgraph."""
    id: AgentId
    chainId: ChainId
    agentId: str  # token id
    owner: Address
    metadataUri: Optional[URI] = None
    createdAt: Timestamp = 0
    updatedAt: Timestamp = 0
    totalFeedback: int = 0
    registrationFile: Optional[RegistrationFile] = None

    @property
    def display_name(self) -> str:
        """Registration name, or a synthesized label when metadata is missing."""
        if self.registrationFile and self.registrationFile.name:
            return self.registrationFile.name
        return f"Agent #{self.agentId}"

    @property
    def has_endpoint(self) -> bool:
        reg = self.registrationFile
        return bool(reg and (reg.mcpEndpoint or reg.a2aEndpoint))

    @property
    def supported_trusts(self) -> List[str]:
        return self.registrationFile.supportedTrusts if self.registrationFile else []

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> AgentRecord:
        """Create from subgraph JSON.

        The subgraph exposes the registration URI as ``agentURI``; it is stored
        as ``metadataUri``. An explicit ``metadataUri`` wins if both exist.
        """
        reg_file = data.get("registrationFile")
        return cls(
            id=data["id"],
            chainId=_to_int(data.get("chainId")),
            agentId=str(data.get("agentId", "")),
            owner=data.get("owner", ""),
            metadataUri=data.get("metadataUri", data.get("agentURI")),
            createdAt=_to_int(data.get("createdAt")),
            updatedAt=_to_int(data.get("updatedAt")),
            totalFeedback=_to_int(data.get("totalFeedback")),
            registrationFile=RegistrationFile.from_dict(reg_file) if isinstance(reg_file, dict) else None,
        )


@dataclass
class FeedbackFile:
    """Off-chain feedback payload."""
    text: Optional[str] = None
    capability: Optional[str] = None  # MCP capability: "prompts", "resources", "tools", ...
    skill: Optional[str] = None  # A2A skill

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> FeedbackFile:
        return cls(
            text=data.get("text"),
            capability=data.get("capability"),
            skill=data.get("skill"),
        )


@dataclass
class FeedbackRecord:
    """A review submitted against an agent."""
    id: str
    score: int  # 0-100
    clientAddress: Address
    createdAt: Timestamp = 0
    tag1: Optional[str] = None  # unvalidated, may hold binary noise
    tag2: Optional[str] = None
    isRevoked: bool = False
    feedbackFile: Optional[FeedbackFile] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> FeedbackRecord:
        feedback_file = data.get("feedbackFile")
        return cls(
            id=data["id"],
            score=_to_int(data.get("score")),
            clientAddress=data.get("clientAddress", ""),
            createdAt=_to_int(data.get("createdAt")),
            tag1=data.get("tag1"),
            tag2=data.get("tag2"),
            isRevoked=bool(data.get("isRevoked", False)),
            feedbackFile=FeedbackFile.from_dict(feedback_file) if isinstance(feedback_file, dict) else None,
        )


@dataclass
class GlobalStats:
    """Subgraph-wide counters (the ``globalStats`` singleton)."""
    totalAgents: int = 0
    totalFeedback: int = 0

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> GlobalStats:
        return cls(
            totalAgents=_to_int(data.get("totalAgents")),
            totalFeedback=_to_int(data.get("totalFeedback")),
        )


@dataclass
class AgentFilters:
    """Filters accepted by the agent listing."""
    search: Optional[str] = None  # case-insensitive substring of the agent name
    has_reviews: bool = False
    has_endpoint: bool = False  # MCP or A2A endpoint

    @property
    def is_active(self) -> bool:
        return bool((self.search and self.search.strip()) or self.has_reviews or self.has_endpoint)


@dataclass
class AgentDetail:
    """Result of a detail lookup. ``agent`` is None when the id is unknown."""
    agent: Optional[AgentRecord] = None
    feedback: List[FeedbackRecord] = field(default_factory=list)

    @property
    def found(self) -> bool:
        return self.agent is not None
