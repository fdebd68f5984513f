"""
GraphQL query construction for the Agent0 subgraph.

Filters are built as a small expression tree and serialized recursively. The
Graph does not allow an ``or`` list to sit next to other keys in the same
``where`` object, so every boolean group is rendered as its own object and
multiple conditions are always joined through an explicit ``and`` list.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence, Union

from .constants import DETAIL_FEEDBACK_LIMIT, MAX_PAGE_SIZE
from .models import AgentFilters, AgentId


@dataclass(frozen=True)
class Condition:
    """Leaf filter: remote filter keys mapped to literal values."""
    fields: Dict[str, Any]

    def to_graphql(self) -> str:
        return _format_object(self.fields)


@dataclass(frozen=True)
class And:
    """All children must match."""
    children: Sequence[Expression] = field(default_factory=tuple)

    def to_graphql(self) -> str:
        return _format_group("and", self.children)


@dataclass(frozen=True)
class Or:
    """At least one child must match."""
    children: Sequence[Expression] = field(default_factory=tuple)

    def to_graphql(self) -> str:
        return _format_group("or", self.children)


Expression = Union[Condition, And, Or]


def _format_group(operator: str, children: Sequence[Expression]) -> str:
    if not children:
        raise ValueError(f"'{operator}' group needs at least one condition")
    return f"{{ {operator}: [{', '.join(child.to_graphql() for child in children)}] }}"


def _format_object(fields: Dict[str, Any]) -> str:
    if not fields:
        raise ValueError("Filter object needs at least one field")
    body = ", ".join(f"{key}: {format_value(value)}" for key, value in fields.items())
    return f"{{ {body} }}"


def format_value(value: Any) -> str:
    """Render a Python value as a GraphQL input literal.

    Strings go through JSON string encoding, which escapes quotes, backslashes
    and control characters; the result is also a valid GraphQL string literal.
    """
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, int):
        return str(value)
    if isinstance(value, str):
        return json.dumps(value, ensure_ascii=False)
    if isinstance(value, dict):
        return _format_object(value)
    if isinstance(value, (list, tuple)):
        return f"[{', '.join(format_value(item) for item in value)}]"
    if isinstance(value, (Condition, And, Or)):
        return value.to_graphql()
    raise TypeError(f"Unsupported filter value type: {type(value)!r}")


def combine(conditions: Sequence[Expression]) -> Optional[Expression]:
    """Join conditions: none -> no filter, one -> itself, more -> an ``and`` group."""
    if not conditions:
        return None
    if len(conditions) == 1:
        return conditions[0]
    return And(tuple(conditions))


def build_agent_filter(filters: Optional[AgentFilters]) -> Optional[Expression]:
    """Translate listing filters into a single ``where`` expression."""
    if filters is None:
        return None

    conditions: List[Expression] = []

    search = (filters.search or "").strip()
    if search:
        conditions.append(Condition({"registrationFile_": {"name_contains_nocase": search}}))

    if filters.has_reviews:
        conditions.append(Condition({"totalFeedback_gt": 0}))

    if filters.has_endpoint:
        conditions.append(Or((
            Condition({"registrationFile_": {"mcpEndpoint_not": None}}),
            Condition({"registrationFile_": {"a2aEndpoint_not": None}}),
        )))

    return combine(conditions)


def _where_argument(where: Optional[Expression]) -> str:
    return f"where: {where.to_graphql()}" if where is not None else ""


def _check_page(first: int, skip: int) -> None:
    if first < 1 or first > MAX_PAGE_SIZE:
        raise ValueError(f"first must be between 1 and {MAX_PAGE_SIZE}, got {first}")
    if skip < 0:
        raise ValueError(f"skip must be non-negative, got {skip}")


REGISTRATION_FILE_FIELDS = ("name", "description", "image", "mcpEndpoint", "a2aEndpoint", "supportedTrusts")

# Detail view also shows ENS name and agent wallet
DETAIL_REGISTRATION_FILE_FIELDS = REGISTRATION_FILE_FIELDS + ("ens", "agentWallet")


def _agent_fields(registration_fields: Sequence[str] = REGISTRATION_FILE_FIELDS) -> str:
    reg_lines = "".join(f"\n          {name}" for name in registration_fields)
    return f"""
        id
        chainId
        agentId
        owner
        agentURI
        createdAt
        updatedAt
        totalFeedback
        registrationFile {{{reg_lines}
        }}"""


FEEDBACK_FIELDS = """
          id
          score
          tag1
          tag2
          clientAddress
          createdAt
          isRevoked
          feedbackFile {
            text
            capability
            skill
          }"""


def build_agents_query(first: int, skip: int = 0, where: Optional[Expression] = None) -> str:
    """Paginated agent listing, newest first.

    Ordering by ``createdAt`` desc is fixed so that pages requested with
    adjacent ``skip`` values neither overlap nor leave gaps.
    """
    _check_page(first, skip)
    return f"""
    {{
      agents(
        first: {first}
        skip: {skip}
        orderBy: createdAt
        orderDirection: desc
        {_where_argument(where)}
      ) {{{_agent_fields()}
      }}
    }}
    """


def build_agent_detail_query(agent_id: AgentId, feedback_limit: int = DETAIL_FEEDBACK_LIMIT) -> str:
    """One agent with its most recent non-revoked feedback."""
    return f"""
    {{
      agent(id: {format_value(agent_id)}) {{{_agent_fields(DETAIL_REGISTRATION_FILE_FIELDS)}
        feedback(
          first: {feedback_limit}
          orderBy: createdAt
          orderDirection: desc
          where: {{ isRevoked: false }}
        ) {{{FEEDBACK_FIELDS}
        }}
      }}
    }}
    """


def build_global_stats_query() -> str:
    return """
    {
      globalStats(id: "global") {
        totalAgents
        totalFeedback
      }
    }
    """


def build_agent_ids_query(
    where: Optional[Expression] = None,
    after_id: Optional[str] = None,
    first: int = MAX_PAGE_SIZE,
) -> str:
    """Id-only page used for counting.

    Walks the result set by ``id`` with an ``id_gt`` cursor instead of ``skip``,
    which The Graph limits. The cursor is ANDed with the listing filter.
    """
    _check_page(first, 0)
    conditions: List[Expression] = [where] if where is not None else []
    if after_id is not None:
        conditions.append(Condition({"id_gt": after_id}))
    return f"""
    {{
      agents(
        first: {first}
        orderBy: id
        orderDirection: asc
        {_where_argument(combine(conditions))}
      ) {{
        id
      }}
    }}
    """
