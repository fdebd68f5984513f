"""
Shared fixtures: subgraph-shaped payloads and an in-memory subgraph.
"""

import re
from typing import Any, Dict, List

import pytest


def make_agent_data(token_id: int, created_at: int = 1700000000, **overrides) -> Dict[str, Any]:
    data = {
        'id': f'11155111:{token_id}',
        'chainId': '11155111',
        'agentId': str(token_id),
        'owner': '0x5aaeb6053f3e94c9b9a09f33669435e7ef1beaed',
        'agentURI': f'ipfs://bafkreiagent{token_id}',
        'createdAt': str(created_at),
        'updatedAt': str(created_at + 100),
        'totalFeedback': '0',
        'registrationFile': {
            'name': f'Agent {token_id}',
            'description': 'Test agent',
            'image': None,
            'mcpEndpoint': None,
            'a2aEndpoint': None,
            'supportedTrusts': ['reputation'],
        },
    }
    data.update(overrides)
    return data


def make_feedback_data(index: int, score: int, revoked: bool = False, **overrides) -> Dict[str, Any]:
    data = {
        'id': f'11155111:42:0xclient:{index}',
        'score': str(score),
        'tag1': 'enterprise',
        'tag2': None,
        'clientAddress': '0xabcdef0123456789abcdef0123456789abcdef01',
        'createdAt': '1704412800',
        'isRevoked': revoked,
        'feedbackFile': {
            'text': 'Solid agent',
            'capability': 'tools',
            'skill': 'python',
        },
    }
    data.update(overrides)
    return data


class FakeSubgraph:
    """Answers agent listing queries from a fixed list, honoring first/skip."""

    def __init__(self, agents: List[Dict[str, Any]]):
        self.agents = sorted(agents, key=lambda a: int(a['createdAt']), reverse=True)
        self.queries: List[str] = []

    def query(self, query: str) -> Dict[str, Any]:
        self.queries.append(query)
        first = int(re.search(r'first:\s*(\d+)', query).group(1))
        skip_match = re.search(r'skip:\s*(\d+)', query)
        skip = int(skip_match.group(1)) if skip_match else 0
        return {'agents': self.agents[skip:skip + first]}


@pytest.fixture
def agent_data():
    return make_agent_data(42)


@pytest.fixture
def feedback_data():
    return [
        make_feedback_data(1, 80),
        make_feedback_data(2, 90),
        make_feedback_data(3, 100),
    ]


@pytest.fixture
def fake_subgraph():
    agents = [make_agent_data(i, created_at=1700000000 + i * 60) for i in range(1, 61)]
    return FakeSubgraph(agents)
