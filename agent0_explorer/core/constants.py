"""
Fixed values for the Agent0 subgraph and the explorer views.
"""

# Agent0's public subgraph on Ethereum Sepolia
DEFAULT_SUBGRAPH_URL = (
    "https://gateway.thegraph.com/api/00a452ad3cd1900273ea62c1bf283f93"
    "/subgraphs/id/6wQRC7geo9XYAhckfmfo8kbMRLeWU8KQd3XsJqFKmZLT"
)

# Environment variable that overrides DEFAULT_SUBGRAPH_URL
SUBGRAPH_URL_ENV = "AGENT0_SUBGRAPH_URL"

DEFAULT_TIMEOUT = 30  # seconds

# Page sizes offered by the listing view (multiples of 3 for the grid)
PAGE_SIZES = (12, 24, 48, 99)
DEFAULT_PAGE_SIZE = 24

# Most recent feedback entries fetched for the detail view
DETAIL_FEEDBACK_LIMIT = 50

# The Graph caps `first` at 1000 per query
MAX_PAGE_SIZE = 1000

# Trust labels shown on a listing card
CARD_TRUST_LIMIT = 3
