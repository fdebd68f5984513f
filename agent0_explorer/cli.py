#!/usr/bin/env python3
"""
agent0-explorer CLI: browse ERC-8004 agents from the Agent0 subgraph.

Commands:
    list - Paginated, filterable agent listing
    show - One agent with its reviews
"""

import argparse
import json
import logging
import sys
from dataclasses import asdict
from typing import Optional

import aiohttp
import requests

from agent0_explorer.core.constants import DEFAULT_PAGE_SIZE, DEFAULT_TIMEOUT, PAGE_SIZES
from agent0_explorer.core.explorer import AgentExplorer
from agent0_explorer.core.subgraph_client import SubgraphError
from agent0_explorer.core.views import DetailPage, ListingPage


def _output(data: dict, args: argparse.Namespace, human_fn=None):
    """Output data as JSON or pretty-printed."""
    if getattr(args, 'json', False) or human_fn is None:
        print(json.dumps(data, indent=2, default=str))
    else:
        human_fn(data)


def _make_explorer(args: argparse.Namespace) -> AgentExplorer:
    return AgentExplorer(subgraph_url=args.subgraph_url, timeout=args.timeout)


def _score_bar(score: int, width: int = 20) -> str:
    filled = max(0, min(width, round(score * width / 100)))
    return f"[{'#' * filled}{'.' * (width - filled)}] {score}/100"


# ─── Commands ──────────────────────────────────────────────────────

def cmd_list(args):
    """Show one page of agents."""
    query = {
        "search": args.search,
        "page": str(args.page),
        "perPage": str(args.per_page),
        "hasReviews": "true" if args.has_reviews else None,
        "hasEndpoint": "true" if args.has_endpoint else None,
    }
    explorer = _make_explorer(args)
    try:
        page: ListingPage = explorer.load_listing(query)
    finally:
        explorer.close()
    result = asdict(page)

    def human(d):
        print(page.summary)
        if d["search"]:
            print(f'Results for "{d["search"]}"')
        print()
        if not d["cards"]:
            print("No agents found")
            return
        for card in d["cards"]:
            badges = []
            if card["hasEndpoint"]:
                badges.append("API")
            if card["feedbackCount"] > 0:
                badges.append(f"{card['feedbackCount']} reviews")
            badge_text = f"  [{', '.join(badges)}]" if badges else ""
            print(f"{card['name']}  (ID: {card['agentId']}){badge_text}")
            if card["description"]:
                print(f"   {card['description']}")
            if card["trusts"]:
                print(f"   Trust: {', '.join(card['trusts'])}")
            print(f"   Owner: {card['owner']}  ·  {card['created']}  ·  {card['href']}")
        if d["totalPages"] > 1:
            print()
            print(f"Page {d['page']} of {d['totalPages']}")

    _output(result, args, human)
    return result


def cmd_show(args):
    """Show one agent and its reviews."""
    explorer = _make_explorer(args)
    try:
        page: Optional[DetailPage] = explorer.load_detail(args.agent_id)
    finally:
        explorer.close()
    if page is None:
        print(f"Agent not found: {args.agent_id}", file=sys.stderr)
        sys.exit(2)
    result = asdict(page)

    def human(d):
        print(d["name"])
        print(f"   {d['id']}")
        if d["averageScore"] is not None:
            print(f"   {_score_bar(d['averageScore'])}  ({d['totalFeedback']} reviews)")
        print()
        print(f"Owner:    {d['owner']}")
        print(f"Created:  {d['created']}")
        if d["trusts"]:
            print(f"Trust:    {', '.join(d['trusts'])}")
        if d["mcpEndpoint"]:
            print(f"MCP:      {d['mcpEndpoint']}")
        if d["a2aEndpoint"]:
            print(f"A2A:      {d['a2aEndpoint']}")
        if d["description"]:
            print()
            print(d["description"])
        print()
        print(f"Reviews ({len(d['reviews'])})")
        if not d["reviews"]:
            print("   No reviews yet")
        for review in d["reviews"]:
            print(f"   {_score_bar(review['score'])}  {review['created']}")
            if review["text"]:
                print(f"      {review['text']}")
            labels = review["tags"] + [v for v in (review["capability"], review["skill"]) if v]
            if labels:
                print(f"      {' · '.join(labels)}")
            print(f"      by {review['reviewer']}")

    _output(result, args, human)
    return result


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="agent0-explorer",
        description="Browse ERC-8004 agents indexed by the Agent0 subgraph",
    )
    parser.add_argument("--json", action="store_true", help="Machine-readable JSON output")
    parser.add_argument("--subgraph-url", default=None, help="Subgraph GraphQL endpoint")
    parser.add_argument("--timeout", type=float, default=DEFAULT_TIMEOUT, help="Request timeout in seconds")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")

    sub = parser.add_subparsers(dest="command", help="Available commands")

    # list
    p = sub.add_parser("list", help="List agents")
    p.add_argument("-s", "--search", default=None, help="Case-insensitive name search")
    p.add_argument("-p", "--page", type=int, default=1, help="Page number (default: 1)")
    p.add_argument("-n", "--per-page", type=int, default=DEFAULT_PAGE_SIZE, choices=PAGE_SIZES,
                   help=f"Agents per page (default: {DEFAULT_PAGE_SIZE})")
    p.add_argument("--has-reviews", action="store_true", help="Only agents with reviews")
    p.add_argument("--has-endpoint", action="store_true", help="Only agents with an MCP or A2A endpoint")

    # show
    p = sub.add_parser("show", help="Show an agent and its reviews")
    p.add_argument("agent_id", help="Agent ID as chainId:tokenId (may be percent-encoded)")

    return parser


def main(argv: Optional[list] = None) -> Optional[dict]:
    """CLI entry point. Returns result dict for testing."""
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S',
    )

    if not args.command:
        parser.print_help()
        sys.exit(1)

    commands = {
        "list": cmd_list,
        "show": cmd_show,
    }

    try:
        return commands[args.command](args)
    except SubgraphError as e:
        print(f"❌ Subgraph error: {e}", file=sys.stderr)
        sys.exit(1)
    except (requests.RequestException, aiohttp.ClientError) as e:
        print(f"❌ Network error: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
