"""
Display helpers for agent and feedback records.

Pure functions only; nothing here touches the network.
"""

from __future__ import annotations

import math
from datetime import datetime, timezone
from typing import Iterable, List, Optional, Union

from eth_utils import is_address, to_checksum_address

from .models import Address, FeedbackRecord, Timestamp

# Share of non-printable characters at which a tag is treated as binary noise
UNREADABLE_THRESHOLD = 0.3


def format_address(address: Address) -> str:
    """Truncate an address to "0x1234...5678"."""
    return f"{address[:6]}...{address[-4:]}"


def checksum_address(address: Address) -> Address:
    """EIP-55 checksummed form of an address; other strings pass through."""
    if address and is_address(address):
        return to_checksum_address(address)
    return address


def format_timestamp(timestamp: Union[Timestamp, str]) -> str:
    """Unix seconds to an en-US date such as "Jan 5, 2024" (UTC)."""
    date = datetime.fromtimestamp(int(timestamp), tz=timezone.utc)
    return f"{date.strftime('%b')} {date.day}, {date.year}"


def is_readable_text(text: Optional[str]) -> bool:
    """Check that a string is mostly printable ASCII.

    Some tags in the subgraph hold raw bytes that render as garbage.
    """
    if not text:
        return False
    non_readable = sum(1 for c in text if ord(c) < 32 or ord(c) > 126)
    return non_readable / len(text) < UNREADABLE_THRESHOLD


def readable_tags(feedback: FeedbackRecord) -> List[str]:
    """Tags of a feedback entry that are safe to display."""
    return [tag for tag in (feedback.tag1, feedback.tag2) if is_readable_text(tag)]


def active_feedback(feedback: Iterable[FeedbackRecord]) -> List[FeedbackRecord]:
    """Drop revoked feedback."""
    return [fb for fb in feedback if not fb.isRevoked]


def _round_half_away_from_zero(value: float) -> int:
    return int(math.copysign(math.floor(abs(value) + 0.5), value))


def average_score(feedback: Iterable[FeedbackRecord]) -> Optional[int]:
    """Mean score of non-revoked feedback, rounded; None when there is none."""
    scores = [fb.score for fb in active_feedback(feedback)]
    if not scores:
        return None
    return _round_half_away_from_zero(sum(scores) / len(scores))
