"""Recency policy.

This module contains *no* payload parsing. The ingestion boundary is
responsible for producing usable updates with an epoch timestamp.
"""

from __future__ import annotations


def should_accept_update(*, current_epoch: int, incoming_epoch: int) -> bool:
    """Accept only strictly newer observations.

    Equal epochs are rejected so that redelivering the same batch is a no-op.
    """
    return incoming_epoch > current_epoch


def recent_cutoff(now: float, window_seconds: int) -> int:
    """Records must have ``seen_at_epoch`` strictly greater than this value."""
    return int(now) - window_seconds


def is_recent(seen_at_epoch: int, *, now: float, window_seconds: int) -> bool:
    return seen_at_epoch > recent_cutoff(now, window_seconds)
