"""Timestamp formatting helpers."""

from datetime import datetime

DP19 = "%Y-%m-%d %H:%M:%S"


def to_dp19(epoch_millis: int) -> str:
    """Format epoch milliseconds as ``YYYY-MM-DD HH:MM:SS`` in local time."""
    return datetime.fromtimestamp(epoch_millis / 1000).strftime(DP19)
